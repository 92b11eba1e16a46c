import numpy as np
import pytest

from balanced_mssc.metrics.distance_cache import (
    DistanceCache,
    Pair,
    balanced_sizes,
    bmssc_objective,
    sum_to_clusters,
)


def test_squared_distances(four_points):
    cache = DistanceCache(four_points)
    assert cache.n == len(cache) == 4
    assert cache.get(0, 1) == 1.0
    assert cache.get(0, 2) == 100.0
    assert cache.get(0, 3) == 101.0


def test_symmetric_with_zero_diagonal(uneven_points):
    cache = DistanceCache(uneven_points)
    D = cache.matrix
    assert np.array_equal(D, D.T)
    assert np.all(np.diag(D) == 0.0)
    for i, j in [(0, 5), (3, 17), (22, 1)]:
        assert cache.get(i, j) == cache.get(j, i)
        expected = np.sum((uneven_points[i] - uneven_points[j]) ** 2)
        assert cache.get(i, j) == pytest.approx(expected)


def test_cache_is_read_only(four_points):
    cache = DistanceCache(four_points)
    with pytest.raises(ValueError):
        cache.matrix[0, 1] = 5.0
    with pytest.raises(ValueError):
        cache.row(2)[0] = 5.0


def test_ragged_points_rejected():
    with pytest.raises(ValueError):
        DistanceCache([[0.0, 1.0], [2.0], [3.0, 4.0]])


def test_empty_and_non_finite_points_rejected():
    with pytest.raises(ValueError):
        DistanceCache(np.empty((0, 2)))
    with pytest.raises(ValueError):
        DistanceCache([[0.0, np.nan], [1.0, 1.0]])


def test_one_dimensional_input_is_a_column():
    cache = DistanceCache([0.0, 1.0, 3.0])
    assert cache.get(0, 2) == 9.0


def test_from_matrix_validates():
    D = np.array([[0.0, 2.0], [2.0, 0.0]])
    assert DistanceCache.from_matrix(D).get(1, 0) == 2.0
    with pytest.raises(ValueError):
        DistanceCache.from_matrix(np.array([[0.0, 1.0], [2.0, 0.0]]))
    with pytest.raises(ValueError):
        DistanceCache.from_matrix(np.ones((2, 3)))


def test_ranked_neighbours(four_points):
    cache = DistanceCache(four_points)
    ranked = cache.ranked_neighbours(0)
    assert [p.index for p in ranked] == [1, 2, 3]
    assert [p.value for p in ranked] == [1.0, 100.0, 101.0]
    assert ranked[0] < ranked[1]
    assert isinstance(ranked[0], Pair)


def test_ranking_excludes_self_even_with_duplicates():
    cache = DistanceCache([[0.0], [0.0], [5.0]])
    table = cache.ranking()
    assert table.shape == (3, 2)
    for p in range(3):
        assert p not in table[p]
    assert table[2].tolist() == [0, 1]


@pytest.mark.parametrize(
    "n, k, expected",
    [(9, 3, [3, 3, 3]), (10, 3, [4, 3, 3]), (11, 3, [4, 4, 3]), (5, 5, [1] * 5), (7, 1, [7])],
)
def test_balanced_sizes(n, k, expected):
    sizes = balanced_sizes(n, k)
    assert sizes.tolist() == expected
    assert sizes.sum() == n


def test_balanced_sizes_rejects_impossible_splits():
    with pytest.raises(ValueError):
        balanced_sizes(3, 4)
    with pytest.raises(ValueError):
        balanced_sizes(3, 0)


def test_objective_of_the_four_point_optimum(four_points):
    cache = DistanceCache(four_points)
    # each cluster: one pair at squared distance 1, divided by size 2
    assert bmssc_objective(cache, np.array([0, 0, 1, 1])) == pytest.approx(1.0)
    assert bmssc_objective(cache.matrix, np.array([0, 1, 0, 1])) == pytest.approx(100.0)


def test_sum_to_clusters(four_points):
    sc = sum_to_clusters(DistanceCache(four_points), np.array([0, 0, 1, 1]), 2)
    assert sc[0].tolist() == [1.0, 201.0]
    assert sc[3].tolist() == [201.0, 1.0]
