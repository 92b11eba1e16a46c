import numpy as np
import pytest

from balanced_mssc.exceptions import InvariantViolation
from balanced_mssc.metrics.distance_cache import DistanceCache, bmssc_objective, sum_to_clusters
from balanced_mssc.solvers.solution import Solution, check_swap


def _random_cross_pair(sol, rng):
    while True:
        i, j = rng.integers(sol.n_points, size=2)
        if sol.assignment[i] != sol.assignment[j]:
            return int(i), int(j)


def test_new_solution_is_empty(four_points):
    cache = DistanceCache(four_points)
    sol = Solution(2, 4, cache)
    assert sol.cluster_sizes.tolist() == [0.0, 0.0]
    assert sol.sc.shape == (4, 2)
    assert sol.objective == 0.0


def test_dimension_mismatch_rejected(four_points):
    cache = DistanceCache(four_points)
    with pytest.raises(ValueError):
        Solution(2, 5, cache)
    with pytest.raises(ValueError):
        Solution(5, 4, cache)


def test_set_assignment_builds_cache_and_objective(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4)
    assert np.allclose(sol.sc, sum_to_clusters(sol.distances, sol.assignment, 4))
    assert sol.objective == pytest.approx(bmssc_objective(sol.distances, sol.assignment))
    assert sol.cluster_sizes.tolist() == [6, 6, 6, 5]
    sol.verify()


def test_set_assignment_validates_labels(four_points):
    sol = Solution(2, 4, DistanceCache(four_points))
    with pytest.raises(ValueError):
        sol.set_assignment(np.array([0, 1, 2, 0]))
    with pytest.raises(ValueError):
        sol.set_assignment(np.array([0, 1, 0]))
    with pytest.raises(TypeError):
        sol.set_assignment(np.array([0.0, 1.0, 0.0, 1.0]))


def test_four_point_objective(four_points):
    sol = Solution(2, 4, DistanceCache(four_points))
    sol.set_assignment(np.array([0, 0, 1, 1]))
    assert sol.objective == pytest.approx(1.0)
    sol.set_assignment(np.array([0, 1, 0, 1]))
    assert sol.objective == pytest.approx(100.0)


def test_swap_delta_matches_full_recomputation(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4, seed=3)
    rng = np.random.default_rng(0)
    for _ in range(25):
        i, j = _random_cross_pair(sol, rng)
        labels = sol.assignment.copy()
        labels[i], labels[j] = labels[j], labels[i]
        expected = bmssc_objective(sol.distances, labels) - sol.objective
        assert sol.swap_delta(i, j) == pytest.approx(expected, abs=1e-9)


def test_swaps_keep_every_invariant(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4, seed=5)
    sizes = sol.cluster_sizes.copy()
    rng = np.random.default_rng(1)
    for _ in range(200):
        i, j = _random_cross_pair(sol, rng)
        sol.apply_swap(i, j)
    assert np.array_equal(sol.cluster_sizes, sizes)
    assert np.abs(sol.sc - sum_to_clusters(sol.distances, sol.assignment, 4)).max() < 1e-6
    assert sol.objective == pytest.approx(bmssc_objective(sol.distances, sol.assignment), abs=1e-6)
    sol.verify()


def test_single_swap_passes_check_swap(blobs, make_solution):
    sol = make_solution(blobs, 4, seed=2)
    before = sol.copy()
    i, j = _random_cross_pair(sol, np.random.default_rng(4))
    delta = sol.swap_delta(i, j)
    sol.apply_swap(i, j, delta)
    check_swap(before, sol, delta)
    assert sol.assignment[i] == before.assignment[j]
    assert sol.assignment[j] == before.assignment[i]


def test_check_swap_reports_wrong_delta(blobs, make_solution):
    sol = make_solution(blobs, 4, seed=2)
    before = sol.copy()
    i, j = _random_cross_pair(sol, np.random.default_rng(4))
    delta = sol.swap_delta(i, j)
    sol.apply_swap(i, j, delta)
    with pytest.raises(InvariantViolation):
        check_swap(before, sol, delta + 1.0)


def test_same_cluster_swap_rejected(four_points):
    sol = Solution(2, 4, DistanceCache(four_points))
    sol.set_assignment(np.array([0, 0, 1, 1]))
    with pytest.raises(ValueError):
        sol.apply_swap(0, 1)
    with pytest.raises(ValueError):
        sol.swap_delta(2, 3)


def test_recompute_cadence(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4)
    rng = np.random.default_rng(9)
    for expected in [1, 2, 0, 1, 2, 0]:
        i, j = _random_cross_pair(sol, rng)
        sol.apply_swap(i, j, recompute_every=3)
        assert sol.swaps_since_recompute == expected
    sol.verify()


def test_copy_is_independent(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4)
    snapshot = sol.copy()
    i, j = _random_cross_pair(sol, np.random.default_rng(2))
    sol.apply_swap(i, j)
    assert not np.array_equal(sol.assignment, snapshot.assignment)
    assert not np.array_equal(sol.sc, snapshot.sc)
    assert snapshot.distances is sol.distances
    snapshot.verify()


def test_assign_from(uneven_points, make_solution):
    a = make_solution(uneven_points, 4, seed=1)
    b = make_solution(uneven_points, 4, seed=2)
    b.elapsed = 3.5
    a.assign_from(b)
    assert np.array_equal(a.assignment, b.assignment)
    assert np.array_equal(a.sc, b.sc)
    assert a.objective == b.objective
    assert a.elapsed == 3.5
    # later changes to b do not leak into a
    b.sc[0, 0] += 1.0
    assert a.sc[0, 0] != b.sc[0, 0]


def test_assign_from_rejects_other_shapes(uneven_points, make_solution):
    with pytest.raises(ValueError):
        make_solution(uneven_points, 4).assign_from(make_solution(uneven_points, 3))


def test_verify_flags_cache_drift(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4)
    sol.sc[3, 1] += 1e-3
    with pytest.raises(InvariantViolation, match=r"sc\[3\]\[1\]"):
        sol.verify()


def test_verify_flags_objective_drift(uneven_points, make_solution):
    sol = make_solution(uneven_points, 4)
    sol.objective += 1e-3
    with pytest.raises(InvariantViolation, match="objective"):
        sol.verify()


def test_verify_flags_unbalanced_partition(four_points):
    sol = Solution(2, 4, DistanceCache(four_points))
    sol.set_assignment(np.array([0, 0, 0, 1]))
    with pytest.raises(InvariantViolation, match="balanced"):
        sol.verify()
