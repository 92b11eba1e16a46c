import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from balanced_mssc.metrics.distance_cache import DistanceCache, balanced_sizes
from balanced_mssc.solvers.solution import Solution


@pytest.fixture
def four_points():
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


@pytest.fixture
def blobs():
    """60 points in 4 well separated 2-D blobs."""
    rng = np.random.default_rng(7)
    centres = np.array([[0.0, 0.0], [8.0, 0.0], [0.0, 8.0], [8.0, 8.0]])
    return np.vstack([rng.normal(c, 0.6, size=(15, 2)) for c in centres])


@pytest.fixture
def uneven_points():
    """23 points in 3-D, not divisible by 4 clusters."""
    rng = np.random.default_rng(11)
    return rng.uniform(-5, 5, size=(23, 3))


@pytest.fixture
def make_solution():
    """Factory for a Solution holding a shuffled balanced assignment."""
    def _make(points, n_clusters, seed=0):
        cache = DistanceCache(points)
        sizes = balanced_sizes(cache.n, n_clusters)
        labels = np.repeat(np.arange(n_clusters), sizes)
        np.random.default_rng(seed).shuffle(labels)
        sol = Solution(n_clusters, cache.n, cache)
        sol.set_assignment(labels)
        return sol
    return _make
