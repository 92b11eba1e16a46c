from __future__ import annotations

"""distance_cache.py

Pre-computed squared Euclidean distances between every pair of points,
together with the brute-force objective helpers the solvers are checked
against.

The cache is built once in O(n^2) time and memory and never mutates
afterwards: the underlying buffer is flagged read-only, so an accidental
write from a solver raises instead of corrupting every solution that
shares the cache.

Example
-------
>>> cache = DistanceCache([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0]])
>>> cache.get(0, 2)
100.0
>>> [p.index for p in cache.ranked_neighbours(0)]
[1, 2]
"""

from dataclasses import dataclass
import logging

import numpy as np

from .distance_metrics import as_points, compute_squared_euclidean_distances

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, order=True)
class Pair:
    """A neighbour of some reference point, ordered by distance first."""
    value   : float
    index   : int


class DistanceCache:
    """Symmetric, immutable table of squared Euclidean distances.

    Parameters
    ----------
    points : array-like, shape (n, d)
        Point coordinates. Every row must have the same number of
        coordinates.
    """

    def __init__(self, points) -> None:
        X = as_points(points)
        D = compute_squared_euclidean_distances(X)

        # mirror the upper triangle so get(i, j) and get(j, i) are bit-identical
        upper = np.triu(D, k=1)
        D = upper + upper.T
        D.flags.writeable = False

        self._points : np.ndarray = X
        self._D      : np.ndarray = D
        _LOG.debug("Distance cache built for %d points in %d dimensions", *X.shape)

    @classmethod
    def from_matrix(cls, D: np.ndarray) -> "DistanceCache":
        """Wrap an existing square matrix of squared distances."""
        D = np.array(D, dtype=float)
        if D.ndim != 2 or D.shape[0] != D.shape[1]:
            raise ValueError("D must be a square distance matrix.")
        if not np.allclose(D, D.T):
            raise ValueError("D must be symmetric.")
        if np.any(np.diag(D) != 0):
            raise ValueError("D must have a zero diagonal.")

        self = cls.__new__(cls)
        upper = np.triu(D, k=1)
        D = upper + upper.T
        D.flags.writeable = False
        self._points = None
        self._D = D
        return self

    # ____________ access ____________
    @property
    def n(self) -> int:
        return self._D.shape[0]

    @property
    def matrix(self) -> np.ndarray:
        """Read-only ``(n, n)`` view of all squared distances."""
        return self._D

    @property
    def points(self) -> np.ndarray | None:
        return self._points

    def get(self, i: int, j: int) -> float:
        return float(self._D[i, j])

    def row(self, i: int) -> np.ndarray:
        return self._D[i]

    def __len__(self) -> int:
        return self.n

    # ____________ ranked neighbours ____________
    def ranking(self) -> np.ndarray:
        """
        Return an ``(n, n-1)`` table whose row *p* lists every other point
        by ascending distance to *p* (ties keep index order).
        """
        order = np.argsort(self._D, axis=1, kind="stable")
        n = self.n
        # each point is its own nearest neighbour (distance 0); drop it
        # explicitly so duplicate points cannot displace it
        mask = order != np.arange(n)[:, None]
        return order[mask].reshape(n, n - 1)

    def ranked_neighbours(self, p: int) -> list[Pair]:
        row = self._D[p]
        order = np.argsort(row, kind="stable")
        return [Pair(value=float(row[q]), index=int(q)) for q in order if q != p]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={self.n})"


# --------------------------------------------------------------------------- #
#                      -----  brute-force helpers  -----                      #
# --------------------------------------------------------------------------- #

def balanced_sizes(n_points: int, n_clusters: int) -> np.ndarray:
    """
    Target cluster sizes of a balanced partition.

    The first ``n_points % n_clusters`` clusters receive one extra point.
    """
    if n_clusters < 1:
        raise ValueError(f"n_clusters must be >= 1, got {n_clusters}")
    if n_clusters > n_points:
        raise ValueError(
            f"Cannot split N={n_points} points into K={n_clusters} non-empty clusters"
        )
    base, remainder = divmod(n_points, n_clusters)
    sizes = np.full(n_clusters, base, dtype=np.int64)
    sizes[:remainder] += 1
    return sizes


def bmssc_objective(D: np.ndarray | DistanceCache, labels: np.ndarray) -> float:
    """
    Balanced sum-of-squares objective computed straight from pairwise
    distances: for every cluster, the sum of squared distances over its
    unordered pairs divided by the cluster size.

    Args:
        D: ``(n, n)`` squared distances or a :class:`DistanceCache`.
        labels: length-n integer cluster labels.
    Returns:
        The objective value (lower = tighter clusters).
    """
    if isinstance(D, DistanceCache):
        D = D.matrix
    labels = np.asarray(labels)

    total = 0.0
    for lbl in np.unique(labels):
        idx = np.flatnonzero(labels == lbl)
        sub = D[np.ix_(idx, idx)]
        # each unordered pair appears twice in the full sub-matrix
        total += sub.sum() / 2.0 / idx.size
    return float(total)


def sum_to_clusters(D: np.ndarray | DistanceCache, labels: np.ndarray, n_clusters: int) -> np.ndarray:
    """
    Brute-force ``(n, k)`` table of distance sums from every point to every
    cluster.
    """
    if isinstance(D, DistanceCache):
        D = D.matrix
    labels = np.asarray(labels)
    sc = np.zeros((D.shape[0], n_clusters))
    for c in range(n_clusters):
        sc[:, c] = D[:, labels == c].sum(axis=1)
    return sc
