"""
Incremental representation of one balanced partition.

A :class:`Solution` keeps, next to the assignment, the ``sc`` table
("sum to cluster"): ``sc[p, c]`` is the sum of squared distances from point
*p* to every point currently in cluster *c*. With it, the objective change
of exchanging two points between clusters is O(1) and applying the exchange
is O(n), instead of the O(n^2) full re-evaluation.

Objective (Huygens):

    f = sum_c ( sum_{p in c} sc[p, c] ) / (2 * |c|)
"""
from __future__ import annotations

import logging

import numpy as np

from ..exceptions import InvariantViolation
from ..metrics.distance_cache import (
    DistanceCache,
    balanced_sizes,
    bmssc_objective,
    sum_to_clusters,
)

_LOG = logging.getLogger(__name__)


class Solution:
    """Mutable candidate partition bound to a shared :class:`DistanceCache`.

    Parameters
    ----------
    n_clusters : int
        Number of clusters *k*.
    n_points : int
        Number of points *n*; must match the distance cache.
    distances : DistanceCache
        Shared, read-only distance table.
    """

    def __init__(self, n_clusters: int, n_points: int, distances: DistanceCache):
        if n_points != distances.n:
            raise ValueError(
                f"Distance cache holds {distances.n} points, solution expects {n_points}"
            )
        if not 1 <= n_clusters <= n_points:
            raise ValueError(f"n_clusters must lie in [1, {n_points}], got {n_clusters}")

        self.n_clusters     : int           = n_clusters
        self.n_points       : int           = n_points
        self.distances      : DistanceCache = distances

        self.assignment     : np.ndarray    = np.full(n_points, -1, dtype=np.int64)
        self.cluster_sizes  : np.ndarray    = np.zeros(n_clusters, dtype=float)
        self.sc             : np.ndarray    = np.zeros((n_points, n_clusters), dtype=float)
        self.objective      : float         = 0.0
        self.elapsed        : float         = 0.0

        # applied swaps since the objective was last recomputed from scratch
        self.swaps_since_recompute: int = 0

    # ------------------------------------------------------------------ #
    # wholesale state                                                    #
    # ------------------------------------------------------------------ #
    def set_assignment(self, labels) -> None:
        """Replace the whole assignment and rebuild every derived table."""
        labels = np.asarray(labels)
        if labels.shape != (self.n_points,):
            raise ValueError(
                f"labels must have shape ({self.n_points},), got {labels.shape}"
            )
        if not np.issubdtype(labels.dtype, np.integer):
            raise TypeError("labels must contain integers")
        if labels.size and (labels.min() < 0 or labels.max() >= self.n_clusters):
            raise ValueError(
                "labels outside the expected 0…K-1 range. "
                f"Values range: {labels.min()}...{labels.max()}"
            )

        counts = np.bincount(labels, minlength=self.n_clusters)
        if np.any(counts == 0):
            empty = np.flatnonzero(counts == 0).tolist()
            raise ValueError(f"labels leave clusters {empty} empty")

        self.assignment[:] = labels
        self.cluster_sizes[:] = counts
        self.rebuild_cache()
        self.recompute_objective()

    def rebuild_cache(self) -> None:
        """O(n^2) rebuild of ``sc`` from the current assignment."""
        onehot = np.zeros((self.n_points, self.n_clusters))
        onehot[np.arange(self.n_points), self.assignment] = 1.0
        self.sc = self.distances.matrix @ onehot

    def recompute_objective(self) -> float:
        """Recompute the objective from ``sc`` and the cluster sizes."""
        own = self.sc[np.arange(self.n_points), self.assignment]
        within = np.bincount(self.assignment, weights=own, minlength=self.n_clusters)
        self.objective = float(np.sum(within / (2.0 * self.cluster_sizes)))
        self.swaps_since_recompute = 0
        return self.objective

    def copy(self) -> "Solution":
        other = Solution.__new__(Solution)
        other.n_clusters    = self.n_clusters
        other.n_points      = self.n_points
        other.distances     = self.distances
        other.assignment    = self.assignment.copy()
        other.cluster_sizes = self.cluster_sizes.copy()
        other.sc            = self.sc.copy()
        other.objective     = self.objective
        other.elapsed       = self.elapsed
        other.swaps_since_recompute = self.swaps_since_recompute
        return other

    __copy__ = copy

    def __deepcopy__(self, memo) -> "Solution":
        return self.copy()

    def assign_from(self, other: "Solution") -> None:
        """Overwrite this solution in place with the state of *other*."""
        if (other.n_points, other.n_clusters) != (self.n_points, self.n_clusters):
            raise ValueError(
                "Cannot copy a solution of shape "
                f"(n={other.n_points}, k={other.n_clusters}) into "
                f"(n={self.n_points}, k={self.n_clusters})"
            )
        self.distances      = other.distances
        self.assignment[:]  = other.assignment
        self.cluster_sizes[:] = other.cluster_sizes
        self.sc[:]          = other.sc
        self.objective      = other.objective
        self.elapsed        = other.elapsed
        self.swaps_since_recompute = other.swaps_since_recompute

    # ------------------------------------------------------------------ #
    # swap primitive                                                     #
    # ------------------------------------------------------------------ #
    def members(self, cluster: int) -> np.ndarray:
        return np.flatnonzero(self.assignment == cluster)

    def swap_delta(self, i: int, j: int) -> float:
        """Exact objective change of exchanging the clusters of *i* and *j*."""
        a, b = self.assignment[i], self.assignment[j]
        if a == b:
            raise ValueError(f"Points {i} and {j} are both in cluster {a}")
        d_ij = self.distances.get(i, j)
        sc = self.sc
        return float(
            (sc[j, a] - sc[i, a] - d_ij) / self.cluster_sizes[a]
            + (sc[i, b] - sc[j, b] - d_ij) / self.cluster_sizes[b]
        )

    def apply_swap(
        self,
        i: int,
        j: int,
        delta: float | None = None,
        *,
        recompute_every: int = 0,
    ) -> None:
        """
        Move *i* into the cluster of *j* and vice versa.

        ``sc`` is updated against the pre-swap memberships, the assignment is
        flipped last. With ``recompute_every > 0`` the objective is rebuilt
        from scratch every that-many applied swaps instead of trusting the
        accumulated deltas.
        """
        a, b = int(self.assignment[i]), int(self.assignment[j])
        if a == b:
            raise ValueError(f"Points {i} and {j} are both in cluster {a}")
        if delta is None:
            delta = self.swap_delta(i, j)

        step = self.distances.row(j) - self.distances.row(i)
        self.sc[:, a] += step
        self.sc[:, b] -= step

        self.assignment[i] = b
        self.assignment[j] = a

        self.objective += delta
        self.swaps_since_recompute += 1
        if recompute_every and self.swaps_since_recompute >= recompute_every:
            self.recompute_objective()

    # ------------------------------------------------------------------ #
    # verification                                                       #
    # ------------------------------------------------------------------ #
    def verify(self, tol: float = 1e-6) -> None:
        """
        Compare the incremental state with a full recomputation.

        Raises
        ------
        InvariantViolation
            On any balance, cache or objective mismatch.
        """
        if np.any(self.assignment < 0) or np.any(self.assignment >= self.n_clusters):
            raise InvariantViolation("Assignment contains labels outside 0…K-1")
        expected = balanced_sizes(self.n_points, self.n_clusters)
        counts = np.bincount(self.assignment, minlength=self.n_clusters)
        if not np.array_equal(counts, expected):
            raise InvariantViolation(
                f"Cluster sizes {counts.tolist()} violate the balanced sizes {expected.tolist()}"
            )
        if not np.array_equal(self.cluster_sizes, counts):
            raise InvariantViolation(
                f"Stored cluster sizes {self.cluster_sizes.tolist()} do not match "
                f"the assignment counts {counts.tolist()}"
            )

        sc = sum_to_clusters(self.distances, self.assignment, self.n_clusters)
        bad = np.argwhere(np.abs(sc - self.sc) > tol)
        if bad.size:
            p, c = bad[0]
            raise InvariantViolation(
                f"sc[{p}][{c}] = {self.sc[p, c]!r} but recomputation gives {sc[p, c]!r} "
                f"({len(bad)} entries off)"
            )

        value = bmssc_objective(self.distances, self.assignment)
        if abs(value - self.objective) > tol:
            raise InvariantViolation(
                f"Stored objective {self.objective!r} does not match recalculated value {value!r}"
            )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n={self.n_points}, k={self.n_clusters}, "
            f"objective={self.objective:.6g})"
        )


def check_swap(before: Solution, after: Solution, delta: float, tol: float = 1e-6) -> None:
    """
    Check a single swap step: the objective moved by exactly *delta*, no
    cluster changed size and *after* is internally consistent.
    """
    if abs(after.objective - before.objective - delta) > tol:
        raise InvariantViolation(
            f"Solution value incorrectly updated. Expected: {before.objective + delta!r}, "
            f"Actual: {after.objective!r}"
        )
    counts_before = np.bincount(before.assignment, minlength=before.n_clusters)
    counts_after = np.bincount(after.assignment, minlength=after.n_clusters)
    if not np.array_equal(counts_before, counts_after):
        c = int(np.flatnonzero(counts_before != counts_after)[0])
        raise InvariantViolation(f"Cluster size balance violated for cluster {c}")
    after.verify(tol)
