import numpy as np
from typing import Callable, Literal, Optional
import logging

from .park_miller import ParkMiller
from .solution import Solution
from .timer import Budget

_LOG = logging.getLogger(__name__)


Strategy = Literal["first", "best"]


class LocalSearch:
    """
    Swap-neighbourhood descent for balanced clustering.

    Algorithm (both strategies):
      1) Evaluate exchanges (i, j) of two points in different clusters with
         the O(1) delta of :meth:`Solution.swap_delta`.
      2) "first": walk the points in a freshly shuffled order and apply the
         first exchange whose delta is below ``-tol``.
         "best": scan every pair and apply the most negative delta.
      3) Repeat until no exchange improves or the budget runs out.

    Pairs are evaluated one row at a time: for the point at position ``r`` of
    the scan order, all partners at later positions are scored in a single
    vectorised step. The budget is polled every ``check_every`` rows.
    """

    def __init__(
        self,
        generator: ParkMiller,
        strategy: Strategy = "first",
        tol: float = 1e-9,
        check_every: int = 16,
        recompute_every: int = 0,
    ):
        """
        Parameters
        ----------
        generator : ParkMiller
            Source of the scan permutations ("first" strategy only).
        strategy : {"first", "best"}
            First- or best-improvement.
        tol : float
            A swap improves only if its delta is below ``-tol``.
        check_every : int
            Number of scanned rows between two budget polls.
        recompute_every : int
            Forwarded to :meth:`Solution.apply_swap`; 0 keeps the incremental
            objective.
        """
        if check_every < 1:
            raise ValueError(f"check_every must be >= 1, got {check_every}")
        self.generator = generator
        self.tol = tol
        self.check_every = check_every
        self.recompute_every = recompute_every
        self.strategy = strategy

        if strategy == "first":
            self._step: Callable[[Solution, Budget], bool] = self._first_improvement
        elif strategy == "best":
            self._step = self._best_improvement
        else:
            raise ValueError(f"Unknown local search strategy: {strategy}")

    # ------------------------------------------------------------------ #
    # public API                                                         #
    # ------------------------------------------------------------------ #
    def try_improve(self, solution: Solution, clock: Budget) -> bool:
        """Apply at most one improving swap; ``True`` if one was applied."""
        return self._step(solution, clock)

    def improve(
        self,
        solution: Solution,
        clock: Budget,
        max_moves: Optional[int] = None,
    ) -> int:
        """
        Descend to a local optimum (or until the budget / *max_moves* stops
        the descent) and return the number of applied swaps.
        """
        moves = 0
        start = solution.objective
        while not clock.exhausted():
            if max_moves is not None and moves >= max_moves:
                break
            if not self.try_improve(solution, clock):
                break
            moves += 1

        _LOG.debug(
            "Local search (%s): %d swaps, objective %.6f -> %.6f",
            self.strategy, moves, start, solution.objective,
        )
        return moves

    # ------------------------------------------------------------------ #
    # strategies                                                         #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _row_deltas(solution: Solution, i: int, js: np.ndarray) -> np.ndarray:
        """Deltas of swapping *i* with each of *js*; ``inf`` for same-cluster partners."""
        labels = solution.assignment
        sc = solution.sc
        sizes = solution.cluster_sizes
        a = labels[i]
        b = labels[js]
        d_ij = solution.distances.row(i)[js]

        with np.errstate(invalid="ignore"):
            delta = (
                (sc[js, a] - sc[i, a] - d_ij) / sizes[a]
                + (sc[i, b] - sc[js, b] - d_ij) / sizes[b]
            )
        delta[b == a] = np.inf
        return delta

    def _first_improvement(self, solution: Solution, clock: Budget) -> bool:
        order = list(range(solution.n_points))
        self.generator.shuffle(order)
        order = np.asarray(order, dtype=np.int64)

        for r in range(order.size - 1):
            if r % self.check_every == 0 and clock.exhausted():
                return False
            i = int(order[r])
            js = order[r + 1:]
            delta = self._row_deltas(solution, i, js)
            hits = np.flatnonzero(delta < -self.tol)
            if hits.size:
                h = hits[0]
                solution.apply_swap(
                    i, int(js[h]), float(delta[h]), recompute_every=self.recompute_every
                )
                return True
        return False

    def _best_improvement(self, solution: Solution, clock: Budget) -> bool:
        best_delta = -self.tol
        best_i = best_j = -1
        everyone = np.arange(solution.n_points)

        for i in range(solution.n_points - 1):
            if i % self.check_every == 0 and clock.exhausted():
                return False
            js = everyone[i + 1:]
            delta = self._row_deltas(solution, i, js)
            h = int(np.argmin(delta))
            if delta[h] < best_delta:
                best_delta = float(delta[h])
                best_i, best_j = i, int(js[h])

        if best_i < 0:
            return False
        solution.apply_swap(best_i, best_j, best_delta, recompute_every=self.recompute_every)
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(strategy={self.strategy!r}, tol={self.tol})"
