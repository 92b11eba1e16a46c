"""
Basic Variable Neighbourhood Search for balanced minimum sum-of-squares
clustering ("less is more" VNS).

State machine of one run::

    Init -> LocalOptimum -> {Shaken -> LocalOptimum}* -> Done

Algorithm:
  1) Random balanced start, descended to a local optimum: the first *best*.
  2) Until the budget is spent: copy *best*, shake it with ``k`` random
     exchanges, descend again.
  3) Strict improvement replaces *best* and resets ``k = k_min``; otherwise
     ``k += k_step``, wrapping back to ``k_min`` past ``k_max`` so the sweep
     keeps cycling until the time runs out.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging

import numpy as np

from ..core._config import VNSConfig
from ..metrics.distance_cache import DistanceCache, balanced_sizes
from .local_search import LocalSearch
from .park_miller import ParkMiller
from .shaking import shake
from .solution import Solution
from .timer import Budget

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TracePoint:
    """The best objective right after *iteration* (0 = initial descent)."""
    iteration   : int
    elapsed     : float
    objective   : float
    k           : int


@dataclass(slots=True)
class VNSResult:
    solution    : Solution
    iterations  : int
    elapsed     : float
    trace       : List[TracePoint] = field(default_factory=list)

    @property
    def objective(self) -> float:
        return self.solution.objective

    @property
    def labels(self) -> np.ndarray:
        return self.solution.assignment.copy()


def balanced_start(distances: DistanceCache, n_clusters: int, generator: ParkMiller) -> Solution:
    """Balanced random start: shuffle the points, cut them into blocks."""
    n = distances.n
    order = list(range(n))
    generator.shuffle(order)

    labels = np.empty(n, dtype=np.int64)
    start = 0
    for c, size in enumerate(balanced_sizes(n, n_clusters)):
        labels[order[start:start + size]] = c
        start += size

    solution = Solution(n_clusters, n, distances)
    solution.set_assignment(labels)
    return solution


class VNSHeuristic:
    """VNS controller owning one generator, one budget and one run's solutions.

    Parameters
    ----------
    distances : DistanceCache
        Shared squared distances of the instance.
    config : VNSConfig
        Run parameters (``n_clusters``, budget, neighbourhood schedule, ...).
    generator : ParkMiller, optional
        Source of every random decision; built from ``config.random_state``
        when omitted.
    """

    def __init__(
        self,
        distances: DistanceCache,
        config: VNSConfig,
        generator: Optional[ParkMiller] = None,
    ):
        config.validate(distances.n)
        self.distances = distances
        self.cfg = config
        self.K = config.n_clusters
        self.N = distances.n
        self.generator = generator or ParkMiller(config.random_state or 1)
        self.k_min, self.k_max, self.k_step = config.neighbourhoods(self.N)
        self.k = self.k_min

        self.local_search = LocalSearch(
            self.generator,
            strategy=config.local_search,
            tol=config.tol,
            check_every=config.check_every,
            recompute_every=config.recompute_every,
        )
        self.clock = Budget(config.time_limit, clock=config.clock)

    # ------------------------------------------------------------------ #
    # Init                                                               #
    # ------------------------------------------------------------------ #
    def initial_solution(self) -> Solution:
        return balanced_start(self.distances, self.K, self.generator)

    # ------------------------------------------------------------------ #
    # main loop                                                          #
    # ------------------------------------------------------------------ #
    def _descend(self, solution: Solution) -> None:
        self.local_search.improve(solution, self.clock, max_moves=self.cfg.max_ls_moves)

    def _next_k(self) -> None:
        self.k += self.k_step
        if self.k > self.k_max:
            self.k = self.k_min

    def _should_verify(self, iteration: int) -> bool:
        every = self.cfg.verify_every
        return every is not None and iteration % every == 0

    def solve(self, initial: Optional[Solution] = None, init_time: float = 0.0) -> VNSResult:
        """
        Run the VNS until the budget (or ``max_iterations``) is exhausted.

        Parameters
        ----------
        initial : Solution, optional
            Starting partition, e.g. loaded from a snapshot. A random balanced
            one is built otherwise.
        init_time : float
            Seconds already spent producing *initial*; added to the reported
            ``elapsed`` of the best solution.
        """
        self.clock.start()
        max_iter = self.cfg.max_iterations

        best = initial.copy() if initial is not None else self.initial_solution()
        if best.distances is not self.distances or best.n_clusters != self.K:
            raise ValueError("initial solution does not belong to this instance")
        if initial is not None:
            counts = np.bincount(best.assignment, minlength=self.K)
            expected = balanced_sizes(self.N, self.K)
            if not np.array_equal(counts, expected):
                raise ValueError(
                    f"initial solution has cluster sizes {counts.tolist()}, "
                    f"expected the balanced sizes {expected.tolist()}"
                )
        if self.cfg.verify_every is not None:
            best.verify()

        self._descend(best)
        best.elapsed = init_time + self.clock.elapsed()
        trace = [TracePoint(0, best.elapsed, best.objective, self.k_min)]
        _LOG.info("Initial solution value: %.5f", best.objective)

        self.k = self.k_min
        current = best.copy()
        iteration = 0
        while not self.clock.exhausted():
            if max_iter is not None and iteration >= max_iter:
                break
            iteration += 1

            current.assign_from(best)
            shake(current, self.k, self.generator)
            self._descend(current)

            if self._should_verify(iteration):
                current.verify()

            if current.objective < best.objective - self.cfg.tol:
                best.assign_from(current)
                best.elapsed = init_time + self.clock.elapsed()
                trace.append(TracePoint(iteration, best.elapsed, best.objective, self.k))
                _LOG.info(
                    "Iteration %d: found new best solution = %.5f (k=%d)",
                    iteration, best.objective, self.k,
                )
                self.k = self.k_min
            else:
                self._next_k()

            if self._should_verify(iteration):
                best.verify()

        elapsed = init_time + self.clock.elapsed()
        _LOG.info(
            "VNS finished: %d iterations, best value %.5f, %.4fs",
            iteration, best.objective, elapsed,
        )
        return VNSResult(solution=best, iterations=iteration, elapsed=elapsed, trace=trace)
