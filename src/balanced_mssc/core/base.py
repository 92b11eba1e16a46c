from __future__ import annotations          # <- future-proof typing
from abc import ABC, abstractmethod
import logging
import numpy as np

from ._config import BaseConfig, Status
from ..metrics.distance_cache import DistanceCache
from ..solvers.solution import Solution
from ..solvers.vns_heuristic import TracePoint

_LOG = logging.getLogger(__name__)


class BalancedClusterer(ABC):
    """Common interface for all balanced clustering solvers."""

    def __init__(self, config: BaseConfig):
        self.config     : BaseConfig                   = config
        self._labels    : np.ndarray       | None      = None
        self._score     : float            | None      = None
        self._runtime   : float            | None      = None
        self._status    : Status           | None      = None
        self._solution  : Solution         | None      = None
        self._iterations: int                          = 0
        self._trace     : list[TracePoint]             = []

    @abstractmethod
    def fit(
        self,
        X: np.ndarray | None = None,
        *,
        D: np.ndarray | DistanceCache | None = None,
        initial: Solution | None = None,
    ):
        """
        Compute the partition in-place. Either *X* **or** a pre-computed
        squared-distance matrix / :class:`DistanceCache` *D* must be supplied.
        """
        ...

    def fit_predict(self, *args, **kwargs) -> np.ndarray:
        self.fit(*args, **kwargs)
        return self.labels_

    # ____________ Properties for easy access ____________
    @property
    def labels_(self):
        if self._labels is None:
            raise RuntimeError("Call `.fit()` first!")
        return self._labels

    @property
    def score_(self):
        if self._score is None:
            raise RuntimeError("Call `.fit()` first!")
        return self._score

    @property
    def runtime_(self):
        if self._runtime is None:
            raise RuntimeError("Call `.fit()` first!")
        return self._runtime

    @property
    def status_(self) -> str:
        """Status of the solver after fitting."""
        if self._status is None:
            raise RuntimeError("Call `.fit()` first!")
        return self._status.value

    @property
    def solution_(self) -> Solution:
        if self._solution is None:
            raise RuntimeError("Call `.fit()` first!")
        return self._solution

    @property
    def iterations_(self) -> int:
        return self._iterations

    @property
    def trace_(self) -> list[TracePoint]:
        return list(self._trace)

    # ------------ internal helpers (for subclasses) ------------------- #
    @staticmethod
    def _distance_cache(
        X: np.ndarray | None,
        D: np.ndarray | DistanceCache | None,
    ) -> DistanceCache:
        if X is None and D is None:
            raise ValueError("Either X or D must be provided.")
        if isinstance(D, DistanceCache):
            return D
        if D is not None:
            return DistanceCache.from_matrix(D)
        cache = DistanceCache(X)
        _LOG.debug("Distance cache computed for %d points", cache.n)
        return cache

    def _set_solution(self, solution: Solution):
        """Store labels and score of a fitted :class:`Solution`."""
        labels = solution.assignment.copy()
        if labels.ndim != 1:
            raise ValueError("labels must be a 1-D array")
        low, high = labels.min(initial=0), labels.max(initial=-1)
        if low < 0 or high >= self.config.n_clusters:
            raise ValueError("labels outside the expected 0…K-1 range. "
                             f"Values range: {low}...{high}")
        self._solution = solution
        self._labels = labels
        self._score = float(solution.objective)

    def _set_runtime(self, runtime: float):
        if not isinstance(runtime, (int, float)):
            raise TypeError("runtime must be numeric")
        self._runtime = float(runtime) if runtime >= 0 else float("nan")

    def _set_status(self, status: Status | str):
        if not isinstance(status, Status):
            status = Status.from_string(status)
        self._status = status

    # ------------------------------------------------------------------ #
    # nice string representation                                         #
    # ------------------------------------------------------------------ #
    def __repr__(self) -> str:
        cls = self.__class__.__name__
        lab = "unfitted" if self._labels is None else "fitted"
        return f"{cls}(K={self.config.n_clusters}, status={lab})"


__all__ = [
    "BaseConfig",
    "BalancedClusterer",
]
