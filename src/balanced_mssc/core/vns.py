"""
VNS solver as a separate component (Composition over Inheritance).
"""
import numpy as np

from .base import BalancedClusterer
from ._registry import register_solver

from ._config import VNSConfig, Status
from ..metrics.distance_cache import DistanceCache
from ..solvers.park_miller import ParkMiller
from ..solvers.solution import Solution
from ..solvers.vns_heuristic import VNSHeuristic

from typing import Optional
import logging
import time


_LOG = logging.getLogger(__name__)


@register_solver('vns')
class VNSBalancedCluster(BalancedClusterer):
    """Balanced minimum sum-of-squares clustering via basic VNS.

    Parameters
    ----------
    config : VNSConfig
        Budget, neighbourhood schedule and local-search settings.
    generator : ParkMiller, optional
        Shared generator; a fresh one seeded with ``config.random_state``
        is used when omitted.
    """

    def __init__(
            self,
            config : VNSConfig,
            generator : Optional[ParkMiller] = None,
        ):
        super().__init__(config)
        self.cfg = config
        self.generator = generator
        self._model: Optional[VNSHeuristic] = None

    def fit(
            self,
            X: Optional[np.ndarray] = None,
            *,
            D: Optional[np.ndarray | DistanceCache] = None,
            initial: Optional[Solution] = None,
            init_time: float = 0.0,
        ) -> "VNSBalancedCluster":
        if initial is not None and D is None and X is None:
            D = initial.distances
        cache = self._distance_cache(X, D)
        N = cache.n

        # build model --------------------------------------------------------
        self._model = VNSHeuristic(cache, self.cfg, generator=self.generator)

        # solve ------------------------------------------------------------
        _LOG.info(
            "Starting VNS: N=%d, K=%d, time_limit=%s, kmax=%d, kstep=%d",
            N, self.cfg.n_clusters, self.cfg.time_limit,
            self._model.k_max, self._model.k_step,
        )
        t0 = time.perf_counter()
        result = self._model.solve(initial, init_time=init_time)
        runtime = time.perf_counter() - t0

        self._set_solution(result.solution)
        self._iterations = result.iterations
        self._trace = result.trace
        self._set_status(Status.heuristic)
        self._set_runtime(runtime)
        return self
