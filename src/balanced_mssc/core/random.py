import time
import numpy as np
from typing import Optional
from .base import BalancedClusterer
from ._registry import register_solver
from ._config import RandomConfig, Status
from ..metrics.distance_cache import DistanceCache
from ..solvers.park_miller import ParkMiller
from ..solvers.vns_heuristic import balanced_start
import logging

_LOG = logging.getLogger(__name__)


@register_solver("random")
class RandomBalancedCluster(BalancedClusterer):
    """
    Random balanced assignment baseline: the VNS start without any search.
    """

    def __init__(self, config: RandomConfig):
        super().__init__(config)
        self.cfg = config

    def fit(
        self,
        X: Optional[np.ndarray] = None,
        *,
        D: Optional[np.ndarray | DistanceCache] = None,
        initial=None,
    ) -> "RandomBalancedCluster":
        cache = self._distance_cache(X, D)
        self.cfg.validate(cache.n)

        start = time.perf_counter()
        # same balanced start the VNS draws for this seed
        solution = balanced_start(cache, self.cfg.n_clusters, ParkMiller(self.cfg.random_state or 1))
        runtime = time.perf_counter() - start
        solution.elapsed = runtime

        self._set_solution(solution)
        self._set_status(Status.heuristic)
        self._set_runtime(runtime)
        return self
