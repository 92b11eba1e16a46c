"""
balanced_mssc – public API
"""
from .core.base import BalancedClusterer
from .core._config import BaseConfig, Status, VNSConfig, RandomConfig
from .core._registry import get_solver, register_solver
from .core.vns import VNSBalancedCluster
from .core.random import RandomBalancedCluster
from .metrics.distance_cache import DistanceCache
from .solvers.park_miller import ParkMiller
from .solvers.solution import Solution

__all__ = [
    "BalancedClusterer",
    "BaseConfig",
    "DistanceCache",
    "ParkMiller",
    "RandomBalancedCluster",
    "RandomConfig",
    "Solution",
    "Status",
    "VNSBalancedCluster",
    "VNSConfig",
    "get_solver",
    "register_solver",
    "__version__",
]

__version__ = "0.1.0"
