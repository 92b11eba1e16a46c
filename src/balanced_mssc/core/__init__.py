

from ._registry import available_solvers, get_solver, register_solver
from .base import BalancedClusterer, BaseConfig
from ._config import Status
from .vns import VNSBalancedCluster, VNSConfig
from .random import RandomBalancedCluster, RandomConfig
