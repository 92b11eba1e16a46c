from .distance_cache import DistanceCache, Pair, balanced_sizes, bmssc_objective, sum_to_clusters
from .distance_metrics import compute_squared_euclidean_distances
