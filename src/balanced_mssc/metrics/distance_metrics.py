"""
Geometry helpers shared by the distance cache and the visualisations.
"""
import numpy as np
from scipy.spatial.distance import cdist


def as_points(data) -> np.ndarray:
    """
    Coerce *data* into a finite ``(n, d)`` float64 matrix.

    Raises
    ------
    ValueError
        If rows have different coordinate counts, the input is empty or
        contains non-finite values.
    """
    try:
        X = np.asarray(data, dtype=float)
    except ValueError as exc:
        # numpy refuses ragged nested sequences
        raise ValueError(f"Points must all have the same dimensionality: {exc}") from exc

    if X.ndim == 1 and X.size:
        X = X.reshape(-1, 1)
    if X.ndim != 2:
        raise ValueError(f"Points must form a 2-D (n, d) matrix, got shape {X.shape}")
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise ValueError("Point set is empty")
    if not np.isfinite(X).all():
        raise ValueError("Point coordinates must be finite")
    return X


def compute_squared_euclidean_distances(data: np.ndarray) -> np.ndarray:
    """
    Compute pairwise squared Euclidean distances.

    """
    return cdist(data, data, metric="sqeuclidean")
