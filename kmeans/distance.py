"""
Distance functions for fixed-dimension numeric vectors.
"""

import numpy as np

from .exceptions import InvalidInputError


def euclidean_distance(a, b) -> float:
    """
    Euclidean distance between two vectors of equal length.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Square root of the sum of squared per-dimension differences

    Raises:
        InvalidInputError: If the vectors have different dimensions
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.ndim != 1 or a.shape != b.shape:
        raise InvalidInputError(
            f"Cannot compute distance between shapes {a.shape} and {b.shape}"
        )
    diff = a - b
    return float(np.sqrt(np.dot(diff, diff)))


def squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Squared distances from every point to every centroid, shape (n_samples, n_clusters)."""
    # X shape: (n_samples, n_features), centroids shape: (n_clusters, n_features)
    diff = X[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum('ijk,ijk->ij', diff, diff)
