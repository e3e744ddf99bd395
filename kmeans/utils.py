"""
Input coercion and cluster-quality helpers.
"""

import numbers
from typing import Any, Dict, Optional, Union

import numpy as np
from sklearn.metrics import silhouette_score

from .distance import squared_distances
from .exceptions import InvalidConfigurationError, InvalidInputError

RandomState = Union[int, np.random.Generator]


def as_dataset(X: Any) -> np.ndarray:
    """
    Copy points into a fresh float64 array of shape (n_samples, n_features).

    The caller's buffer is never aliased, so a run cannot mutate it.

    Raises:
        InvalidInputError: If the dataset is empty, ragged, not two-dimensional
            or contains NaN/inf values
    """
    try:
        data = np.array(X, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Points must be numeric vectors of equal dimension: {exc}"
        ) from exc

    if data.ndim == 0 or data.shape[0] == 0:
        raise InvalidInputError("Dataset must contain at least one point")
    if data.ndim != 2:
        raise InvalidInputError(
            f"Expected a sequence of vectors, got array of shape {data.shape}"
        )
    if data.shape[1] == 0:
        raise InvalidInputError("Points must have at least one dimension")
    if not np.all(np.isfinite(data)):
        raise InvalidInputError("Points must not contain NaN or infinite values")
    return data


def check_random_state(random_state: RandomState) -> np.random.Generator:
    """Turn an integer seed or an existing Generator into a Generator.

    None is rejected: callers choose their randomness explicitly.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    if isinstance(random_state, numbers.Integral) and not isinstance(random_state, bool):
        if random_state < 0:
            raise InvalidConfigurationError(f"Seed must be non-negative, got {random_state}")
        return np.random.default_rng(int(random_state))
    raise InvalidConfigurationError(
        "random_state must be an int seed or a numpy.random.Generator, "
        f"got {type(random_state).__name__}"
    )


def calculate_inertia(X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> float:
    """Within-cluster sum of squared distances."""
    assigned_centroids = centroids[labels]  # Shape: (n_samples, n_features)
    squared = np.sum((X - assigned_centroids) ** 2, axis=1)
    return float(np.sum(squared))


def evaluate_clustering(
    X: Any,
    result,
    sample_size: Optional[int] = 10000,
    random_state: int = 0,
) -> Dict[str, Any]:
    """
    Summarise the quality of a clustering result.

    Args:
        X: The dataset the result was fitted on
        result: A ClusteringResult
        sample_size: Number of points used for the silhouette score (None for all)
        random_state: Seed for the silhouette sampling

    Returns:
        Dictionary with inertia, silhouette score (None when undefined),
        mean distance to the assigned centroid and cluster size statistics
    """
    data = as_dataset(X)
    labels = result.labels
    if data.shape[0] != labels.shape[0]:
        raise InvalidInputError(
            f"Result covers {labels.shape[0]} points but dataset has {data.shape[0]}"
        )

    sizes = result.cluster_sizes()
    n_labels = int(np.count_nonzero(sizes))

    # silhouette is only defined for 2 <= n_labels <= n_samples - 1
    silhouette = None
    if 2 <= n_labels <= data.shape[0] - 1:
        if sample_size is not None and sample_size >= data.shape[0]:
            sample_size = None
        silhouette = float(silhouette_score(
            data, labels, sample_size=sample_size, random_state=random_state
        ))

    own = squared_distances(data, result.centroids)[np.arange(data.shape[0]), labels]

    return {
        'n_clusters': len(sizes),
        'inertia': calculate_inertia(data, labels, result.centroids),
        'silhouette_score': silhouette,
        'mean_distance': float(np.mean(np.sqrt(own))),
        'n_iterations': result.n_iter,
        'converged': result.converged,
        'cluster_sizes': {i: int(size) for i, size in enumerate(sizes)},
        'empty_clusters': int(np.sum(sizes == 0)),
        'avg_cluster_size': float(np.mean(sizes)),
        'std_cluster_size': float(np.std(sizes)),
        'min_cluster_size': int(np.min(sizes)),
        'max_cluster_size': int(np.max(sizes)),
    }
