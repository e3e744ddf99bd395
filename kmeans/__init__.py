"""
K-means clustering for color quantization and other fixed-dimension vector data.
"""

from .version import __version__
from .distance import euclidean_distance, squared_distances
from .exceptions import (
    ClusteringCancelled,
    InvalidConfigurationError,
    InvalidInputError,
    KMeansError,
)
from .kmeans import KMeans, assign_clusters, fit, has_converged, kmeans_plus_plus, update_centroids
from .result import ClusteringResult, KMeansConfig
from .utils import as_dataset, calculate_inertia, check_random_state, evaluate_clustering

__all__ = [
    "KMeans",
    "KMeansConfig",
    "ClusteringResult",
    "fit",
    "kmeans_plus_plus",
    "assign_clusters",
    "update_centroids",
    "has_converged",
    "euclidean_distance",
    "squared_distances",
    "as_dataset",
    "check_random_state",
    "calculate_inertia",
    "evaluate_clustering",
    "KMeansError",
    "InvalidConfigurationError",
    "InvalidInputError",
    "ClusteringCancelled",
    "__version__",
]
