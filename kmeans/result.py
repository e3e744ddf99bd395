"""
Configuration and result types for a clustering run.
"""

import numbers
from dataclasses import dataclass
from typing import Any, List, Tuple

import numpy as np

from .distance import squared_distances
from .exceptions import InvalidConfigurationError, InvalidInputError
from .utils import as_dataset


@dataclass(frozen=True)
class KMeansConfig:
    """
    Parameters of a single clustering run.

    Args:
        n_clusters: Number of clusters k
        max_iters: Hard budget of assign/update iterations
        tol: A centroid counts as stable when it moves less than this distance
    """

    n_clusters: int
    max_iters: int = 100
    tol: float = 1e-4

    def validate(self, n_samples: int) -> None:
        if isinstance(self.n_clusters, bool) or not isinstance(self.n_clusters, (int, np.integer)):
            raise InvalidConfigurationError(
                f"n_clusters must be an integer, got {self.n_clusters!r}"
            )
        if self.n_clusters < 1:
            raise InvalidConfigurationError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.n_clusters > n_samples:
            raise InvalidConfigurationError(
                f"n_clusters={self.n_clusters} exceeds the number of points ({n_samples})"
            )
        if isinstance(self.max_iters, bool) or not isinstance(self.max_iters, (int, np.integer)):
            raise InvalidConfigurationError(f"max_iters must be an integer, got {self.max_iters!r}")
        if self.max_iters < 1:
            raise InvalidConfigurationError(f"max_iters must be >= 1, got {self.max_iters}")
        if isinstance(self.tol, bool) or not isinstance(self.tol, numbers.Real):
            raise InvalidConfigurationError(f"tol must be a real number, got {self.tol!r}")
        if not self.tol >= 0:
            raise InvalidConfigurationError(f"tol must be >= 0, got {self.tol}")


def _frozen(array: Any, dtype) -> np.ndarray:
    out = np.array(array, dtype=dtype)
    out.setflags(write=False)
    return out


@dataclass(frozen=True)
class ClusteringResult:
    """
    Immutable outcome of a clustering run.

    ``centroids`` has shape (k, D) and ``labels`` maps every point index to a
    cluster index in 0..k-1. Both arrays are read-only copies.
    """

    centroids: np.ndarray
    labels: np.ndarray
    n_iter: int
    converged: bool
    inertia: float
    inertia_history: Tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'centroids', _frozen(self.centroids, np.float64))
        object.__setattr__(self, 'labels', _frozen(self.labels, np.int64))
        object.__setattr__(self, 'inertia_history', tuple(float(v) for v in self.inertia_history))

    @property
    def n_clusters(self) -> int:
        return self.centroids.shape[0]

    def cluster_sizes(self) -> np.ndarray:
        return np.bincount(self.labels, minlength=self.n_clusters)

    def clusters(self) -> List[np.ndarray]:
        """Point indices of each cluster, in cluster order. Empty clusters give empty arrays."""
        return [np.flatnonzero(self.labels == c) for c in range(self.n_clusters)]

    def predict(self, X: Any) -> np.ndarray:
        """Index of the nearest centroid for each point in X (lowest index wins ties)."""
        data = as_dataset(X)
        if data.shape[1] != self.centroids.shape[1]:
            raise InvalidInputError(
                f"Points have dimension {data.shape[1]}, centroids have {self.centroids.shape[1]}"
            )
        return np.argmin(squared_distances(data, self.centroids), axis=1)
