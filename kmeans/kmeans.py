"""
K-means clustering algorithm implementation.
Lloyd's algorithm with k-means++ seeding, used for color quantization of RGB pixels
but valid for vectors of any fixed dimension.
"""

import numpy as np
from typing import Any, Callable, List, Optional

from .distance import squared_distances
from .exceptions import ClusteringCancelled
from .result import ClusteringResult, KMeansConfig
from .utils import RandomState, as_dataset, calculate_inertia, check_random_state


def kmeans_plus_plus(X: np.ndarray, n_clusters: int, rng: np.random.Generator) -> np.ndarray:
    """
    Choose initial centroids with k-means++ seeding.

    The first centroid is a uniformly random point. Each following centroid is
    drawn with probability proportional to the squared distance from a point to
    its nearest already-chosen centroid. When every point coincides with a
    chosen centroid (total weight 0) the draw falls back to a uniform pick.

    Args:
        X: Dataset of shape (n_samples, n_features)
        n_clusters: Number of centroids to choose, 1 <= n_clusters <= n_samples
        rng: Random source

    Returns:
        Array of shape (n_clusters, n_features), each row a copy of a dataset point
    """
    n_samples, n_features = X.shape
    centroids = np.empty((n_clusters, n_features), dtype=np.float64)

    # Choose first centroid randomly
    centroids[0] = X[rng.integers(n_samples)]

    # Squared distance from each point to its nearest chosen centroid
    closest_sq = squared_distances(X, centroids[:1])[:, 0]

    for c_id in range(1, n_clusters):
        cumulative = np.cumsum(closest_sq)
        total = cumulative[-1]

        if total > 0:
            # First index where the running weight reaches the draw
            r = rng.random() * total
            next_idx = min(int(np.searchsorted(cumulative, r, side='left')), n_samples - 1)
        else:
            next_idx = int(rng.integers(n_samples))

        centroids[c_id] = X[next_idx]
        new_sq = squared_distances(X, centroids[c_id:c_id + 1])[:, 0]
        closest_sq = np.minimum(closest_sq, new_sq)

    return centroids


def assign_clusters(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Assign each point to the nearest centroid; ties go to the lowest centroid index."""
    distances = squared_distances(X, centroids)  # Shape: (n_samples, n_clusters)
    # argmin returns the first minimum, so a later centroid only wins on a strictly smaller distance
    return np.argmin(distances, axis=1).astype(np.int64)


def update_centroids(X: np.ndarray, labels: np.ndarray, previous: np.ndarray) -> np.ndarray:
    """
    Recompute centroids as the per-dimension mean of their assigned points.

    A cluster with no assigned points keeps its previous centroid unchanged.
    """
    centroids = previous.copy()
    for k in range(previous.shape[0]):
        mask = labels == k
        if np.any(mask):
            centroids[k] = X[mask].mean(axis=0)
    return centroids


def has_converged(previous: np.ndarray, new: np.ndarray, tol: float) -> bool:
    """True iff every centroid moved strictly less than ``tol``."""
    shifts = np.sqrt(np.sum((previous - new) ** 2, axis=1))
    return bool(np.all(shifts < tol))


def fit(
    X: Any,
    config: KMeansConfig,
    random_state: RandomState,
    should_stop: Optional[Callable[[], bool]] = None,
    verbose: bool = False,
) -> ClusteringResult:
    """
    Run k-means++ seeding followed by Lloyd iterations.

    Each call owns all of its working state; nothing is kept between calls.

    Args:
        X: Points of shape (n_samples, n_features); copied, never modified
        config: Number of clusters, iteration budget and tolerance
        random_state: Integer seed or numpy Generator used for seeding
        should_stop: Optional callable checked before every iteration; when it
            returns True the run is abandoned with ClusteringCancelled
        verbose: Whether to print progress information

    Returns:
        ClusteringResult. On convergence the centroids are those the final
        partition was computed from. When the iteration budget runs out the
        last updated centroids are returned with a partition recomputed
        against them, and ``converged`` is False.

    Raises:
        InvalidInputError: For an empty, ragged or non-finite dataset
        InvalidConfigurationError: For k outside 1..n_samples or other bad settings
        ClusteringCancelled: If ``should_stop`` requested cancellation
    """
    data = as_dataset(X)
    config.validate(data.shape[0])
    rng = check_random_state(random_state)

    if verbose:
        print(f"Fitting K-means with {config.n_clusters} clusters on {data.shape[0]} samples...")

    centroids = kmeans_plus_plus(data, config.n_clusters, rng)
    history: List[float] = []
    converged = False
    n_iter = 0

    for iteration in range(config.max_iters):
        if should_stop is not None and should_stop():
            raise ClusteringCancelled(f"Clustering cancelled after {iteration} iterations")

        labels = assign_clusters(data, centroids)
        history.append(calculate_inertia(data, labels, centroids))
        new_centroids = update_centroids(data, labels, centroids)
        n_iter = iteration + 1

        if has_converged(centroids, new_centroids, config.tol):
            converged = True
            break

        centroids = new_centroids

        if verbose and n_iter % 10 == 0:
            print(f"Iteration {n_iter}, Inertia: {history[-1]:.2f}")

    if converged:
        inertia = history[-1]
        if verbose:
            print(f"Converged after {n_iter} iterations")
    else:
        labels = assign_clusters(data, centroids)
        inertia = calculate_inertia(data, labels, centroids)
        if verbose:
            print(f"Stopped after {n_iter} iterations without converging")

    if verbose:
        print(f"Final inertia: {inertia:.2f}")

    return ClusteringResult(
        centroids=centroids,
        labels=labels,
        n_iter=n_iter,
        converged=converged,
        inertia=inertia,
        inertia_history=tuple(history),
    )


class KMeans:
    """
    K-means clustering estimator.

    Holds configuration only. ``fit`` returns a fresh ClusteringResult and
    leaves the estimator untouched, so one instance can cluster several
    datasets, including from different threads when given an integer seed.
    """

    def __init__(
        self,
        n_clusters: int,
        random_state: RandomState,
        max_iters: int = 100,
        tol: float = 1e-4,
        verbose: bool = False
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            random_state: Integer seed (a fresh Generator per fit) or a Generator
                shared across fits
            max_iters: Maximum number of iterations
            tol: Tolerance for convergence
            verbose: Whether to print progress information
        """
        self.config = KMeansConfig(n_clusters=n_clusters, max_iters=max_iters, tol=tol)
        self.random_state = random_state
        self.verbose = verbose

    @property
    def n_clusters(self) -> int:
        return self.config.n_clusters

    def fit(self, X: Any, should_stop: Optional[Callable[[], bool]] = None) -> ClusteringResult:
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)
            should_stop: Optional cancellation check run between iterations

        Returns:
            ClusteringResult
        """
        return fit(
            X,
            self.config,
            self.random_state,
            should_stop=should_stop,
            verbose=self.verbose,
        )

    def fit_predict(self, X: Any) -> np.ndarray:
        """Fit the model and return the cluster label of every point."""
        return self.fit(X).labels

    def __repr__(self) -> str:
        return (
            f"KMeans(n_clusters={self.config.n_clusters}, max_iters={self.config.max_iters}, "
            f"tol={self.config.tol})"
        )
