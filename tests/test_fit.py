from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from kmeans import (
    ClusteringCancelled,
    InvalidConfigurationError,
    InvalidInputError,
    KMeans,
    KMeansConfig,
    assign_clusters,
    calculate_inertia,
    fit,
    kmeans_plus_plus,
    update_centroids,
)

GROUP_A = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
GROUP_B = [[250, 250, 250], [249, 249, 251], [250, 248, 250]]


def _blobs(seed=0, n_per=150, dim=3):
    rng = np.random.default_rng(seed)
    centers = np.array([[30, 30, 30], [200, 40, 40], [40, 200, 60], [120, 120, 220]], dtype=np.float64)
    return np.vstack([rng.normal(c[:dim], 25.0, size=(n_per, dim)) for c in centers])


@pytest.mark.parametrize("k", [0, -1, 7])
def test_invalid_k(k):
    X = np.zeros((6, 3))
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=k), random_state=0)


def test_invalid_settings():
    X = np.arange(12, dtype=float).reshape(4, 3)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2, max_iters=0), random_state=0)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2, tol=-1.0), random_state=0)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2), random_state=None)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2.5), random_state=0)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2, max_iters=2.5), random_state=0)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2, max_iters=True), random_state=0)
    with pytest.raises(InvalidConfigurationError):
        fit(X, KMeansConfig(n_clusters=2, tol="x"), random_state=0)

    # integer tolerance and numpy integer budget are fine
    result = fit(X, KMeansConfig(n_clusters=2, max_iters=np.int64(5), tol=0), random_state=0)
    assert result.n_iter <= 5


@pytest.mark.parametrize("X", [
    [],
    np.zeros((0, 3)),
    [[1, 2, 3], [4, 5]],
    [[1.0, float('nan'), 0.0]],
    [1, 2, 3],
    [[], []],
])
def test_invalid_input(X):
    with pytest.raises(InvalidInputError):
        fit(X, KMeansConfig(n_clusters=1), random_state=0)


@pytest.mark.parametrize("seed", range(5))
@pytest.mark.parametrize("k", [1, 3, 8])
def test_partition_is_total_and_disjoint(seed, k):
    X = _blobs(seed)
    result = fit(X, KMeansConfig(n_clusters=k), random_state=seed)
    assert result.centroids.shape == (k, 3)
    assert result.labels.shape == (X.shape[0],)
    assert result.labels.min() >= 0 and result.labels.max() < k
    members = np.concatenate(result.clusters())
    assert sorted(members.tolist()) == list(range(X.shape[0]))
    assert result.cluster_sizes().sum() == X.shape[0]


def test_repeated_single_point_k1():
    X = [[17, 80, 203]] * 25
    result = fit(X, KMeansConfig(n_clusters=1), random_state=4)
    assert result.centroids.tolist() == [[17.0, 80.0, 203.0]]
    assert result.converged
    assert result.n_iter == 1
    assert result.inertia == 0.0


def test_k_equals_n_each_point_its_own_cluster():
    X = np.array(GROUP_A + GROUP_B, dtype=np.float64)
    result = fit(X, KMeansConfig(n_clusters=len(X)), random_state=9)
    assert result.converged
    assert result.n_iter == 1
    assert sorted(map(tuple, result.centroids.tolist())) == sorted(map(tuple, X.tolist()))
    assert np.array_equal(result.centroids[result.labels], X)
    assert len(set(result.labels.tolist())) == len(X)
    assert result.inertia == 0.0


@pytest.mark.parametrize("seed", range(10))
def test_two_well_separated_groups(seed):
    X = GROUP_A + GROUP_B
    config = KMeansConfig(n_clusters=2)
    result = fit(X, config, random_state=seed)

    labels = result.labels.tolist()
    assert len(set(labels[:3])) == 1
    assert len(set(labels[3:])) == 1
    assert labels[0] != labels[3]

    mean_a = np.mean(GROUP_A, axis=0)
    mean_b = np.mean(GROUP_B, axis=0)
    assert np.linalg.norm(result.centroids[labels[0]] - mean_a) < config.tol
    assert np.linalg.norm(result.centroids[labels[3]] - mean_b) < config.tol


@pytest.mark.parametrize("seed", range(5))
def test_wcss_is_non_increasing(seed):
    X = _blobs(seed, n_per=100)
    result = fit(X, KMeansConfig(n_clusters=6, tol=1e-9), random_state=seed)
    history = np.array(result.inertia_history)
    assert len(history) == result.n_iter
    slack = 1e-9 * history.max()
    assert np.all(np.diff(history) <= slack)


def test_same_seed_gives_identical_results():
    X = _blobs(3)
    config = KMeansConfig(n_clusters=5)
    a = fit(X, config, random_state=np.random.default_rng(123))
    b = fit(X, config, random_state=np.random.default_rng(123))
    assert np.array_equal(a.centroids, b.centroids)
    assert np.array_equal(a.labels, b.labels)
    assert a.n_iter == b.n_iter
    assert a.inertia_history == b.inertia_history


@pytest.mark.parametrize("seed", range(5))
def test_empty_cluster_keeps_previous_centroid(seed):
    # Seeding must duplicate a centroid here; the duplicate loses every tie and stays empty
    X = [[0, 0, 0], [0, 0, 0], [10, 10, 10]]
    result = fit(X, KMeansConfig(n_clusters=3), random_state=seed)
    sizes = result.cluster_sizes()
    assert sizes[2] == 0
    assert np.all(np.isfinite(result.centroids))
    assert result.centroids[2].tolist() in ([0.0, 0.0, 0.0], [10.0, 10.0, 10.0])

    seeds = kmeans_plus_plus(np.array(X, dtype=float), 3, np.random.default_rng(seed))
    assert np.array_equal(result.centroids[2], seeds[2])


def test_exhausted_run_returns_consistent_pair():
    X = _blobs(1)
    seed = 8
    result = fit(X, KMeansConfig(n_clusters=4, max_iters=1), random_state=seed)
    assert not result.converged
    assert result.n_iter == 1

    data = np.asarray(X, dtype=np.float64)
    seeds = kmeans_plus_plus(data, 4, np.random.default_rng(seed))
    expected = update_centroids(data, assign_clusters(data, seeds), seeds)
    assert np.array_equal(result.centroids, expected)

    # labels are recomputed against the returned centroids, not the seeds
    assert np.array_equal(result.labels, assign_clusters(data, result.centroids))
    assert result.inertia == calculate_inertia(data, result.labels, result.centroids)


def test_converged_run_returns_consistent_pair():
    X = _blobs(2)
    result = fit(X, KMeansConfig(n_clusters=4), random_state=0)
    assert result.converged
    assert np.array_equal(result.labels, assign_clusters(np.asarray(X), result.centroids))
    assert result.inertia == result.inertia_history[-1]


def test_cancellation_between_iterations():
    X = _blobs(0)
    calls = []

    def stop_after_two():
        calls.append(1)
        return len(calls) > 2

    with pytest.raises(ClusteringCancelled):
        fit(X, KMeansConfig(n_clusters=4, tol=0.0), random_state=0, should_stop=stop_after_two)
    assert len(calls) == 3

    result = fit(X, KMeansConfig(n_clusters=4), random_state=0, should_stop=lambda: False)
    assert result.centroids.shape == (4, 3)


def test_caller_data_is_not_modified():
    X = _blobs(4)
    original = X.copy()
    result = fit(X, KMeansConfig(n_clusters=3), random_state=1)
    assert np.array_equal(X, original)
    assert not result.centroids.flags.writeable
    with pytest.raises(ValueError):
        result.centroids[0, 0] = 1.0


def test_dimension_agnostic():
    rng = np.random.default_rng(0)
    for dim in (1, 5):
        X = np.vstack([rng.normal(0, 1, size=(50, dim)), rng.normal(20, 1, size=(50, dim))])
        result = fit(X, KMeansConfig(n_clusters=2), random_state=0)
        assert result.centroids.shape == (2, dim)
        assert len(set(result.labels[:50].tolist())) == 1
        assert len(set(result.labels[50:].tolist())) == 1


def test_estimator_holds_no_fit_state():
    X = _blobs(0)
    km = KMeans(n_clusters=4, random_state=42)
    first = km.fit(X)
    second = km.fit(X)
    assert np.array_equal(first.centroids, second.centroids)
    assert np.array_equal(km.fit_predict(X), first.labels)
    assert not hasattr(km, 'labels_')
    assert not hasattr(km, 'cluster_centers_')


def test_concurrent_runs_match_sequential_runs():
    datasets = [_blobs(seed) for seed in range(4)]
    config = KMeansConfig(n_clusters=4)
    sequential = [fit(X, config, random_state=i) for i, X in enumerate(datasets)]
    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = [executor.submit(fit, X, config, i) for i, X in enumerate(datasets)]
        concurrent = [f.result() for f in futures]
    for a, b in zip(sequential, concurrent):
        assert np.array_equal(a.centroids, b.centroids)
        assert np.array_equal(a.labels, b.labels)


def test_predict_uses_returned_centroids():
    result = fit(GROUP_A + GROUP_B, KMeansConfig(n_clusters=2), random_state=0)
    predicted = result.predict([[2, 2, 2], [240, 250, 245]])
    assert predicted[0] == result.labels[0]
    assert predicted[1] == result.labels[3]
    with pytest.raises(InvalidInputError):
        result.predict([[1, 2]])


def test_verbose_reports_progress(capsys):
    fit(GROUP_A + GROUP_B, KMeansConfig(n_clusters=2), random_state=0, verbose=True)
    out = capsys.readouterr().out
    assert "Fitting K-means with 2 clusters on 6 samples" in out
    assert "Converged after" in out
