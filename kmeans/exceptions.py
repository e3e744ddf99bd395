"""Exceptions raised by the clustering core."""


class KMeansError(Exception):
    """Base class for all clustering errors."""


class InvalidConfigurationError(KMeansError, ValueError):
    """Raised when k, the iteration budget, the tolerance or the random source is unusable."""


class InvalidInputError(KMeansError, ValueError):
    """Raised when the dataset is empty, ragged or contains non-finite values."""


class ClusteringCancelled(KMeansError):
    """Raised when a caller-supplied stop check requests cancellation between iterations."""
