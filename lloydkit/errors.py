"""
Exceptions raised by lloydkit.
"""


class KMeansError(Exception):
    """Base class for clustering errors."""


class InvalidParameterError(KMeansError, ValueError):
    """Raised when inputs are rejected before any iteration runs."""


class DegenerateClusterCondition(KMeansError, RuntimeError):
    """Raised when a cluster loses all of its members under the 'error' policy."""

    def __init__(self, cluster_id: int, iteration: int):
        self.cluster_id = cluster_id
        self.iteration = iteration
        super().__init__(
            f"Cluster {cluster_id} became empty in iteration {iteration}"
        )
