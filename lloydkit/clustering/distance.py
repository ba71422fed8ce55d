"""
Distance Providers

Pluggable dissimilarity measures used by the K-means engine. Every provider
is callable on a pair of points and can build a full points-by-centroids
distance matrix for the reassignment step.
"""

import numpy as np
from typing import Any, Callable, Dict, Sequence, Union
import logging

from ..errors import InvalidParameterError

logger = logging.getLogger(__name__)


class Distance:
    """
    Base class for distance providers.

    Subclasses implement ``__call__``; ``pairwise`` falls back to calling it
    for every (point, centroid) pair and can be overridden with a vectorized
    version.
    """

    name = "distance"

    def __call__(self, a: Any, b: Any) -> float:
        raise NotImplementedError

    def pairwise(self, points: Sequence, centroids: Sequence) -> np.ndarray:
        """Distance matrix of shape (len(points), len(centroids))."""
        out = np.empty((len(points), len(centroids)), dtype=np.float64)
        for i, point in enumerate(points):
            for j, centroid in enumerate(centroids):
                out[i, j] = self(point, centroid)
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EuclideanDistance(Distance):
    """Straight-line distance between numeric points of equal dimensionality."""

    name = "euclidean"

    def __call__(self, a, b) -> float:
        return float(np.linalg.norm(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)))

    def pairwise(self, points, centroids) -> np.ndarray:
        X = np.asarray(points, dtype=np.float64)
        C = np.asarray(centroids, dtype=np.float64)
        # (n_points, n_centroids) via broadcasting
        return np.linalg.norm(X[:, np.newaxis, :] - C[np.newaxis, :, :], axis=2)


class ManhattanDistance(Distance):
    """Sum of absolute coordinate differences."""

    name = "manhattan"

    def __call__(self, a, b) -> float:
        return float(np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)).sum())

    def pairwise(self, points, centroids) -> np.ndarray:
        X = np.asarray(points, dtype=np.float64)
        C = np.asarray(centroids, dtype=np.float64)
        return np.abs(X[:, np.newaxis, :] - C[np.newaxis, :, :]).sum(axis=2)


class EditDistance(Distance):
    """
    Levenshtein distance between two sequences of symbols.

    Counts the minimum number of single-symbol insertions, deletions and
    substitutions turning one sequence into the other. Works on strings or
    any indexable sequence of hashable symbols.
    """

    name = "edit"

    def __call__(self, a, b) -> float:
        if len(a) < len(b):
            a, b = b, a
        if not b:
            return float(len(a))

        previous = list(range(len(b) + 1))
        for i, symbol_a in enumerate(a, start=1):
            current = [i]
            for j, symbol_b in enumerate(b, start=1):
                current.append(min(
                    previous[j] + 1,                           # deletion
                    current[j - 1] + 1,                        # insertion
                    previous[j - 1] + (symbol_a != symbol_b),  # substitution
                ))
            previous = current
        return float(previous[-1])


class CallableDistance(Distance):
    """Adapter turning a plain ``f(a, b) -> float`` into a Distance."""

    def __init__(self, func: Callable[[Any, Any], float]):
        self.func = func
        self.name = getattr(func, '__name__', 'callable')

    def __call__(self, a, b) -> float:
        return float(self.func(a, b))

    def __repr__(self) -> str:
        return f"CallableDistance({self.name})"


DISTANCES: Dict[str, type] = {
    'euclidean': EuclideanDistance,
    'manhattan': ManhattanDistance,
    'cityblock': ManhattanDistance,
    'edit': EditDistance,
    'levenshtein': EditDistance,
}

DistanceFn = Union[str, Distance, Callable[[Any, Any], float]]


def get_distance(metric: DistanceFn) -> Distance:
    """
    Resolve a distance provider.

    Args:
        metric: Registered name, Distance instance, or plain callable

    Returns:
        Distance instance
    """
    if isinstance(metric, Distance):
        return metric
    if isinstance(metric, str):
        key = metric.lower()
        if key not in DISTANCES:
            raise InvalidParameterError(
                f"Unknown distance: {metric}. Available: {sorted(DISTANCES)}"
            )
        return DISTANCES[key]()
    if callable(metric):
        return CallableDistance(metric)
    raise InvalidParameterError(f"Cannot use {metric!r} as a distance")


def check_distances(distances: np.ndarray) -> np.ndarray:
    """Reject distance matrices with negative or non-finite entries."""
    if not np.all(np.isfinite(distances)):
        raise InvalidParameterError("Distance function returned a non-finite value")
    if np.any(distances < 0):
        raise InvalidParameterError("Distance function returned a negative value")
    return distances
