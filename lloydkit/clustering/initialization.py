"""
Initialization Strategies

Each strategy produces the starting state of a K-means run:
- block strategies partition the point indices directly
- seed strategies pick k points as starting centroids and assign every
  point to its nearest seed
"""

import numpy as np
from typing import Dict, Optional, Sequence, Union
from dataclasses import dataclass
import logging

from .distance import Distance
from .steps import Centroids, reassign, take
from ..errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass
class InitialState:
    """Starting assignment, plus seed centroids when the strategy uses them."""
    labels: np.ndarray
    centroids: Optional[Centroids] = None


class Initializer:
    """Base class for initialization strategies."""

    name = "initializer"

    def __call__(
        self,
        data,
        k: int,
        distance: Distance,
        rng: np.random.RandomState,
    ) -> InitialState:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EqualBlockRandom(Initializer):
    """
    Shuffle the point indices and cut them into k near-equal contiguous
    blocks; block c becomes cluster c. Every cluster starts non-empty.
    """

    name = "equal-block-random"

    def __call__(self, data, k, distance, rng):
        order = rng.permutation(len(data))
        labels = np.empty(len(data), dtype=np.int64)
        for cluster_id, block in enumerate(np.array_split(order, k)):
            labels[block] = cluster_id
        return InitialState(labels)


class _SeedInitializer(Initializer):

    def _seed(self, data, k, distance, rng) -> np.ndarray:
        raise NotImplementedError

    def __call__(self, data, k, distance, rng):
        seed_indices = self._seed(data, k, distance, rng)
        seeds = take(data, seed_indices)
        if isinstance(seeds, np.ndarray):
            seeds = seeds.copy()
        logger.debug(f"{self.name} seeds: {seed_indices.tolist()}")
        return InitialState(reassign(data, seeds, distance), seeds)


class RandomCentroidSample(_SeedInitializer):
    """k distinct points drawn uniformly without replacement become the seeds."""

    name = "random-centroid-sample"

    def _seed(self, data, k, distance, rng):
        return rng.choice(len(data), size=k, replace=False)


class KMeansPlusPlus(_SeedInitializer):
    """
    k-means++ seeding.

    The first seed is uniform; each further seed is drawn with probability
    proportional to the squared distance to its nearest chosen seed.
    """

    name = "k-means++"

    def _seed(self, data, k, distance, rng):
        n = len(data)
        chosen = [int(rng.randint(n))]
        closest = distance.pairwise(data, take(data, chosen))[:, 0] ** 2

        for _ in range(1, k):
            total = closest.sum()
            if total > 0:
                probabilities = closest / total
            else:
                # Every point coincides with a seed
                probabilities = np.full(n, 1.0 / n)
            index = int(rng.choice(n, p=probabilities))
            chosen.append(index)
            new_distances = distance.pairwise(data, take(data, [index]))[:, 0] ** 2
            closest = np.minimum(closest, new_distances)

        return np.array(chosen)


class FixedAssignment(Initializer):
    """Start from a caller-supplied partition."""

    name = "fixed"

    def __init__(self, labels: Sequence[int]):
        self.labels = np.asarray(labels, dtype=np.int64)

    def __call__(self, data, k, distance, rng):
        if self.labels.shape != (len(data),):
            raise InvalidParameterError(
                f"Initial assignment has {self.labels.size} labels for {len(data)} points"
            )
        if self.labels.min() < 0 or self.labels.max() >= k:
            raise InvalidParameterError(f"Initial assignment labels must lie in [0, {k})")
        return InitialState(self.labels.copy())

    def __repr__(self) -> str:
        return f"FixedAssignment({self.labels.tolist()})"


INITIALIZERS: Dict[str, type] = {
    'equal-block-random': EqualBlockRandom,
    'random-centroid-sample': RandomCentroidSample,
    'random': RandomCentroidSample,
    'k-means++': KMeansPlusPlus,
    'kmeans++': KMeansPlusPlus,
}


def get_initializer(strategy: Union[str, Initializer]) -> Initializer:
    """Resolve a strategy name or instance."""
    if isinstance(strategy, Initializer):
        return strategy
    if isinstance(strategy, str) and strategy.lower() in INITIALIZERS:
        return INITIALIZERS[strategy.lower()]()
    raise InvalidParameterError(
        f"Unknown initialization strategy: {strategy}. Available: {sorted(INITIALIZERS)}"
    )
