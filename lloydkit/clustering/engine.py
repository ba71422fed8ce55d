"""
K-Means Engine

Lloyd's algorithm over a fixed dataset:

    INITIALIZE -> (UPDATE_CENTROIDS -> REASSIGN -> converged? stop : loop)

with a hard exit after ``max_iterations`` rounds. The engine keeps no state
between calls; randomness comes from a generator derived from
``random_state`` at the start of every call.
"""

import numpy as np
import pickle
from concurrent.futures import ProcessPoolExecutor
from typing import List, Dict, Optional, Union
from dataclasses import dataclass, field
import logging

from sklearn.utils import check_random_state

from config.settings import (
    DEFAULT_CENTROID,
    DEFAULT_DISTANCE,
    DEFAULT_EMPTY_CLUSTER_POLICY,
    DEFAULT_INIT_STRATEGY,
    KMEANS_MAX_ITER,
    KMEANS_N_INIT,
)

from .distance import DistanceFn, get_distance
from .initialization import Initializer, get_initializer
from .steps import (
    CENTROID_RULES,
    EMPTY_CLUSTER_POLICIES,
    Centroids,
    DegenerateCluster,
    objective,
    reassign,
    refresh_centroids,
    update_centroids,
)
from ..dataset import as_dataset
from ..errors import InvalidParameterError
from ..utils import chunk_slices, resolve_workers

logger = logging.getLogger(__name__)


@dataclass
class ClusterResult:
    """Result of a K-means run."""
    labels: np.ndarray
    centroids: Centroids
    n_clusters: int
    n_iter: int
    converged: bool
    inertia: float
    inertia_history: List[float] = field(default_factory=list)
    active_clusters: Optional[np.ndarray] = None
    degenerate_events: List[DegenerateCluster] = field(default_factory=list)
    n_init_run: int = 0

    @property
    def n_active_clusters(self) -> int:
        """Clusters still in play (fewer than n_clusters after a 'drop')."""
        if self.active_clusters is None:
            return self.n_clusters
        return int(self.active_clusters.sum())

    def get_cluster_indices(self, cluster_id: int) -> np.ndarray:
        """Get indices of samples in a specific cluster."""
        return np.where(self.labels == cluster_id)[0]

    def get_cluster_sizes(self) -> Dict[int, int]:
        """Get size of each cluster id, including empty ones."""
        counts = np.bincount(self.labels, minlength=self.n_clusters)
        return dict(enumerate(counts.tolist()))


def _reassign_chunk(args):
    """Helper for parallel reassignment. Must be at module level for pickling."""
    points, centroids, distance, active = args
    return reassign(points, centroids, distance, active)


def _is_picklable(obj) -> bool:
    try:
        pickle.dumps(obj)
    except (pickle.PicklingError, AttributeError, TypeError):
        return False
    return True


def _check_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {value}")
    return int(value)


class KMeansEngine:
    """
    Iterative centroid refinement (Lloyd's algorithm).

    Configurable pieces:
    - init: 'equal-block-random' (default), 'random-centroid-sample',
      'k-means++', or an Initializer instance
    - distance: 'euclidean' (default), 'manhattan', 'edit', a Distance,
      or any callable (a, b) -> float
    - centroid: 'mean' for coordinate points, 'medoid' for anything else
    - empty_cluster_policy: 'freeze', 'reseed', 'drop' or 'error'
    """

    def __init__(
        self,
        init: Union[str, Initializer] = DEFAULT_INIT_STRATEGY,
        distance: DistanceFn = DEFAULT_DISTANCE,
        max_iterations: int = KMEANS_MAX_ITER,
        empty_cluster_policy: str = DEFAULT_EMPTY_CLUSTER_POLICY,
        centroid: str = DEFAULT_CENTROID,
        n_init: int = KMEANS_N_INIT,
        random_state=None,
        n_workers: int = 0,
    ):
        """
        Initialize the engine.

        Args:
            init: Initialization strategy
            distance: Default distance provider
            max_iterations: Default bound on refinement rounds
            empty_cluster_policy: What to do when a cluster loses all members
            centroid: 'mean' or 'medoid'
            n_init: Independent restarts; the lowest inertia wins
            random_state: Seed, RandomState, or None
            n_workers: Processes for reassignment (0=sequential, -1=auto)
        """
        if empty_cluster_policy not in EMPTY_CLUSTER_POLICIES:
            raise InvalidParameterError(
                f"Unknown empty cluster policy: {empty_cluster_policy}. "
                f"Available: {list(EMPTY_CLUSTER_POLICIES)}"
            )
        if centroid not in CENTROID_RULES:
            raise InvalidParameterError(
                f"Unknown centroid rule: {centroid}. Available: {list(CENTROID_RULES)}"
            )
        try:
            n_workers = resolve_workers(n_workers)
        except ValueError as e:
            raise InvalidParameterError(str(e))

        self.init = get_initializer(init)
        self.distance = get_distance(distance)
        self.max_iterations = _check_positive_int(max_iterations, 'max_iterations')
        self.empty_cluster_policy = empty_cluster_policy
        self.centroid = centroid
        self.n_init = _check_positive_int(n_init, 'n_init')
        self.random_state = random_state
        self.n_workers = n_workers

    @classmethod
    def from_config(cls, config) -> 'KMeansEngine':
        """Build an engine from a ClusteringConfig."""
        return cls(
            init=config.init,
            distance=config.distance,
            max_iterations=config.max_iterations,
            empty_cluster_policy=config.empty_cluster_policy,
            centroid=config.centroid,
            n_init=config.n_init,
            random_state=config.random_state,
            n_workers=config.parallel_workers,
        )

    def cluster(
        self,
        dataset,
        k: int,
        distance: Optional[DistanceFn] = None,
        max_iterations: Optional[int] = None,
    ) -> ClusterResult:
        """
        Partition a dataset into k clusters.

        Args:
            dataset: Points of shape (n, d), or strings for edit distance
            k: Number of clusters, 1 <= k <= n
            distance: Distance provider (engine default if None)
            max_iterations: Bound on refinement rounds (engine default if None)

        Returns:
            ClusterResult; ``converged`` is False when the bound was reached

        Raises:
            InvalidParameterError: before any iteration, for invalid inputs
        """
        distance = self.distance if distance is None else get_distance(distance)
        if max_iterations is None:
            max_iterations = self.max_iterations
        max_iterations = _check_positive_int(max_iterations, 'max_iterations')

        data = as_dataset(dataset, numeric=(self.centroid == 'mean'))
        k = _check_positive_int(k, 'k')
        if k > len(data):
            raise InvalidParameterError(f"k={k} exceeds the number of points ({len(data)})")

        rng = check_random_state(self.random_state)
        logger.info(
            f"Clustering {len(data)} points into {k} clusters "
            f"(init={self.init.name}, distance={distance.name}, n_init={self.n_init})"
        )

        executor = None
        if self.n_workers > 0 and len(data) > 1:
            if _is_picklable(distance):
                executor = ProcessPoolExecutor(max_workers=self.n_workers)
            else:
                logger.warning(
                    f"Distance {distance!r} cannot be sent to worker processes; "
                    f"reassigning sequentially"
                )

        best = None
        try:
            for run in range(self.n_init):
                result = self._run_once(data, k, distance, max_iterations, rng, executor)
                result.n_init_run = run
                logger.debug(f"Run {run + 1}/{self.n_init}: inertia={result.inertia:.6g}")
                if best is None or result.inertia < best.inertia:
                    best = result
        finally:
            if executor is not None:
                executor.shutdown()

        return best

    def _reassign(self, data, centroids, distance, active, executor) -> np.ndarray:
        if executor is None:
            return reassign(data, centroids, distance, active)

        # Centroids are fixed for the whole phase; chunks are joined in index order
        tasks = [
            (data[s], centroids, distance, active)
            for s in chunk_slices(len(data), self.n_workers)
        ]
        return np.concatenate(list(executor.map(_reassign_chunk, tasks)))

    def _run_once(self, data, k, distance, max_iterations, rng, executor) -> ClusterResult:
        """Single K-means run from one initialization."""
        state = self.init(data, k, distance, rng)
        labels = state.labels
        centroids = state.centroids
        active = None

        history = []
        events = []
        converged = False
        n_iter = 0

        for iteration in range(1, max_iterations + 1):
            update = update_centroids(
                data, labels, k,
                previous=centroids,
                active=active,
                policy=self.empty_cluster_policy,
                centroid=self.centroid,
                distance=distance,
                rng=rng,
                iteration=iteration,
            )
            centroids, active = update.centroids, update.active
            events.extend(update.events)
            history.append(objective(data, labels, centroids, distance))

            new_labels = self._reassign(data, centroids, distance, active, executor)
            n_changed = int(np.count_nonzero(new_labels != labels))
            labels = new_labels
            n_iter = iteration

            logger.debug(f"Iteration {iteration}: {n_changed} reassigned, inertia={history[-1]:.6g}")

            if n_changed == 0:
                converged = True
                break

        if converged:
            logger.info(f"Converged after {n_iter} iterations")
        else:
            logger.warning(f"Did not converge within {max_iterations} iterations")
            # Bring the centroids in line with the returned assignment; no
            # further round runs, so empty clusters keep their centroid as is
            centroids = refresh_centroids(data, labels, centroids, self.centroid, distance)

        return ClusterResult(
            labels=labels,
            centroids=centroids,
            n_clusters=k,
            n_iter=n_iter,
            converged=converged,
            inertia=objective(data, labels, centroids, distance),
            inertia_history=history,
            active_clusters=active,
            degenerate_events=events,
        )


def cluster(
    dataset,
    k: int,
    distance: DistanceFn = DEFAULT_DISTANCE,
    max_iterations: int = KMEANS_MAX_ITER,
    **kwargs
) -> ClusterResult:
    """
    Convenience function to run K-means once.

    Args:
        dataset: Points of shape (n, d), or strings with centroid='medoid'
        k: Number of clusters
        distance: Distance provider
        max_iterations: Bound on refinement rounds
        **kwargs: Additional KMeansEngine parameters

    Returns:
        ClusterResult
    """
    engine = KMeansEngine(distance=distance, max_iterations=max_iterations, **kwargs)
    return engine.cluster(dataset, k)
