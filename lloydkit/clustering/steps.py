"""
K-Means Phases

The two phases of Lloyd's algorithm as pure functions over per-round
snapshots:

- ``update_centroids``: (dataset, assignment, previous centroids) -> centroids
- ``reassign``: (dataset, centroids) -> assignment

Neither mutates its inputs, so each phase can be tested in isolation and the
reassignment can be split across workers.
"""

import numpy as np
from typing import List, Optional, Union
from dataclasses import dataclass, field
import logging

from .distance import Distance, EuclideanDistance, check_distances
from ..errors import DegenerateClusterCondition, InvalidParameterError

logger = logging.getLogger(__name__)

Centroids = Union[np.ndarray, List]

EMPTY_CLUSTER_POLICIES = ('freeze', 'reseed', 'drop', 'error')
CENTROID_RULES = ('mean', 'medoid')


@dataclass(frozen=True)
class DegenerateCluster:
    """Record of a cluster that lost all of its members."""
    iteration: int
    cluster_id: int
    action: str


@dataclass
class CentroidUpdate:
    """Output of one centroid update phase."""
    centroids: Centroids
    active: np.ndarray
    events: List[DegenerateCluster] = field(default_factory=list)

    @property
    def n_active(self) -> int:
        return int(self.active.sum())


def take(data, indices) -> Union[np.ndarray, List]:
    """Select points by index from an array or a list."""
    if isinstance(data, np.ndarray):
        return data[indices]
    return [data[i] for i in indices]


def _select(centroids: Centroids, ids: np.ndarray) -> Centroids:
    if isinstance(centroids, np.ndarray):
        return centroids[ids]
    return [centroids[i] for i in ids]


def _pack(data, centroids: list) -> Centroids:
    if isinstance(data, np.ndarray):
        return np.vstack([np.asarray(c, dtype=np.float64) for c in centroids])
    return list(centroids)


def mean_centroid(data: np.ndarray, members: np.ndarray, distance: Optional[Distance] = None) -> np.ndarray:
    """Coordinate-wise mean of the member points."""
    return data[members].mean(axis=0)


def medoid_centroid(data, members: np.ndarray, distance: Distance):
    """
    Member with the smallest sum of squared distances to the other members.

    Used where a mean is undefined (e.g. words under edit distance). Ties go
    to the member that comes first in the dataset.
    """
    points = take(data, members)
    D = distance.pairwise(points, points)
    best = members[int(np.argmin((D ** 2).sum(axis=1)))]
    if isinstance(data, np.ndarray):
        return data[best].copy()
    return data[best]


def _centroid_rule(name: str):
    if name == 'mean':
        return mean_centroid
    if name == 'medoid':
        return medoid_centroid
    raise InvalidParameterError(f"Unknown centroid rule: {name}. Available: {list(CENTROID_RULES)}")


def update_centroids(
    data,
    labels: np.ndarray,
    k: int,
    previous: Optional[Centroids] = None,
    active: Optional[np.ndarray] = None,
    policy: str = 'freeze',
    centroid: str = 'mean',
    distance: Optional[Distance] = None,
    rng: Optional[np.random.RandomState] = None,
    iteration: int = 0,
) -> CentroidUpdate:
    """
    Compute one centroid per cluster id from the current assignment.

    Empty clusters are resolved by ``policy``:
    - 'freeze': keep the previous centroid for this round
    - 'reseed': move the centroid to a randomly chosen point
    - 'drop': deactivate the cluster for the rest of the run
    - 'error': raise DegenerateClusterCondition

    A 'freeze' with no previous centroid falls back to 'reseed'. Dropped
    clusters keep their last centroid (NaN if they never had one) and are
    excluded from every later distance computation.

    Args:
        data: Dataset (2-D array or list of sequences)
        labels: Current assignment, one cluster id per point
        k: Number of cluster ids
        previous: Centroids from the previous round, if any
        active: Mask of clusters still in play (all by default)
        policy: Empty-cluster policy
        centroid: 'mean' or 'medoid'
        distance: Distance provider (required for medoids)
        rng: Random source for reseeding
        iteration: Round number, for logging and event records

    Returns:
        CentroidUpdate with the new centroids, active mask and events
    """
    if policy not in EMPTY_CLUSTER_POLICIES:
        raise InvalidParameterError(
            f"Unknown empty cluster policy: {policy}. Available: {list(EMPTY_CLUSTER_POLICIES)}"
        )
    rule = _centroid_rule(centroid)
    if distance is None:
        distance = EuclideanDistance()

    active = np.ones(k, dtype=bool) if active is None else active.copy()
    centroids = []
    events = []

    for cluster_id in range(k):
        prior = previous[cluster_id] if previous is not None else None

        if not active[cluster_id]:
            centroids.append(prior)
            continue

        members = np.flatnonzero(labels == cluster_id)
        if len(members) > 0:
            centroids.append(rule(data, members, distance))
            continue

        if policy == 'error':
            raise DegenerateClusterCondition(cluster_id, iteration)

        action = policy
        if policy == 'freeze' and prior is None:
            action = 'reseed'

        if action == 'freeze':
            centroids.append(prior)
        elif action == 'reseed':
            if rng is None:
                rng = np.random.RandomState()
            index = int(rng.randint(len(data)))
            centroids.append(data[index].copy() if isinstance(data, np.ndarray) else data[index])
        else:
            active[cluster_id] = False
            centroids.append(prior)

        logger.warning(f"Cluster {cluster_id} is empty in iteration {iteration}; action: {action}")
        events.append(DegenerateCluster(iteration, cluster_id, action))

    if isinstance(data, np.ndarray):
        width = data.shape[1]
        centroids = [np.full(width, np.nan) if c is None else c for c in centroids]

    return CentroidUpdate(_pack(data, centroids), active, events)


def refresh_centroids(
    data,
    labels: np.ndarray,
    previous: Centroids,
    centroid: str = 'mean',
    distance: Optional[Distance] = None,
) -> Centroids:
    """
    Recompute the centroids of non-empty clusters from an assignment.

    Empty clusters keep their previous centroid. No empty-cluster policy is
    applied and the active mask is left alone.
    """
    rule = _centroid_rule(centroid)
    if distance is None:
        distance = EuclideanDistance()

    centroids = []
    for cluster_id in range(len(previous)):
        members = np.flatnonzero(labels == cluster_id)
        if len(members) > 0:
            centroids.append(rule(data, members, distance))
        else:
            centroids.append(previous[cluster_id])
    return _pack(data, centroids)


def reassign(
    data,
    centroids: Centroids,
    distance: Distance,
    active: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Assign every point to its nearest active centroid.

    Ties go to the lowest cluster id.

    Args:
        data: Dataset (or a contiguous slice of it)
        centroids: One centroid per cluster id, fixed for the whole phase
        distance: Distance provider
        active: Mask of clusters that may receive points

    Returns:
        Integer array of cluster ids
    """
    k = len(centroids)
    active_ids = np.arange(k) if active is None else np.flatnonzero(active)
    D = check_distances(distance.pairwise(data, _select(centroids, active_ids)))
    # argmin returns the first minimum, i.e. the lowest id
    return active_ids[np.argmin(D, axis=1)]


def objective(
    data,
    labels: np.ndarray,
    centroids: Centroids,
    distance: Distance,
) -> float:
    """Sum of squared distances from each point to its assigned centroid (inertia)."""
    total = 0.0
    for cluster_id in np.unique(labels):
        members = np.flatnonzero(labels == cluster_id)
        D = distance.pairwise(take(data, members), _select(centroids, np.array([cluster_id])))
        total += float((D ** 2).sum())
    return total
