"""
Cluster Analysis Module

Summarizes a K-means result for reporting: cluster sizes, representative
members and centroids.
"""

import numpy as np
from typing import Any, List, Optional, Sequence
from dataclasses import dataclass
import logging

from .distance import DistanceFn, get_distance
from .engine import ClusterResult
from .steps import take

logger = logging.getLogger(__name__)


@dataclass
class ClusterSummary:
    """Summary information about a single cluster."""
    cluster_id: int
    size: int
    percentage: float
    member_indices: List[int]
    representative_indices: List[int]
    centroid: Any
    mean_distance: float
    description: str = ""


def analyze_clusters(
    result: ClusterResult,
    dataset,
    names: Optional[Sequence[str]] = None,
    distance: DistanceFn = 'euclidean',
    n_representatives: int = 3,
) -> List[ClusterSummary]:
    """
    Analyze clustering results and generate summaries for each cluster.

    Args:
        result: ClusterResult from clustering
        dataset: The points that were clustered
        names: Optional display name per point
        distance: Distance used for the run
        n_representatives: Number of representative samples per cluster

    Returns:
        List of ClusterSummary objects, one per non-empty cluster
    """
    distance = get_distance(distance)
    if not isinstance(dataset, np.ndarray) and not isinstance(dataset, list):
        dataset = list(dataset)

    summaries = []
    total_samples = len(result.labels)

    for cluster_id in sorted(set(result.labels.tolist())):
        indices = result.get_cluster_indices(cluster_id)
        centroid = result.centroids[cluster_id]

        # Representatives are the members closest to the centroid
        distances = distance.pairwise(take(dataset, indices), [centroid])[:, 0]
        order = np.argsort(distances, kind='stable')[:n_representatives]
        representative_indices = indices[order].tolist()

        description = _generate_cluster_description(
            cluster_id,
            [names[i] for i in representative_indices] if names is not None else None,
        )

        summaries.append(ClusterSummary(
            cluster_id=int(cluster_id),
            size=len(indices),
            percentage=len(indices) / total_samples * 100,
            member_indices=indices.tolist(),
            representative_indices=representative_indices,
            centroid=centroid,
            mean_distance=float(distances.mean()),
            description=description,
        ))

    return summaries


def _generate_cluster_description(
    cluster_id: int,
    representative_names: Optional[List[str]] = None,
) -> str:
    """Generate a human-readable description of a cluster."""
    if representative_names:
        return f"Cluster {cluster_id}: like " + ", ".join(representative_names)
    return f"Cluster {cluster_id}"


def _format_centroid(centroid) -> str:
    if isinstance(centroid, np.ndarray):
        return "(" + ", ".join(f"{v:.3f}" for v in centroid) + ")"
    return repr(centroid)


def print_cluster_report(summaries: List[ClusterSummary], result: Optional[ClusterResult] = None):
    """Print a formatted cluster analysis report."""
    print("\n" + "=" * 60)
    print("CLUSTER ANALYSIS REPORT")
    print("=" * 60)

    if result is not None:
        status = "converged" if result.converged else "stopped at iteration bound"
        print(f"\n{result.n_clusters} clusters, {result.n_iter} iterations ({status})")
        print(f"Inertia: {result.inertia:.4f}")
        if result.degenerate_events:
            print(f"Empty-cluster incidents: {len(result.degenerate_events)}")

    for summary in summaries:
        print(f"\n{summary.description}")
        print(f"  Size: {summary.size} samples ({summary.percentage:.1f}%)")
        print(f"  Centroid: {_format_centroid(summary.centroid)}")
        print(f"  Mean distance to centroid: {summary.mean_distance:.4f}")

    print("\n" + "=" * 60)
