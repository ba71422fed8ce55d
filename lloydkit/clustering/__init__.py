"""Clustering package: the K-means engine and its pluggable parts."""
from .engine import KMeansEngine, ClusterResult, cluster
from .distance import (
    Distance,
    EuclideanDistance,
    ManhattanDistance,
    EditDistance,
    CallableDistance,
    get_distance,
)
from .initialization import (
    Initializer,
    EqualBlockRandom,
    RandomCentroidSample,
    KMeansPlusPlus,
    FixedAssignment,
    get_initializer,
)
from .steps import update_centroids, refresh_centroids, reassign, objective, DegenerateCluster
from .analysis import analyze_clusters, print_cluster_report
