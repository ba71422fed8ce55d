"""
lloydkit: K-means clustering with pluggable distances and initializations

Partition points into k clusters with Lloyd's algorithm.
"""

from .clustering import KMeansEngine, ClusterResult, cluster
from .errors import KMeansError, InvalidParameterError, DegenerateClusterCondition

__version__ = "0.1.0"
__author__ = "lloydkit Team"
