"""
lloydkit Configuration Settings
Central defaults shared by the engine, the config loader and the scripts.
"""

# =============================================================================
# Config File Discovery
# =============================================================================
CONFIG_FILENAMES = [
    "lloydkit.yaml",
    ".lloydkit.yaml",
    "lloydkit.yml",
]

# =============================================================================
# K-Means Configuration
# =============================================================================
KMEANS_DEFAULT_CLUSTERS = 3
KMEANS_MAX_ITER = 300
KMEANS_N_INIT = 1

# equal-block-random, random-centroid-sample, k-means++
DEFAULT_INIT_STRATEGY = "equal-block-random"

# euclidean, manhattan, edit
DEFAULT_DISTANCE = "euclidean"

# mean (numeric points) or medoid (any distance, e.g. words)
DEFAULT_CENTROID = "mean"

# freeze, reseed, drop, error
DEFAULT_EMPTY_CLUSTER_POLICY = "freeze"

RANDOM_STATE = 42

# =============================================================================
# Execution Configuration
# =============================================================================
PARALLEL_WORKERS = 0  # 0=sequential, -1=auto

# =============================================================================
# Reporting Configuration
# =============================================================================
N_REPRESENTATIVES = 3
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
