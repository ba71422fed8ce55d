"""
Configuration File Support for lloydkit

Allows project-specific configuration via lloydkit.yaml.
"""

from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass, replace
import logging

import yaml

from config.settings import (
    CONFIG_FILENAMES,
    DEFAULT_CENTROID,
    DEFAULT_DISTANCE,
    DEFAULT_EMPTY_CLUSTER_POLICY,
    DEFAULT_INIT_STRATEGY,
    KMEANS_DEFAULT_CLUSTERS,
    KMEANS_MAX_ITER,
    KMEANS_N_INIT,
    N_REPRESENTATIVES,
    PARALLEL_WORKERS,
    RANDOM_STATE,
)

logger = logging.getLogger(__name__)


@dataclass
class ClusteringConfig:
    """Project-specific configuration."""

    # Clustering
    n_clusters: int = KMEANS_DEFAULT_CLUSTERS
    max_iterations: int = KMEANS_MAX_ITER
    n_init: int = KMEANS_N_INIT
    init: str = DEFAULT_INIT_STRATEGY
    distance: str = DEFAULT_DISTANCE
    centroid: str = DEFAULT_CENTROID
    empty_cluster_policy: str = DEFAULT_EMPTY_CLUSTER_POLICY
    random_state: Optional[int] = RANDOM_STATE

    # Execution
    parallel_workers: int = PARALLEL_WORKERS  # 0=sequential, -1=auto

    # Output
    output_dir: str = "outputs"
    n_representatives: int = N_REPRESENTATIVES
    print_report: bool = False


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Search start_dir and its parents for a lloydkit config file."""
    current_dir = Path(start_dir) if start_dir is not None else Path.cwd()

    for directory in [current_dir] + list(current_dir.parents):
        for name in CONFIG_FILENAMES:
            path = directory / name
            if path.exists():
                return path
    return None


def load_config(config_path: Optional[Union[str, Path]] = None) -> ClusteringConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, searches for lloydkit.yaml
                    in current directory and parent directories.

    Returns:
        ClusteringConfig with loaded or default values
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None or not Path(config_path).exists():
        logger.debug("No config file found, using defaults")
        return ClusteringConfig()

    config_path = Path(config_path)

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loaded config from {config_path}")

        # Flatten nested config
        clustering = data.get('clustering', {}) or {}
        execution = data.get('execution', {}) or {}
        output = data.get('output', {}) or {}

        return ClusteringConfig(
            # Clustering
            n_clusters=clustering.get('n_clusters', KMEANS_DEFAULT_CLUSTERS),
            max_iterations=clustering.get('max_iterations', KMEANS_MAX_ITER),
            n_init=clustering.get('n_init', KMEANS_N_INIT),
            init=clustering.get('init', DEFAULT_INIT_STRATEGY),
            distance=clustering.get('distance', DEFAULT_DISTANCE),
            centroid=clustering.get('centroid', DEFAULT_CENTROID),
            empty_cluster_policy=clustering.get(
                'empty_cluster_policy', DEFAULT_EMPTY_CLUSTER_POLICY
            ),
            random_state=clustering.get('random_state', RANDOM_STATE),

            # Execution
            parallel_workers=execution.get('parallel_workers', PARALLEL_WORKERS),

            # Output
            output_dir=output.get('directory', 'outputs'),
            n_representatives=output.get('representatives', N_REPRESENTATIVES),
            print_report=output.get('report', False),
        )

    except (OSError, TypeError, ValueError, AttributeError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config: {e}, using defaults")
        return ClusteringConfig()


def save_default_config(output_path: Union[str, Path]) -> Path:
    """
    Save a default configuration file as a template.

    Args:
        output_path: Where to save the config

    Returns:
        Path to saved config file
    """
    default_config = f"""# lloydkit Configuration
# Copy to your project root as lloydkit.yaml

# K-means settings
clustering:
  n_clusters: {KMEANS_DEFAULT_CLUSTERS}
  max_iterations: {KMEANS_MAX_ITER}   # hard bound on refinement rounds
  n_init: {KMEANS_N_INIT}             # independent restarts, lowest inertia wins
  init: {DEFAULT_INIT_STRATEGY}       # equal-block-random, random-centroid-sample, k-means++
  distance: {DEFAULT_DISTANCE}        # euclidean, manhattan, edit
  centroid: {DEFAULT_CENTROID}        # mean or medoid
  empty_cluster_policy: {DEFAULT_EMPTY_CLUSTER_POLICY}  # freeze, reseed, drop, error
  random_state: {RANDOM_STATE}

# Execution settings
execution:
  parallel_workers: {PARALLEL_WORKERS}   # 0 = sequential (default), -1 = auto-detect

# Output settings
output:
  directory: outputs
  representatives: {N_REPRESENTATIVES}
  report: false            # print the cluster report
"""

    output_path = Path(output_path)
    output_path.write_text(default_config)
    return output_path


# Preset configurations
PRESETS = {
    'reference': ClusteringConfig(
        init='equal-block-random',
        n_init=1,
        empty_cluster_policy='freeze',
    ),
    'fast': ClusteringConfig(
        init='random-centroid-sample',
        n_init=1,
        max_iterations=50,
        empty_cluster_policy='reseed',
    ),
    'thorough': ClusteringConfig(
        init='k-means++',
        n_init=10,
        max_iterations=500,
        empty_cluster_policy='reseed',
    ),
}


def get_preset(name: str) -> ClusteringConfig:
    """Get a preset configuration by name."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {list(PRESETS.keys())}")
    return replace(PRESETS[name])
