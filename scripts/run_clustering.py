#!/usr/bin/env python3
"""
K-Means Clustering Script

Runs the lloydkit pipeline:
1. Load points (CSV, NPY, or a word list)
2. Cluster with K-means
3. Save assignments and cluster info
4. Optionally print a report
"""

import argparse
import sys
import json
from pathlib import Path
import logging

import numpy as np
import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from lloydkit.clustering import KMeansEngine, analyze_clusters, print_cluster_report
from lloydkit.dataset import load_dataset
from lloydkit.errors import KMeansError
from config.settings import LOG_FORMAT
from config.project_config import load_config, get_preset

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cluster points with K-means (Lloyd's algorithm)"
    )
    parser.add_argument(
        '--input',
        type=Path,
        required=True,
        help='Input points (.csv, .npy, or .txt with one word per line)'
    )
    parser.add_argument(
        '--k',
        type=int,
        default=None,
        help='Number of clusters (config value if not specified)'
    )
    parser.add_argument(
        '--columns',
        nargs='+',
        default=None,
        help='CSV columns to use as coordinates (all numeric columns by default)'
    )
    parser.add_argument(
        '--distance',
        choices=['euclidean', 'manhattan', 'edit'],
        default=None,
        help='Distance function'
    )
    parser.add_argument(
        '--init',
        choices=['equal-block-random', 'random-centroid-sample', 'k-means++'],
        default=None,
        help='Initialization strategy'
    )
    parser.add_argument(
        '--centroid',
        choices=['mean', 'medoid'],
        default=None,
        help='Centroid rule (medoid is required for words)'
    )
    parser.add_argument(
        '--max-iter',
        type=int,
        default=None,
        help='Maximum refinement rounds'
    )
    parser.add_argument(
        '--n-init',
        type=int,
        default=None,
        help='Number of restarts; the lowest inertia wins'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed'
    )
    parser.add_argument(
        '--empty-policy',
        choices=['freeze', 'reseed', 'drop', 'error'],
        default=None,
        help='What to do when a cluster loses all of its points'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Parallel workers for reassignment (0=sequential, -1=auto)'
    )
    parser.add_argument(
        '--preset',
        choices=['reference', 'fast', 'thorough'],
        default=None,
        help='Start from a preset configuration instead of lloydkit.yaml'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to lloydkit.yaml config file'
    )
    parser.add_argument(
        '--output',
        type=Path,
        default=None,
        help='Output directory for results'
    )
    parser.add_argument(
        '--report',
        action='store_true',
        help='Print detailed cluster report'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log every iteration'
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    config = get_preset(args.preset) if args.preset else load_config(args.config)

    # Command line flags override the config file
    overrides = {
        'n_clusters': args.k,
        'distance': args.distance,
        'init': args.init,
        'centroid': args.centroid,
        'max_iterations': args.max_iter,
        'n_init': args.n_init,
        'random_state': args.seed,
        'empty_cluster_policy': args.empty_policy,
        'parallel_workers': args.workers,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)

    # Words only make sense with edit distance and medoids
    if args.input.suffix.lower() == '.txt':
        if args.distance is None:
            config.distance = 'edit'
        if args.centroid is None:
            config.centroid = 'medoid'

    print("\n📐 lloydkit K-Means")
    print("=" * 50)

    print(f"\n📊 Loading points from {args.input}...")
    try:
        loaded = load_dataset(args.input, columns=args.columns)
    except (FileNotFoundError, KMeansError) as e:
        print(f"❌ {e}")
        return 1
    print(f"   Loaded {len(loaded)} points")

    print(f"\n🎯 Clustering into {config.n_clusters} clusters ({config.init}, {config.distance})...")
    try:
        engine = KMeansEngine.from_config(config)
        result = engine.cluster(loaded.points, config.n_clusters)
    except KMeansError as e:
        print(f"❌ {e}")
        return 1

    status = "converged" if result.converged else "hit the iteration bound"
    print(f"   {status} after {result.n_iter} iterations")
    print(f"   Cluster sizes: {result.get_cluster_sizes()}")
    print(f"   Inertia: {result.inertia:.4f}")

    output_dir = args.output if args.output is not None else Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame({'name': loaded.names, 'cluster': result.labels})
    assignments_file = output_dir / 'assignments.csv'
    df.to_csv(assignments_file, index=False)
    print(f"\n💾 Saved assignments to {assignments_file}")

    summaries = analyze_clusters(
        result,
        loaded.points,
        names=loaded.names,
        distance=config.distance,
        n_representatives=config.n_representatives,
    )
    cluster_info = {
        'n_clusters': result.n_clusters,
        'n_iter': result.n_iter,
        'converged': result.converged,
        'inertia': result.inertia,
        'clusters': [],
    }
    for s in summaries:
        centroid = s.centroid.tolist() if isinstance(s.centroid, np.ndarray) else s.centroid
        cluster_info['clusters'].append({
            'cluster_id': s.cluster_id,
            'size': s.size,
            'percentage': s.percentage,
            'centroid': centroid,
            'representatives': [loaded.names[i] for i in s.representative_indices],
        })

    with open(output_dir / 'cluster_info.json', 'w') as f:
        json.dump(cluster_info, f, indent=2)

    if args.report or config.print_report:
        print_cluster_report(summaries, result)

    print("\n🎉 Clustering complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
