"""
Dataset Loading and Validation

Turns arrays, lists and files into the point collections the engine works
on: a 2-D float array for numeric points, or a list of strings (or tuples
of string symbols) for sequence points clustered by edit distance.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import List, Optional, Sequence, Union
from dataclasses import dataclass
import logging

from .errors import InvalidParameterError

logger = logging.getLogger(__name__)

Dataset = Union[np.ndarray, List[Union[str, tuple]]]


@dataclass
class LoadedDataset:
    """Points read from disk together with their row and column names."""
    points: Dataset
    names: List[str]
    feature_names: Optional[List[str]]
    source: Path

    def __len__(self) -> int:
        return len(self.points)


def _is_symbol_sequence(item) -> bool:
    if isinstance(item, str):
        return True
    return isinstance(item, (tuple, list)) and len(item) > 0 and all(isinstance(s, str) for s in item)


def is_sequence_data(data: Sequence) -> bool:
    """True when every item is a string or a tuple/list of string symbols."""
    if isinstance(data, np.ndarray):
        return data.ndim == 1 and data.dtype.kind in ('U', 'S', 'O') and all(isinstance(x, str) for x in data)
    return len(data) > 0 and all(_is_symbol_sequence(x) for x in data)


def as_dataset(data, numeric: bool = True) -> Dataset:
    """
    Validate a dataset and normalize its representation.

    Args:
        data: Array-like of shape (n, d), or strings / tuples of string symbols
        numeric: Require coordinate points (needed for mean centroids)

    Returns:
        float64 array of shape (n, d), or a list of strings and symbol tuples

    Raises:
        InvalidParameterError: empty data, mismatched dimensionality,
            non-finite coordinates, or strings where numbers are required
    """
    if data is None:
        raise InvalidParameterError("Dataset must not be empty")

    if not isinstance(data, np.ndarray):
        data = list(data)
    if len(data) == 0:
        raise InvalidParameterError("Dataset must not be empty")

    if is_sequence_data(data):
        if numeric:
            raise InvalidParameterError(
                "Mean centroids need numeric points; use centroid='medoid' for sequences"
            )
        return [str(x) if isinstance(x, str) else tuple(x) for x in data]

    try:
        X = np.asarray(data, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParameterError(f"Points have mismatched dimensionality or non-numeric values: {e}")

    if X.ndim != 2:
        raise InvalidParameterError(
            f"Expected a 2-D collection of points (n, d), got shape {X.shape}"
        )
    if X.shape[1] == 0:
        raise InvalidParameterError("Points must have at least one coordinate")
    if not np.all(np.isfinite(X)):
        raise InvalidParameterError("Dataset contains NaN or infinite coordinates")

    return X


def load_dataset(
    path: Union[str, Path],
    columns: Optional[List[str]] = None,
) -> LoadedDataset:
    """
    Load points from a file.

    Supported formats:
    - .csv: numeric columns (or the given ``columns``) become coordinates,
      the first non-numeric column names the rows
    - .npy: a 2-D array of coordinates
    - .txt: one word per line, for edit-distance clustering

    Args:
        path: File to read
        columns: Optional subset of CSV columns to use as coordinates

    Returns:
        LoadedDataset
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")

    suffix = path.suffix.lower()

    if suffix == '.csv':
        df = pd.read_csv(path)
        if columns:
            missing = [c for c in columns if c not in df.columns]
            if missing:
                raise InvalidParameterError(f"Columns not found in {path.name}: {missing}")
            feature_names = list(columns)
        else:
            feature_names = df.select_dtypes(include=[np.number]).columns.tolist()
        if not feature_names:
            raise InvalidParameterError(f"No numeric columns found in {path.name}")

        label_columns = [
            c for c in df.columns
            if c not in feature_names and not pd.api.types.is_numeric_dtype(df[c])
        ]
        if label_columns:
            names = df[label_columns[0]].astype(str).tolist()
        else:
            names = [str(i) for i in range(len(df))]

        points = as_dataset(df[feature_names].values)
        logger.info(f"Loaded {len(points)} points with {len(feature_names)} features from {path}")
        return LoadedDataset(points, names, feature_names, path)

    if suffix == '.npy':
        points = as_dataset(np.load(path))
        names = [str(i) for i in range(len(points))]
        feature_names = [f"x{i}" for i in range(points.shape[1])]
        logger.info(f"Loaded {len(points)} points of dimension {points.shape[1]} from {path}")
        return LoadedDataset(points, names, feature_names, path)

    if suffix == '.txt':
        with open(path, 'r', encoding='utf-8') as f:
            words = [line.strip() for line in f if line.strip()]
        points = as_dataset(words, numeric=False)
        logger.info(f"Loaded {len(points)} words from {path}")
        return LoadedDataset(points, list(points), None, path)

    raise InvalidParameterError(f"Unsupported dataset format: {suffix}")
