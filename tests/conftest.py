import pytest
import numpy as np


@pytest.fixture
def four_points():
    """Two well-separated pairs: left column and right column."""
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


@pytest.fixture
def blobs():
    """Three tight groups of 30 points each."""
    rng = np.random.default_rng(42)
    centers = np.array([[0.0, 0.0], [10.0, 10.0], [0.0, 10.0]])
    return np.vstack([rng.normal(loc=c, scale=0.5, size=(30, 2)) for c in centers])


def same_partition(a, b) -> bool:
    """True when two labelings group the points identically, ignoring ids."""
    a, b = np.asarray(a), np.asarray(b)
    forward, backward = {}, {}
    for x, y in zip(a.tolist(), b.tolist()):
        if forward.setdefault(x, y) != y or backward.setdefault(y, x) != x:
            return False
    return True
