"""
Common utility functions for lloydkit.
"""

import logging
import multiprocessing
from typing import Generator

logger = logging.getLogger(__name__)


def resolve_workers(n_workers: int) -> int:
    """
    Translate a worker setting into a process count.

    0 means sequential, -1 means one less than the number of CPUs.
    """
    if n_workers == -1:
        return max(1, multiprocessing.cpu_count() - 1)
    if n_workers < 0:
        raise ValueError(f"parallel workers must be >= -1, got {n_workers}")
    return n_workers


def chunk_slices(n_items: int, n_chunks: int) -> Generator[slice, None, None]:
    """
    Yields contiguous slices covering range(n_items) in order.

    Sizes differ by at most one; no empty slice is produced.

    Args:
        n_items: Number of items to cover
        n_chunks: Desired number of slices
    """
    n_chunks = max(1, min(n_chunks, n_items))
    base, extra = divmod(n_items, n_chunks)
    start = 0
    for i in range(n_chunks):
        stop = start + base + (1 if i < extra else 0)
        if stop > start:
            yield slice(start, stop)
        start = stop
