"""Helpers for splitting writes into atomic batches."""

from typing import Iterator, List, Sequence, TypeVar

T = TypeVar("T")

# Maximum operations the document database accepts in one atomic batch
MAX_BATCH_SIZE = 500


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError("size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
