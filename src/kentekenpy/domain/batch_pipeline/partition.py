"""Split ordered identifier lists into fixed-size chunks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


def partition[T](items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous, order-preserving slices of at most ``size`` items.

    The last chunk may be smaller. ``size`` is validated eagerly so a bad value
    fails at the call site rather than on first iteration.
    """

    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return _slices(items, size)


def _slices[T](items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def chunk_count(total: int, size: int) -> int:
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return -(-total // size)
