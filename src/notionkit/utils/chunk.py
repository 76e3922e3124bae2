"""Batch a sequence into groups of at most *size* items.

Block append calls accept at most 100 children per request.  This helper
splits an arbitrarily long list so callers can issue compliant batches.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int = 100) -> list[list[T]]:
    """Split *items* into consecutive batches of at most *size*.

    An empty input returns ``[]`` (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(batch) for batch in chunked(list(range(250)))]
    [100, 100, 50]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]
