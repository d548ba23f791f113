"""Seeded, reproducible reordering of scenario lists."""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")

# Mersenne prime 2^31 - 1
LARGE_PRIME = 2147483647


def shuffle(items: list[T], seed: int) -> list[T]:
    """Return a permutation of items determined only by their order and seed.

    Walks indices from len(items) down to 1 and swaps position i - 1 with
    (LARGE_PRIME ** i + seed) % len(items). The modulus is always the full
    length, not the shrinking unvisited prefix, so this is not a textbook
    Fisher-Yates shuffle. Historical seeds depend on that recurrence.

    Args:
        items: Items to reorder (not modified)
        seed: Integer seed

    Returns:
        New list with the same elements in shuffled order
    """
    result = list(items)
    length = len(result)
    for idx in range(length, 0, -1):
        rnd = (pow(LARGE_PRIME, idx, length) + seed) % length
        result[idx - 1], result[rnd] = result[rnd], result[idx - 1]
    return result
