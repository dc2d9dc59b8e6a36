from __future__ import annotations

import random
from typing import List, Optional, Protocol, Sequence, TypeVar


T = TypeVar("T")


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def shuffle(items: List[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Fisher-Yates shuffle of `items` in place.

    Every permutation is equally likely given a uniform `rng`. The same list
    object is returned so the call can be chained; use `shuffled` when the
    caller still needs the original order.

    Args:
        items: List to permute.
        rng: Source exposing `randint(a, b)`; defaults to a fresh `random.Random()`.

    Returns:
        The permuted `items`.
    """
    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def shuffled(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Return a shuffled copy of `items`, leaving the input untouched."""
    return shuffle(list(items), rng)
