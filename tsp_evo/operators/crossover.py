import random
from typing import List, Sequence

from ..errors import InvalidInputError
from ..tour import Tour


def _clamp(value: int, n: int) -> int:
    return min(max(value, 0), n - 1)


def crossover_segment(seq1: Sequence[int], seq2: Sequence[int], start: int, end: int) -> List[int]:
    """
    Copy ``seq1`` and, for every position ``i`` in ``[start, end]``, swap the
    city ``seq2[i]`` into position ``i``.

    Out-of-range bounds are clamped and reversed bounds are normalised. Every
    step swaps two positions of the child, so the result is a permutation
    whenever ``seq1`` is one.
    """
    n = len(seq1)
    if len(seq2) != n:
        raise InvalidInputError(
            "Parents must have the same length", {"parent1": n, "parent2": len(seq2)}
        )
    child = list(seq1)
    if n == 0:
        return child
    start, end = _clamp(start, n), _clamp(end, n)
    if start > end:
        start, end = end, start
    pos = {city: i for i, city in enumerate(child)}
    for i in range(start, end + 1):
        j = pos[seq2[i]]
        if j == i:
            continue
        a, b = child[i], child[j]
        child[i], child[j] = b, a
        pos[b], pos[a] = i, j
    return child


def order_crossover(parent1: Tour, parent2: Tour, rng: random.Random, rate: float) -> List[int]:
    """
    With probability ``rate`` recombine over a random segment, otherwise copy
    parent1. Parents are left untouched; the caller mutates and stamps the
    returned order.
    """
    if len(parent1) != len(parent2):
        raise InvalidInputError(
            "Parents must have the same length", {"parent1": len(parent1), "parent2": len(parent2)}
        )
    if rng.random() < rate:
        n = len(parent1)
        start = rng.randrange(n)
        end = rng.randrange(n)
        return crossover_segment(parent1.order, parent2.order, start, end)
    return list(parent1.order)


def crossover(parent1: Tour, parent2: Tour, rng: random.Random, rate: float) -> Tour:
    return Tour(order_crossover(parent1, parent2, rng, rate), parent1.evaluator)
