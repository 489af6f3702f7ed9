import concurrent.futures
import random
from typing import List, Optional, Sequence, Tuple


def swap_mutation(order: List[int], rng: random.Random, rate: float, lo: int = 0, hi: Optional[int] = None) -> List[int]:
    """
    In place: each position in ``[lo, hi)`` swaps, with probability ``rate``,
    with a position drawn uniformly from the same range.
    """
    if hi is None:
        hi = len(order)
    if hi - lo < 2:
        return order
    for i in range(lo, hi):
        if rng.random() < rate:
            j = rng.randrange(lo, hi)
            order[i], order[j] = order[j], order[i]
    return order


def partition_bounds(n: int, parts: int, offset: int = 0) -> List[Tuple[int, int]]:
    """Disjoint contiguous ranges covering ``[offset, n)``."""
    span = max(0, n - offset)
    parts = max(1, min(parts, span))
    size, extra = divmod(span, parts)
    bounds = []
    lo = offset
    for p in range(parts):
        hi = lo + size + (1 if p < extra else 0)
        bounds.append((lo, hi))
        lo = hi
    return bounds


def partitioned_swap_mutation(
    order: List[int],
    rngs: Sequence[random.Random],
    rate: float,
    executor: concurrent.futures.Executor,
    offset: int = 0,
) -> List[int]:
    """
    Mutate one tour with a worker per partition.

    Worker ``k`` only swaps inside its own range using ``rngs[k]``, so no two
    workers ever write the same index.
    """
    bounds = partition_bounds(len(order), len(rngs), offset)
    futures = [
        executor.submit(swap_mutation, order, rng, rate, lo, hi)
        for rng, (lo, hi) in zip(rngs, bounds)
    ]
    for fut in futures:
        fut.result()
    return order
