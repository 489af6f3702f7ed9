from .crossover import crossover, crossover_segment, order_crossover
from .mutation import partition_bounds, partitioned_swap_mutation, swap_mutation
from .selection import tournament_selection

__all__ = [
    "crossover",
    "crossover_segment",
    "order_crossover",
    "partition_bounds",
    "partitioned_swap_mutation",
    "swap_mutation",
    "tournament_selection",
]
