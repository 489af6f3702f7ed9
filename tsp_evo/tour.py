import random
from typing import List, Sequence, Tuple

from .cities import Coordinate, coordinates
from .errors import InvalidInputError
from .evaluation import FitnessEvaluator


def is_permutation(order: Sequence[int], n: int) -> bool:
    return len(order) == n and sorted(order) == list(range(n))


def _as_index(value) -> int:
    try:
        index = int(value)
    except (TypeError, ValueError, OverflowError):
        index = None
    if index is None or index != value:
        raise InvalidInputError("Tour entries must be integer city indices", {"value": repr(value)})
    return index


class Tour:
    """
    A closed visiting order over the evaluator's cities.

    The order is stored as a tuple and never changes after construction, so
    the fitness stamped by the constructor cannot go stale. Operators build a
    new Tour for every changed sequence.
    """

    __slots__ = ("_order", "evaluator", "fitness")

    def __init__(self, order: Sequence[int], evaluator: FitnessEvaluator):
        order = tuple(_as_index(c) for c in order)
        if not is_permutation(order, len(evaluator)):
            raise InvalidInputError(
                "Tour is not a permutation of the city indices",
                {"length": len(order), "cities": len(evaluator)},
            )
        self._order = order
        self.evaluator = evaluator
        self.fitness = 0.0
        self.recompute_fitness()

    @classmethod
    def random(cls, evaluator: FitnessEvaluator, rng: random.Random, fix_start: bool = False) -> "Tour":
        order = list(range(len(evaluator)))
        if fix_start:
            rest = order[1:]
            rng.shuffle(rest)
            order[1:] = rest
        else:
            rng.shuffle(order)
        return cls(order, evaluator)

    @property
    def order(self) -> Tuple[int, ...]:
        return self._order

    @property
    def length(self) -> float:
        return self.fitness

    def recompute_fitness(self) -> float:
        self.fitness = self.evaluator(self._order)
        return self.fitness

    def is_valid(self) -> bool:
        return is_permutation(self._order, len(self.evaluator))

    def cycle(self) -> List[int]:
        return list(self._order) + [self._order[0]]

    def coordinates(self) -> List[Coordinate]:
        return coordinates(self.evaluator.cities, self.cycle())

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self):
        return iter(self._order)

    def __getitem__(self, index: int) -> int:
        return self._order[index]

    def __repr__(self) -> str:
        return f"Tour(order={list(self._order)}, fitness={self.fitness:.4f})"
