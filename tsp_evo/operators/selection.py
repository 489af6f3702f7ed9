import random
from typing import Sequence

from ..errors import InvalidInputError
from ..tour import Tour


def tournament_selection(tours: Sequence[Tour], rng: random.Random, size: int = 2) -> Tour:
    """
    Draw ``size`` members uniformly with replacement and return the shortest.

    Ties go to the earliest draw. The result is always one of the drawn
    objects, never a copy.
    """
    if not tours:
        raise InvalidInputError("Cannot select from an empty population")
    n = len(tours)
    winner = tours[rng.randrange(n)]
    for _ in range(size - 1):
        challenger = tours[rng.randrange(n)]
        if challenger.fitness < winner.fitness:
            winner = challenger
    return winner
