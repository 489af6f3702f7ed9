import concurrent.futures
import random
from typing import List, Optional, Sequence

from .config import EvolutionConfig
from .errors import InvalidInputError
from .evaluation import FitnessEvaluator
from .operators import order_crossover, partitioned_swap_mutation, swap_mutation, tournament_selection
from .tour import Tour


def breed(
    tours: Sequence[Tour],
    rng: random.Random,
    cfg: EvolutionConfig,
    mutation_executor: Optional[concurrent.futures.Executor] = None,
) -> Tour:
    """Select two parents, recombine, mutate and stamp one child."""
    parent1 = tournament_selection(tours, rng, cfg.tournament_size)
    parent2 = tournament_selection(tours, rng, cfg.tournament_size)
    order = order_crossover(parent1, parent2, rng, cfg.crossover_rate)
    offset = 1 if cfg.fix_start else 0
    if mutation_executor is not None:
        rngs = [random.Random(rng.getrandbits(64)) for _ in range(cfg.mutation_workers)]
        partitioned_swap_mutation(order, rngs, cfg.mutation_rate, mutation_executor, offset)
    else:
        swap_mutation(order, rng, cfg.mutation_rate, lo=offset)
    # Fitness is computed once here, after every swap has been applied.
    return Tour(order, parent1.evaluator)


class Population:
    def __init__(self, evaluator: FitnessEvaluator, cfg: EvolutionConfig):
        self.evaluator = evaluator
        self.cfg = cfg
        self.size = cfg.population_size
        self.tours: List[Tour] = []

    def __len__(self) -> int:
        return len(self.tours)

    def __iter__(self):
        return iter(self.tours)

    def initialize(self, rng: random.Random) -> None:
        self.tours = [
            Tour.random(self.evaluator, rng, fix_start=self.cfg.fix_start)
            for _ in range(self.size)
        ]

    def replace(self, tours: List[Tour]) -> None:
        if len(tours) != self.size:
            raise InvalidInputError(
                "Next generation has the wrong size", {"expected": self.size, "got": len(tours)}
            )
        self.tours = list(tours)

    def evolve(self, execution) -> None:
        """Breed a full next generation and swap it in as a whole."""
        if not self.tours:
            raise InvalidInputError("Population has not been initialized")
        elites = self.ranked()[: self.cfg.elite_count]
        children = execution.produce(self.tours, self.size - len(elites), self.cfg)
        self.replace(elites + children)

    def ranked(self) -> List[Tour]:
        return sorted(self.tours, key=lambda t: t.fitness)

    def fittest(self) -> Tour:
        if not self.tours:
            raise InvalidInputError("Population has not been initialized")
        best = self.tours[0]
        for tour in self.tours[1:]:
            if tour.fitness < best.fitness:
                best = tour
        return best

    def mean_fitness(self) -> float:
        if not self.tours:
            return float("inf")
        return sum(t.fitness for t in self.tours) / len(self.tours)
