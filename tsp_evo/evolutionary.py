import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import networkx as nx

from .cities import CityTable, Coordinate, as_city_table, coordinates, is_closed_tour
from .config import EvolutionConfig
from .errors import TSPEvoError
from .evaluation import FitnessEvaluator
from .execution import Execution, make_execution
from .population import Population
from .tour import Tour

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    EVOLVING = "evolving"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class GenerationStats:
    generation: int
    best_length: float
    mean_length: float


@dataclass
class TourResult:
    order: List[int]
    length: float
    generations: int
    cities: CityTable
    history: List[GenerationStats] = field(default_factory=list)

    @property
    def cycle(self) -> List[int]:
        return self.order + self.order[:1]

    @property
    def coordinates(self) -> List[Coordinate]:
        return coordinates(self.cities, self.cycle)

    def to_graph(self) -> nx.MultiGraph:
        return self.cities.tour_graph(self.order)


class GenerationScheduler:
    """
    Drives a population through a fixed number of generations.

    Lifecycle: ``UNINITIALIZED -> INITIALIZED -> EVOLVING* -> TERMINATED``.
    The execution strategy (sequential or threaded) is picked from the config
    unless one is passed in.
    """

    def __init__(
        self,
        cities,
        config: Optional[EvolutionConfig] = None,
        execution: Optional[Execution] = None,
        on_generation: Optional[Callable[[GenerationStats], None]] = None,
    ):
        self.cfg = config or EvolutionConfig()
        self.cities = as_city_table(cities)
        self.evaluator = FitnessEvaluator(
            self.cities,
            backend=self.cfg.evaluation_backend,
            workers=self.cfg.evaluation_workers,
        )
        self.execution = execution or make_execution(self.cfg)
        self.on_generation = on_generation
        self.population = Population(self.evaluator, self.cfg)
        self.state = SchedulerState.UNINITIALIZED
        self.generation = 0
        self.history: List[GenerationStats] = []

    def _require(self, *states: SchedulerState) -> None:
        if self.state not in states:
            raise TSPEvoError(
                f"Scheduler is {self.state.value}",
                {"allowed": [s.value for s in states]},
            )

    def _record(self) -> None:
        stats = GenerationStats(
            generation=self.generation,
            best_length=self.population.fittest().fitness,
            mean_length=self.population.mean_fitness(),
        )
        self.history.append(stats)
        logger.debug(
            f"generation {stats.generation}: best={stats.best_length:.4f} mean={stats.mean_length:.4f}"
        )
        if self.on_generation is not None:
            self.on_generation(stats)

    def initialize(self) -> None:
        self._require(SchedulerState.UNINITIALIZED)
        self.population.initialize(self.execution.rng)
        self.state = SchedulerState.INITIALIZED
        self._record()

    def step(self) -> None:
        self._require(SchedulerState.INITIALIZED, SchedulerState.EVOLVING)
        if self.generation >= self.cfg.generations:
            raise TSPEvoError(
                "Generation budget exhausted", {"generations": self.cfg.generations}
            )
        self.state = SchedulerState.EVOLVING
        self.population.evolve(self.execution)
        self.generation += 1
        self._record()

    def best(self) -> Tour:
        self._require(SchedulerState.INITIALIZED, SchedulerState.EVOLVING, SchedulerState.TERMINATED)
        return self.population.fittest()

    def close(self) -> None:
        self.execution.close()
        self.state = SchedulerState.TERMINATED

    def result(self) -> TourResult:
        best = self.best()
        graph = self.cities.tour_graph(best.order)
        if not is_closed_tour(graph, len(self.cities)):
            raise TSPEvoError(
                "Best tour does not visit every city exactly once", {"order": list(best.order)}
            )
        return TourResult(
            order=list(best.order),
            length=best.fitness,
            generations=self.generation,
            cities=self.cities,
            history=list(self.history),
        )

    def run(self) -> TourResult:
        self._require(SchedulerState.UNINITIALIZED, SchedulerState.INITIALIZED, SchedulerState.EVOLVING)
        logger.info(
            f"evolving {self.cfg.population_size} tours over {len(self.cities)} cities "
            f"for {self.cfg.generations} generations (workers={self.execution.workers})"
        )
        try:
            if self.state == SchedulerState.UNINITIALIZED:
                self.initialize()
            while self.generation < self.cfg.generations:
                self.step()
        finally:
            self.close()
        result = self.result()
        logger.info(f"best tour length {result.length:.4f} after {result.generations} generations")
        return result

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        if self.state != SchedulerState.TERMINATED:
            self.close()


def solve(cities, config: Optional[EvolutionConfig] = None, **overrides) -> TourResult:
    cfg = config or EvolutionConfig()
    if overrides:
        cfg = cfg.replace(**overrides)
    return GenerationScheduler(cities, cfg).run()
