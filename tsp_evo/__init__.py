"""
Population-based heuristic for the symmetric travelling-salesman problem:
tournament selection, order crossover, swap mutation and generational
replacement, run sequentially or across a pool of worker threads.
"""

from .cities import City, CityTable, graph_length, is_closed_tour
from .config import EvolutionConfig
from .errors import InvalidConfigurationError, InvalidInputError, TSPEvoError
from .evaluation import ZERO_LENGTH_FITNESS, FitnessEvaluator
from .evolutionary import GenerationScheduler, GenerationStats, SchedulerState, TourResult, solve
from .execution import SequentialExecution, ThreadedExecution, make_execution
from .population import Population
from .tour import Tour

__all__ = [
    "City",
    "CityTable",
    "EvolutionConfig",
    "FitnessEvaluator",
    "GenerationScheduler",
    "GenerationStats",
    "InvalidConfigurationError",
    "InvalidInputError",
    "Population",
    "SchedulerState",
    "SequentialExecution",
    "TSPEvoError",
    "ThreadedExecution",
    "Tour",
    "TourResult",
    "ZERO_LENGTH_FITNESS",
    "make_execution",
    "solve",
    "graph_length",
    "is_closed_tour",
]
