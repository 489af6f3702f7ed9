from dataclasses import asdict, dataclass, replace
from typing import Dict, Optional

from .errors import InvalidConfigurationError
from .evaluation import BACKENDS


@dataclass(frozen=True)
class EvolutionConfig:
    population_size: int = 100
    generations: int = 1000
    mutation_rate: float = 0.1
    crossover_rate: float = 0.8
    tournament_size: int = 2
    elite_count: int = 0
    workers: int = 1
    evaluation_workers: int = 1
    mutation_workers: int = 1
    evaluation_backend: str = "sequential"
    parallel_mutation: bool = False
    fix_start: bool = False
    random_seed: Optional[int] = 123

    def __post_init__(self):
        for name in ("mutation_rate", "crossover_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidConfigurationError(name, value, "a probability in [0, 1]")
        for name in (
            "population_size", "generations", "workers", "evaluation_workers", "mutation_workers"
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfigurationError(name, value, "a positive integer")
        if self.tournament_size < 2:
            raise InvalidConfigurationError("tournament_size", self.tournament_size, ">= 2")
        if not 0 <= self.elite_count < self.population_size:
            raise InvalidConfigurationError(
                "elite_count", self.elite_count, f"in [0, {self.population_size})"
            )
        if self.evaluation_backend not in BACKENDS:
            raise InvalidConfigurationError(
                "evaluation_backend", self.evaluation_backend, f"one of {BACKENDS}"
            )

    def replace(self, **changes) -> "EvolutionConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict:
        return asdict(self)
