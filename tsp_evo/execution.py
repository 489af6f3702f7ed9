"""
Execution strategies for breeding a generation.

Both strategies own their random generators. ``ThreadedExecution`` gives each
worker its own generator seeded with ``seed ^ worker`` and a fixed set of
slots in the next generation, so threaded runs are as reproducible as
sequential ones.
"""

import concurrent.futures
import logging
import random
import threading
from typing import List, Optional, Sequence

from .config import EvolutionConfig
from .errors import InvalidConfigurationError
from .population import breed
from .tour import Tour

logger = logging.getLogger(__name__)


def resolve_seed(seed: Optional[int]) -> int:
    if seed is None:
        return random.SystemRandom().randrange(2 ** 32)
    return int(seed)


def derive_seed(seed: int, worker: int) -> int:
    return seed ^ worker


class Execution:
    workers: int = 1

    def __init__(self, seed: Optional[int] = None):
        self.seed = resolve_seed(seed)
        self._mutation_pool: Optional[concurrent.futures.ThreadPoolExecutor] = None

    @property
    def rng(self) -> random.Random:
        raise NotImplementedError

    def produce(self, tours: Sequence[Tour], count: int, cfg: EvolutionConfig) -> List[Tour]:
        raise NotImplementedError

    def mutation_executor(self, cfg: EvolutionConfig) -> Optional[concurrent.futures.Executor]:
        if not cfg.parallel_mutation:
            return None
        if self._mutation_pool is None:
            self._mutation_pool = concurrent.futures.ThreadPoolExecutor(
                max_workers=cfg.mutation_workers, thread_name_prefix="tsp-evo-mutate"
            )
        return self._mutation_pool

    def close(self) -> None:
        if self._mutation_pool is not None:
            self._mutation_pool.shutdown(wait=True)
            self._mutation_pool = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class SequentialExecution(Execution):
    def __init__(self, seed: Optional[int] = None):
        super().__init__(seed)
        self._rng = random.Random(self.seed)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def produce(self, tours: Sequence[Tour], count: int, cfg: EvolutionConfig) -> List[Tour]:
        mutation_pool = self.mutation_executor(cfg)
        return [breed(tours, self._rng, cfg, mutation_pool) for _ in range(count)]


class ThreadedExecution(Execution):
    def __init__(self, workers: int, seed: Optional[int] = None):
        if workers < 1:
            raise InvalidConfigurationError("workers", workers, "a positive integer")
        super().__init__(seed)
        self.workers = workers
        self.rngs = [random.Random(derive_seed(self.seed, w)) for w in range(workers)]
        self._pool = concurrent.futures.ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="tsp-evo"
        )

    @property
    def rng(self) -> random.Random:
        return self.rngs[0]

    def produce(self, tours: Sequence[Tour], count: int, cfg: EvolutionConfig) -> List[Tour]:
        next_gen: List[Optional[Tour]] = [None] * count
        lock = threading.Lock()
        mutation_pool = self.mutation_executor(cfg)

        def work(w: int) -> int:
            rng = self.rngs[w]
            local = [
                (slot, breed(tours, rng, cfg, mutation_pool))
                for slot in range(w, count, self.workers)
            ]
            with lock:
                for slot, child in local:
                    next_gen[slot] = child
            return len(local)

        futures = [self._pool.submit(work, w) for w in range(self.workers)]
        produced = sum(f.result() for f in futures)
        logger.debug(f"{self.workers} workers bred {produced} children")
        return next_gen

    def close(self) -> None:
        self._pool.shutdown(wait=True)
        super().close()


def make_execution(cfg: EvolutionConfig) -> Execution:
    if cfg.workers == 1:
        return SequentialExecution(cfg.random_seed)
    return ThreadedExecution(cfg.workers, cfg.random_seed)
