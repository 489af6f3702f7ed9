import concurrent.futures
from typing import List, Sequence, Tuple

import numpy as np
import torch

from .cities import CityTable
from .errors import InvalidConfigurationError


BACKENDS = ("sequential", "reduction", "torch")

# Stamped when every point coincides; raw length is used as fitness, so no
# reciprocal is taken and zero is simply the shortest possible tour.
ZERO_LENGTH_FITNESS = 0.0


def _tour_length_torch(dist: torch.Tensor, tour) -> float:
    idx = torch.tensor(tour, device=dist.device, dtype=torch.long)
    a = idx
    b = idx.roll(-1)
    return dist[a, b].sum().item()


def _chunks(n: int, parts: int) -> List[Tuple[int, int]]:
    size, extra = divmod(n, parts)
    bounds = []
    lo = 0
    for p in range(parts):
        hi = lo + size + (1 if p < extra else 0)
        if hi > lo:
            bounds.append((lo, hi))
        lo = hi
    return bounds


class FitnessEvaluator:
    """
    Computes the closed path length of a tour over a CityTable.

    ``reduction`` splits the edge range into one disjoint chunk per worker and
    adds the partial sums in chunk order, so a given order always yields the
    same value.
    """

    def __init__(
        self,
        cities: CityTable,
        backend: str = "sequential",
        workers: int = 1,
        min_chunk: int = 256,
    ):
        if backend not in BACKENDS:
            raise InvalidConfigurationError("evaluation_backend", backend, f"one of {BACKENDS}")
        if workers < 1:
            raise InvalidConfigurationError("evaluation_workers", workers, ">= 1")
        self.cities = cities
        self.backend = backend
        self.workers = workers
        self.min_chunk = max(1, min_chunk)
        self._dist_tensor = None
        if backend == "torch":
            self._dist_tensor = torch.from_numpy(np.array(cities.distance_matrix, dtype=np.float64))

    def __len__(self) -> int:
        return len(self.cities)

    def __call__(self, order: Sequence[int]) -> float:
        if self.backend == "torch":
            length = _tour_length_torch(self._dist_tensor, list(order))
        elif self.backend == "reduction":
            length = self._reduce(order)
        else:
            idx = np.asarray(order, dtype=np.intp)
            length = float(self.cities.distance_matrix[idx, np.roll(idx, -1)].sum())
        if length == 0.0:
            return ZERO_LENGTH_FITNESS
        return float(length)

    def partial_length(self, idx: np.ndarray, lo: int, hi: int) -> float:
        """Sum of edges ``idx[i] -> idx[i + 1]`` for ``i`` in ``[lo, hi)``, wrapping at the end."""
        n = len(idx)
        src = idx[lo:hi]
        dst = idx[(np.arange(lo, hi) + 1) % n]
        return float(self.cities.distance_matrix[src, dst].sum())

    def _reduce(self, order: Sequence[int]) -> float:
        idx = np.asarray(order, dtype=np.intp)
        n = len(idx)
        parts = min(self.workers, max(1, n // self.min_chunk))
        if parts == 1:
            return self.partial_length(idx, 0, n)
        bounds = _chunks(n, parts)
        with concurrent.futures.ThreadPoolExecutor(max_workers=parts) as ex:
            partials = list(ex.map(lambda b: self.partial_length(idx, *b), bounds))
        total = 0.0
        for value in partials:
            total += value
        return total
