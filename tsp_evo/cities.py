import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple, Union

import networkx as nx
import numpy as np

from .errors import InvalidInputError


Coordinate = Tuple[float, float]


@dataclass(frozen=True)
class City:
    x: float
    y: float

    def distance(self, other: "City") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def _as_pair(item, index: int) -> Coordinate:
    try:
        if isinstance(item, City):
            x, y = item.x, item.y
        else:
            x, y = item
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"City {index} is not an (x, y) pair", {"index": index, "value": repr(item)}
        )
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidInputError(
            f"City {index} has a non-finite coordinate", {"index": index, "value": (x, y)}
        )
    return x, y


class CityTable:
    """Immutable ordered set of 2D points shared read-only by every tour."""

    def __init__(self, cities: Iterable[Union[City, Sequence[float]]]):
        pairs = [_as_pair(item, i) for i, item in enumerate(cities)]
        if len(pairs) < 2:
            raise InvalidInputError(
                "At least 2 cities are required to form a tour", {"cities": len(pairs)}
            )
        coords = np.asarray(pairs, dtype=np.float64)
        diff = coords[:, None, :] - coords[None, :, :]
        dist = np.sqrt((diff ** 2).sum(axis=2))
        coords.setflags(write=False)
        dist.setflags(write=False)
        self._coords = coords
        self._dist = dist
        self._cities = tuple(City(x, y) for x, y in pairs)

    @property
    def coords(self) -> np.ndarray:
        return self._coords

    @property
    def distance_matrix(self) -> np.ndarray:
        return self._dist

    @property
    def cities(self) -> Tuple[City, ...]:
        return self._cities

    def distance(self, a: int, b: int) -> float:
        return float(self._dist[a, b])

    def __len__(self) -> int:
        return len(self._cities)

    def __getitem__(self, index: int) -> City:
        return self._cities[index]

    def __iter__(self):
        return iter(self._cities)

    def __repr__(self) -> str:
        return f"CityTable(n={len(self)})"

    def tour_graph(self, order: Sequence[int]) -> nx.MultiGraph:
        """Closed tour as a graph; nodes carry ``pos`` and edges carry ``weight``."""
        graph = nx.MultiGraph()
        for i in order:
            graph.add_node(i, pos=(self[i].x, self[i].y))
        n = len(order)
        for k in range(n):
            a, b = order[k], order[(k + 1) % n]
            graph.add_edge(a, b, weight=self.distance(a, b))
        return graph


def is_closed_tour(graph: nx.MultiGraph, n: int) -> bool:
    """True when ``graph`` is one cycle through all ``n`` cities."""
    if graph.number_of_nodes() != n or graph.number_of_edges() != n:
        return False
    if any(degree != 2 for _, degree in graph.degree()):
        return False
    return nx.is_connected(graph)


def graph_length(graph: nx.MultiGraph) -> float:
    return float(graph.size(weight="weight"))


def as_city_table(cities) -> CityTable:
    if isinstance(cities, CityTable):
        return cities
    return CityTable(cities)


def coordinates(table: CityTable, order: Sequence[int]) -> List[Coordinate]:
    return [(table[i].x, table[i].y) for i in order]
