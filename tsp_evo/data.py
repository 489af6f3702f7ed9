import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import tsplib95

from .cities import CityTable
from .errors import InvalidInputError


logger = logging.getLogger(__name__)

SOLUTION_SUFFIXES = (".opt.tour", ".opt", ".tour")
DIMENSION_RE = re.compile(r"^\s*DIMENSION\s*:?\s*(\d+)", re.IGNORECASE)


@dataclass
class Instance:
    name: str
    path: Path
    cities: CityTable
    optimum: Optional[float]


def solution_paths(path: Path) -> List[Path]:
    """Places an optimal tour for ``path`` may live, beside it first."""
    return [path.with_suffix(".opt.tour")] + [
        path.parent / "solutions" / (path.stem + suffix) for suffix in SOLUTION_SUFFIXES
    ]


def header_dimension(path: Path) -> Optional[int]:
    """DIMENSION from the header keywords, without parsing the node section."""
    with path.open("r") as f:
        for line in f:
            if line.strip().upper().endswith("_SECTION"):
                break
            match = DIMENSION_RE.match(line)
            if match:
                return int(match.group(1))
    return None


def _optimum_from(candidate: Path, cities: CityTable, node_index: dict) -> Optional[float]:
    tours = tsplib95.parse(candidate.read_text()).tours
    if not tours:
        return None
    unknown = [n for n in tours[0] if n not in node_index]
    if unknown:
        logger.warning(f"{candidate} names nodes missing from the problem: {unknown[:5]}")
        return None
    order = [node_index[n] for n in tours[0]]
    if sorted(order) != list(range(len(cities))):
        logger.warning(f"{candidate} does not visit every node exactly once")
        return None
    return sum(cities.distance(a, b) for a, b in zip(order, order[1:] + order[:1]))


def _load_optimum(cities: CityTable, node_index: dict, path: Path) -> Optional[float]:
    for candidate in solution_paths(path):
        if candidate.exists():
            optimum = _optimum_from(candidate, cities, node_index)
            if optimum is not None:
                return float(optimum)
    return None


def load_instance(path: Path) -> Instance:
    """
    Read a TSPLIB ``.tsp`` file into a CityTable.

    Cities are indexed from 0 in file order. Lengths are plain Euclidean, not
    the rounded TSPLIB ``EUC_2D`` metric.
    """
    path = Path(path)
    problem = tsplib95.load(path)
    node_coords = dict(problem.node_coords)
    if not node_coords:
        raise InvalidInputError(
            "TSPLIB file has no NODE_COORD_SECTION", {"path": str(path)}
        )
    nodes = list(node_coords)
    node_index = {node: i for i, node in enumerate(nodes)}
    cities = CityTable([tuple(node_coords[n][:2]) for n in nodes])
    optimum = _load_optimum(cities, node_index, path)
    return Instance(name=problem.name or path.stem, path=path, cities=cities, optimum=optimum)


def load_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    """Load every ``*.tsp`` under ``root`` in name order, skipping ones above ``max_nodes``."""
    paths = sorted(Path(root).glob("*.tsp"))
    if max_nodes is not None:
        paths = [p for p in paths if (header_dimension(p) or 0) <= max_nodes]
    if max_instances is not None:
        paths = paths[:max_instances]
    return [load_instance(p) for p in paths]
