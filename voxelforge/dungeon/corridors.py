import logging
from typing import Collection, Dict, List, NamedTuple, Optional, Sequence, Tuple

from .config import VoxelDungeonConfig
from .graph import Edge
from .grid import Coord3D, VoxelGrid
from .noise import NoiseField
from .pathfinding import Path, SearchResult, astar_path, bfs_path
from .rooms import Room

logger = logging.getLogger(__name__)


class CorridorReport(NamedTuple):
    carved: List[Edge]
    skipped: List[Edge]
    paths: Dict[Tuple[int, int], Path]
    corridor_cells: int
    expansions: int


def find_path(
    grid: VoxelGrid,
    start: Coord3D,
    goal: Coord3D,
    doors: Collection[Coord3D],
    config: VoxelDungeonConfig,
    noise: Optional[NoiseField] = None,
) -> SearchResult:
    if config.corridor_mode == "astar":
        return astar_path(
            grid,
            start,
            goal,
            noise=noise,
            noise_weight=config.noise_weight,
            meander_strength=config.meander_strength,
            max_slope_run=config.max_slope_run,
            max_expansions=config.max_path_search,
        )
    return bfs_path(grid, start, goal, doors)


def thicken(grid: VoxelGrid, cell: Coord3D, radius: int) -> int:
    """Carve the horizontal square of half-width ``radius`` around ``cell``; rooms are left untouched."""
    x, y, z = cell
    carved = 0
    for dx in range(-radius, radius + 1):
        for dz in range(-radius, radius + 1):
            n = (x + dx, y, z + dz)
            if grid.in_bounds(n) and grid.mark_corridor(n):
                carved += 1
    return carved


def carve_path(grid: VoxelGrid, path: Path, radius: int = 0) -> int:
    carved = 0
    for cell in path:
        if grid.mark_corridor(cell):
            carved += 1
        if radius > 0:
            carved += thicken(grid, cell, radius)
    return carved


def carve_corridors(
    grid: VoxelGrid,
    rooms: Sequence[Room],
    edges: Sequence[Edge],
    doors: Collection[Coord3D],
    config: VoxelDungeonConfig,
    noise: Optional[NoiseField] = None,
) -> CorridorReport:
    """Route and carve one corridor per edge, door to door, in edge order.

    Edges whose doors cannot be joined are skipped rather than failing the run.
    """
    carved: List[Edge] = []
    skipped: List[Edge] = []
    paths: Dict[Tuple[int, int], Path] = {}
    cells = 0
    expansions = 0
    for edge in edges:
        start, goal = rooms[edge.a].door, rooms[edge.b].door
        result = find_path(grid, start, goal, doors, config, noise)
        expansions += result.expansions
        if result.path is None:
            logger.debug("no corridor between rooms %d and %d", edge.a, edge.b)
            skipped.append(edge)
            continue
        cells += carve_path(grid, result.path, config.corridor_radius)
        paths[edge.key] = result.path
        carved.append(edge)
    return CorridorReport(carved, skipped, paths, cells, expansions)


__all__ = ["CorridorReport", "find_path", "thicken", "carve_path", "carve_corridors"]
