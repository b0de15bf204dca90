"""Corridor search on the 6-connected voxel grid.

``bfs_path`` is the plain mode: shortest path in step count, passing only through
non-room cells or registered doors.

``astar_path`` is the weighted mode: Manhattan-heuristic A* whose step cost can be
perturbed by a noise field (organic meander) and whose vertical runs are limited
to ``max_slope_run`` consecutive steps in one direction. Search state is
``(cell, last_move, vertical_run)`` so the slope rule stays exact. Expansions are
capped; hitting the cap reports the goal as unreachable.
"""
from __future__ import annotations

import heapq
import itertools
from collections import deque
from typing import Collection, Deque, Dict, List, NamedTuple, Optional

from .grid import NEIGHBORS_6, Coord3D, VoxelGrid
from .noise import NoiseField

Path = List[Coord3D]


class SearchResult(NamedTuple):
    path: Optional[Path]
    expansions: int
    cost: float = 0.0  # summed step cost of the returned path


def manhattan(a: Coord3D, b: Coord3D) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) + abs(a[2] - b[2])


def _reconstruct(parent: Dict, end) -> list:
    out = []
    cur = end
    while cur is not None:
        out.append(cur)
        cur = parent[cur]
    out.reverse()
    return out


def bfs_path(grid: VoxelGrid, start: Coord3D, goal: Coord3D, doors: Collection[Coord3D]) -> SearchResult:
    """Breadth-first search; a cell is walkable when in bounds and not a room cell unless it is a door."""
    if start == goal:
        return SearchResult([start], 0)
    q: Deque[Coord3D] = deque([start])
    parent: Dict[Coord3D, Optional[Coord3D]] = {start: None}
    expansions = 0
    while q:
        cur = q.popleft()
        expansions += 1
        if cur == goal:
            break
        for n in grid.neighbors6(cur):
            if n in parent:
                continue
            if grid.room_at(n) and n not in doors:
                continue
            parent[n] = cur
            q.append(n)
    if goal not in parent:
        return SearchResult(None, expansions)
    path = _reconstruct(parent, goal)
    return SearchResult(path, expansions, float(len(path) - 1))


def astar_path(
    grid: VoxelGrid,
    start: Coord3D,
    goal: Coord3D,
    *,
    noise: Optional[NoiseField] = None,
    noise_weight: float = 0.0,
    meander_strength: float = 0.0,
    max_slope_run: int = 0,
    max_expansions: int = 200_000,
) -> SearchResult:
    """A* from ``start`` to ``goal``; room cells other than the two endpoints are blocked.

    Step cost is ``1 + noise_weight * n`` plus ``meander_strength * n`` when the step
    continues the previous horizontal direction, where ``n`` is the noise sample at
    the neighbour in [0, 1]. ``max_slope_run`` of 0 leaves vertical runs unlimited.
    Open-set ties resolve by lowest f, then insertion order.
    """
    if start == goal:
        return SearchResult([start], 0)

    def walkable(cell: Coord3D) -> bool:
        return cell == goal or cell == start or not grid.room_at(cell)

    def step_cost(cell: Coord3D, move: int, last_move: int) -> float:
        cost = 1.0
        if noise is None:
            return cost
        n = noise.sample(cell)
        cost += noise_weight * n
        if meander_strength and move == last_move and NEIGHBORS_6[move][1] == 0:
            cost += meander_strength * n
        return cost

    counter = itertools.count()
    start_state = (start, -1, 0)
    g_score: Dict[tuple, float] = {start_state: 0.0}
    parent: Dict[tuple, Optional[tuple]] = {start_state: None}
    closed = set()
    open_heap = [(manhattan(start, goal), next(counter), start_state)]
    expansions = 0

    while open_heap:
        _f, _tie, state = heapq.heappop(open_heap)
        if state in closed:
            continue
        cell, last_move, run = state
        if cell == goal:
            path = [s[0] for s in _reconstruct(parent, state)]
            return SearchResult(path, expansions, g_score[state])
        if expansions >= max_expansions:
            return SearchResult(None, expansions)
        closed.add(state)
        expansions += 1
        g = g_score[state]
        x, y, z = cell
        for move, (dx, dy, dz) in enumerate(NEIGHBORS_6):
            n = (x + dx, y + dy, z + dz)
            if not grid.in_bounds(n) or not walkable(n):
                continue
            if dy != 0:
                new_run = run + 1 if move == last_move else 1
                if max_slope_run and new_run > max_slope_run:
                    continue
            else:
                new_run = 0
            nstate = (n, move, new_run)
            if nstate in closed:
                continue
            ng = g + step_cost(n, move, last_move)
            if ng < g_score.get(nstate, float("inf")):
                g_score[nstate] = ng
                parent[nstate] = state
                heapq.heappush(open_heap, (ng + manhattan(n, goal), next(counter), nstate))
    return SearchResult(None, expansions)


__all__ = ["Path", "SearchResult", "manhattan", "bfs_path", "astar_path"]
