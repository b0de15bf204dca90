"""Start/end room selection.

Two strategies:
    * ``euclidean`` - the pair of rooms whose centers are farthest apart.
    * ``graph``     - approximate diameter of the carved corridor graph via a
      double BFS, so the two rooms are far apart in walking terms. Falls back
      to ``euclidean`` when no corridor was carved.
"""
from __future__ import annotations

import math
from collections import deque
from typing import Iterable, List, Optional, Sequence, Tuple

from .graph import Edge, adjacency_lists
from .rooms import Room

Endpoints = Tuple[int, int]


def farthest_pair_euclidean(rooms: Sequence[Room]) -> Optional[Endpoints]:
    """Exhaustive pairwise scan; the first pair found wins ties."""
    if len(rooms) < 2:
        return None
    best: Optional[Endpoints] = None
    best_dist = -1.0
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            dist = math.dist(rooms[i].center, rooms[j].center)
            if dist > best_dist:
                best_dist = dist
                best = (rooms[i].id, rooms[j].id)
    return best


def _bfs_farthest(adj: List[List[int]], source: int) -> Tuple[int, int]:
    dist = {source: 0}
    q = deque([source])
    far, far_d = source, 0
    while q:
        cur = q.popleft()
        d = dist[cur]
        if d > far_d or (d == far_d and cur < far):
            far, far_d = cur, d
        for n in adj[cur]:
            if n not in dist:
                dist[n] = d + 1
                q.append(n)
    return far, far_d


def graph_diameter_endpoints(room_count: int, edges: Iterable[Edge]) -> Optional[Endpoints]:
    """Double BFS from the lowest-id room with a carved corridor. None when no corridor exists."""
    if room_count < 2:
        return None
    adj = adjacency_lists(room_count, edges)
    source = next((i for i, neighbours in enumerate(adj) if neighbours), None)
    if source is None:
        return None
    a, _ = _bfs_farthest(adj, source)
    b, _ = _bfs_farthest(adj, a)
    return (a, b)


def select_start_end(rooms: Sequence[Room], edges: Iterable[Edge], strategy: str = "graph") -> Optional[Endpoints]:
    if len(rooms) < 2:
        return None
    if strategy == "graph":
        pair = graph_diameter_endpoints(len(rooms), edges)
        if pair is not None:
            return pair
    return farthest_pair_euclidean(rooms)


__all__ = ["Endpoints", "farthest_pair_euclidean", "graph_diameter_endpoints", "select_start_end"]
