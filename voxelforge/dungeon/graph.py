"""Room connectivity graph: k-nearest candidates, spanning tree/forest, loop edges."""
from __future__ import annotations

import heapq
import math
import random
from typing import Dict, Iterable, List, NamedTuple, Sequence, Set, Tuple

from .rooms import Room


class Edge(NamedTuple):
    a: int  # always the lower room id
    b: int
    weight: float

    @property
    def key(self) -> Tuple[int, int]:
        return (self.a, self.b)


class ConnectivityGraph(NamedTuple):
    candidates: List[Edge]
    spanning: List[Edge]
    extras: List[Edge]

    @property
    def chosen(self) -> List[Edge]:
        return self.spanning + self.extras


class UnionFind:
    """Disjoint sets with path compression and union by rank."""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, a: int) -> int:
        root = a
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[a] != root:
            self.parent[a], a = root, self.parent[a]
        return root

    def union(self, a: int, b: int) -> bool:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True


def make_edge(a: int, b: int, weight: float) -> Edge:
    return Edge(min(a, b), max(a, b), weight)


def candidate_edges(rooms: Sequence[Room], k: int) -> List[Edge]:
    """Union of every room's k nearest neighbours (by center distance), deduped, sorted by weight."""
    centers = [r.center for r in rooms]
    seen: Dict[Tuple[int, int], Edge] = {}
    for i, ci in enumerate(centers):
        dists = sorted(
            (math.dist(ci, cj), j) for j, cj in enumerate(centers) if j != i
        )
        for dist, j in dists[:k]:
            edge = make_edge(i, j, dist)
            seen.setdefault(edge.key, edge)
    return sort_edges(seen.values())


def sort_edges(edges: Iterable[Edge]) -> List[Edge]:
    return sorted(edges, key=lambda e: (e.weight, e.a, e.b))


def kruskal(n: int, edges: Iterable[Edge]) -> List[Edge]:
    uf = UnionFind(n)
    return [e for e in sort_edges(edges) if uf.union(e.a, e.b)]


def prim(n: int, edges: Iterable[Edge]) -> List[Edge]:
    """Prim's algorithm from room 0; restarts at the lowest unvisited room so a
    disconnected candidate graph yields a spanning forest."""
    adjacency: Dict[int, List[Edge]] = {i: [] for i in range(n)}
    for e in edges:
        adjacency[e.a].append(e)
        adjacency[e.b].append(e)
    visited: Set[int] = set()
    tree: List[Edge] = []
    for root in range(n):
        if root in visited:
            continue
        visited.add(root)
        heap = [(e.weight, e.a, e.b, e) for e in adjacency[root]]
        heapq.heapify(heap)
        while heap:
            _w, a, b, e = heapq.heappop(heap)
            nxt = b if a in visited else a
            if nxt in visited:
                continue
            visited.add(nxt)
            tree.append(e)
            for f in adjacency[nxt]:
                other = f.b if f.a == nxt else f.a
                if other not in visited:
                    heapq.heappush(heap, (f.weight, f.a, f.b, f))
    return tree


SPANNING = {"kruskal": kruskal, "prim": prim}


def extra_edges(edges: Sequence[Edge], chance: float, rng=None, exclude: Iterable[Edge] = ()) -> List[Edge]:
    """Keep candidate edges as loop edges with probability ``chance``.

    One draw per candidate edge, in sorted order, whether or not it is excluded,
    so the number of draws taken from ``rng`` never depends on the spanning tree.
    """
    if rng is None:
        rng = random
    skip = {e.key for e in exclude}
    out: List[Edge] = []
    for e in sort_edges(edges):
        roll = rng.random()
        if roll < chance and e.key not in skip:
            out.append(e)
    return out


def build_connectivity(rooms: Sequence[Room], config, rng=None) -> ConnectivityGraph:
    if len(rooms) < 2:
        return ConnectivityGraph([], [], [])
    candidates = candidate_edges(rooms, config.nearest)
    spanning = SPANNING[config.spanning](len(rooms), candidates)
    extras = extra_edges(candidates, config.extra_edge_chance, rng, exclude=spanning)
    return ConnectivityGraph(candidates, spanning, extras)


def adjacency_lists(n: int, edges: Iterable[Edge]) -> List[List[int]]:
    adj: List[Set[int]] = [set() for _ in range(n)]
    for e in edges:
        adj[e.a].add(e.b)
        adj[e.b].add(e.a)
    return [sorted(s) for s in adj]


def count_components(n: int, edges: Iterable[Edge]) -> int:
    uf = UnionFind(n)
    merged = sum(1 for e in edges if uf.union(e.a, e.b))
    return n - merged


__all__ = [
    "Edge",
    "ConnectivityGraph",
    "UnionFind",
    "make_edge",
    "candidate_edges",
    "sort_edges",
    "kruskal",
    "prim",
    "extra_edges",
    "build_connectivity",
    "adjacency_lists",
    "count_components",
]
