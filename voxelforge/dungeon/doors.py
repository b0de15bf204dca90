"""Door selection: exactly one entry cell per room.

Rooms are placed before any corridor exists, so "eligible" reduces to a surface
cell with at least one in-bounds face neighbour outside every room.
"""
from __future__ import annotations

import random
from typing import List, Set

from .grid import Coord3D, VoxelGrid
from .rooms import Room


def door_candidates(grid: VoxelGrid, room: Room) -> List[Coord3D]:
    out: List[Coord3D] = []
    for cell in room.perimeter_cells():
        for n in grid.neighbors6(cell):
            if not grid.room_at(n):
                out.append(cell)
                break
    return out


def choose_doors(grid: VoxelGrid, rooms: List[Room], rng=None) -> Set[Coord3D]:
    """Pick one door per room (in id order) and return the global door set.

    Falls back to the room center when no surface cell borders free space; with
    non-degenerate rooms this never happens.
    """
    if rng is None:
        rng = random
    doors: Set[Coord3D] = set()
    for room in rooms:
        candidates = door_candidates(grid, room)
        room.door_candidates = candidates
        door = room.center
        if candidates:
            door = candidates[rng.randrange(len(candidates))]
        room.door = door
        doors.add(door)
    return doors


__all__ = ["door_candidates", "choose_doors"]
