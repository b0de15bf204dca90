"""Voxel occupancy storage shared by every generation stage.

Two parallel column-major stores (``store[x][y][z]``):
    * ``occupied`` - True for any room or corridor cell.
    * ``is_room``  - True only for room interior cells (doors included).
"""
from __future__ import annotations

from typing import Iterator, List, Tuple

Coord3D = Tuple[int, int, int]
Size3D = Tuple[int, int, int]
Grid3D = List[List[List[bool]]]

NEIGHBORS_6: Tuple[Coord3D, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def _blank(size: Size3D) -> Grid3D:
    x, y, z = size
    return [[[False for _ in range(z)] for _ in range(y)] for _ in range(x)]


class VoxelGrid:
    __slots__ = ("size", "occupied", "is_room")

    def __init__(self, size: Size3D):
        self.size = tuple(size)
        self.occupied: Grid3D = _blank(self.size)
        self.is_room: Grid3D = _blank(self.size)

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @property
    def depth(self) -> int:
        return self.size[2]

    def clear(self) -> None:
        self.occupied = _blank(self.size)
        self.is_room = _blank(self.size)

    def in_bounds(self, cell: Coord3D) -> bool:
        x, y, z = cell
        sx, sy, sz = self.size
        return 0 <= x < sx and 0 <= y < sy and 0 <= z < sz

    def neighbors6(self, cell: Coord3D) -> Iterator[Coord3D]:
        """In-bounds face neighbours in a fixed order (+x, -x, +y, -y, +z, -z)."""
        x, y, z = cell
        for dx, dy, dz in NEIGHBORS_6:
            n = (x + dx, y + dy, z + dz)
            if self.in_bounds(n):
                yield n

    def room_at(self, cell: Coord3D) -> bool:
        x, y, z = cell
        return self.is_room[x][y][z]

    def occupied_at(self, cell: Coord3D) -> bool:
        x, y, z = cell
        return self.occupied[x][y][z]

    def mark_room(self, cell: Coord3D) -> None:
        x, y, z = cell
        self.is_room[x][y][z] = True
        self.occupied[x][y][z] = True

    def mark_corridor(self, cell: Coord3D) -> bool:
        """Mark a non-room cell occupied. Returns True if the cell changed."""
        x, y, z = cell
        if self.is_room[x][y][z] or self.occupied[x][y][z]:
            return False
        self.occupied[x][y][z] = True
        return True

    def cells(self) -> Iterator[Coord3D]:
        sx, sy, sz = self.size
        for x in range(sx):
            for y in range(sy):
                for z in range(sz):
                    yield (x, y, z)

    def occupied_cells(self) -> Iterator[Coord3D]:
        for x, y, z in self.cells():
            if self.occupied[x][y][z]:
                yield (x, y, z)

    def corridor_cells(self) -> Iterator[Coord3D]:
        for x, y, z in self.cells():
            if self.occupied[x][y][z] and not self.is_room[x][y][z]:
                yield (x, y, z)


def cell_to_world(cell: Coord3D, cell_size: float, origin=(0.0, 0.0, 0.0)) -> Tuple[float, float, float]:
    """world = origin + cell * cell_size, per axis."""
    return tuple(o + c * cell_size for o, c in zip(origin, cell))


def world_to_cell(point, cell_size: float, origin=(0.0, 0.0, 0.0)) -> Coord3D:
    """Inverse of cell_to_world, rounding to the nearest cell."""
    return tuple(int(round((p - o) / cell_size)) for p, o in zip(point, origin))


__all__ = [
    "Coord3D",
    "Size3D",
    "Grid3D",
    "NEIGHBORS_6",
    "VoxelGrid",
    "cell_to_world",
    "world_to_cell",
]
