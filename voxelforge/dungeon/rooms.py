import logging
import random
from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Tuple

from .config import VoxelDungeonConfig
from .grid import Coord3D, VoxelGrid

logger = logging.getLogger(__name__)


@dataclass
class Room:
    id: int
    x: int
    y: int
    z: int
    w: int  # extent along x
    h: int  # extent along y
    d: int  # extent along z
    door: Optional[Coord3D] = None
    door_candidates: List[Coord3D] = field(default_factory=list)

    @property
    def origin(self) -> Coord3D:
        return (self.x, self.y, self.z)

    @property
    def extents(self) -> Coord3D:
        return (self.w, self.h, self.d)

    @property
    def max_corner(self) -> Coord3D:
        """Exclusive upper corner."""
        return (self.x + self.w, self.y + self.h, self.z + self.d)

    @property
    def center(self) -> Coord3D:
        return (self.x + self.w // 2, self.y + self.h // 2, self.z + self.d // 2)

    @property
    def volume(self) -> int:
        return self.w * self.h * self.d

    def cells(self) -> Iterator[Coord3D]:
        for ix in range(self.x, self.x + self.w):
            for iy in range(self.y, self.y + self.h):
                for iz in range(self.z, self.z + self.d):
                    yield ix, iy, iz

    def contains(self, cell: Coord3D) -> bool:
        cx, cy, cz = cell
        return (
            self.x <= cx < self.x + self.w
            and self.y <= cy < self.y + self.h
            and self.z <= cz < self.z + self.d
        )

    def on_surface(self, cell: Coord3D) -> bool:
        if not self.contains(cell):
            return False
        cx, cy, cz = cell
        return (
            cx in (self.x, self.x + self.w - 1)
            or cy in (self.y, self.y + self.h - 1)
            or cz in (self.z, self.z + self.d - 1)
        )

    def perimeter_cells(self) -> Iterator[Coord3D]:
        for c in self.cells():
            if self.on_surface(c):
                yield c

    def overlaps(self, other: "Room", gap: int = 0) -> bool:
        """Axis-aligned overlap of this box against ``other`` expanded by ``gap`` on every side."""
        return (
            self.x < other.x + other.w + gap
            and self.x + self.w > other.x - gap
            and self.y < other.y + other.h + gap
            and self.y + self.h > other.y - gap
            and self.z < other.z + other.d + gap
            and self.z + self.d > other.z - gap
        )

    def to_dict(self):
        return {
            "id": self.id,
            "origin": list(self.origin),
            "size": list(self.extents),
            "center": list(self.center),
            "door": list(self.door) if self.door is not None else None,
        }


class PlacementResult(NamedTuple):
    rooms: List[Room]
    attempts: int
    target: int


def _origin_range(size: int, extent: int, gap: int) -> Tuple[int, int]:
    # Room plus gap on both sides must stay in bounds.
    return gap, size - extent - gap


def place_rooms(grid: VoxelGrid, config: VoxelDungeonConfig, rng=None) -> PlacementResult:
    """Place non-overlapping, gap-separated rooms onto the grid.

    Draw order per attempt: width, depth, height, then origin x, y, z. A rejected
    candidate only costs one attempt from ``max_placement_tries``. Placement ends
    early when the room target is met or when even the smallest room cannot fit.
    """
    if rng is None:
        rng = random
    gap = config.room_gap
    size_x, size_y, size_z = grid.size
    lo_xz, hi_xz = config.room_size_range_xz
    rooms: List[Room] = []

    if (
        lo_xz + 2 * gap > size_x
        or lo_xz + 2 * gap > size_z
        or config.min_room_y + 2 * gap > size_y
    ):
        logger.info(
            "room footprint %dx%dx%d with gap %d cannot fit grid %s",
            lo_xz, config.min_room_y, lo_xz, gap, grid.size,
        )
        return PlacementResult(rooms, 0, config.room_count)

    attempts = 0
    while len(rooms) < config.room_count and attempts < config.max_placement_tries:
        attempts += 1
        w = rng.randint(lo_xz, hi_xz)
        d = rng.randint(lo_xz, hi_xz)
        h = rng.randint(config.min_room_y, config.max_room_y)

        ranges = (
            _origin_range(size_x, w, gap),
            _origin_range(size_y, h, gap),
            _origin_range(size_z, d, gap),
        )
        if any(hi < lo for lo, hi in ranges):
            continue
        x, y, z = (rng.randint(lo, hi) for lo, hi in ranges)

        candidate = Room(len(rooms), x, y, z, w, h, d)
        if any(candidate.overlaps(r, gap) for r in rooms):
            continue

        rooms.append(candidate)
        for cell in candidate.cells():
            grid.mark_room(cell)

    if len(rooms) < config.room_count:
        logger.info(
            "placed %d/%d rooms after %d attempts", len(rooms), config.room_count, attempts
        )
    return PlacementResult(rooms, attempts, config.room_count)


__all__ = ["Room", "PlacementResult", "place_rooms"]
