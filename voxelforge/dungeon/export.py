"""Read-only views of a generated dungeon: cell classification, ASCII layers, JSON."""
from __future__ import annotations

from typing import Any, Collection, Dict, List

from .grid import Coord3D, VoxelGrid, cell_to_world
from .tiles import CORRIDOR, DOOR, EMPTY, ROOM, TILE_NAMES


def classify(grid: VoxelGrid, doors: Collection[Coord3D], cell: Coord3D) -> str:
    if cell in doors:
        return DOOR
    if grid.room_at(cell):
        return ROOM
    if grid.occupied_at(cell):
        return CORRIDOR
    return EMPTY


def layer_rows(grid: VoxelGrid, doors: Collection[Coord3D], y: int) -> List[str]:
    """One horizontal slice, one string per z row, x running left to right."""
    return [
        "".join(classify(grid, doors, (x, y, z)) for x in range(grid.width))
        for z in range(grid.depth)
    ]


def to_ascii(grid: VoxelGrid, doors: Collection[Coord3D]) -> str:
    blocks = []
    for y in range(grid.height):
        blocks.append(f"y={y}\n" + "\n".join(layer_rows(grid, doors, y)))
    return "\n\n".join(blocks)


def count_tiles(grid: VoxelGrid, doors: Collection[Coord3D]) -> Dict[str, int]:
    counts = {name: 0 for name in TILE_NAMES.values()}
    for cell in grid.cells():
        counts[TILE_NAMES[classify(grid, doors, cell)]] += 1
    return counts


def to_json(dungeon, include_layers: bool = True) -> Dict[str, Any]:
    """Serialize a generated ``VoxelDungeon``; layers are keyed by y."""
    cfg = dungeon.config
    out: Dict[str, Any] = {
        "seed": dungeon.seed,
        "size": list(dungeon.grid.size),
        "cell_size": cfg.cell_size,
        "config": cfg.to_dict(),
        "rooms": [
            dict(r.to_dict(), world_center=list(cell_to_world(r.center, cfg.cell_size)))
            for r in dungeon.rooms
        ],
        "edges": {
            "candidate": [list(e.key) for e in dungeon.graph.candidates],
            "spanning": [list(e.key) for e in dungeon.graph.spanning],
            "extra": [list(e.key) for e in dungeon.graph.extras],
            "carved": [list(e.key) for e in dungeon.carved_edges],
            "skipped": [list(e.key) for e in dungeon.skipped_edges],
        },
        "start_room": dungeon.start_room,
        "end_room": dungeon.end_room,
        "tiles": count_tiles(dungeon.grid, dungeon.doors),
        "metrics": dungeon.metrics,
    }
    if include_layers:
        out["layers"] = {
            str(y): layer_rows(dungeon.grid, dungeon.doors, y) for y in range(dungeon.grid.height)
        }
    return out


__all__ = ["classify", "layer_rows", "to_ascii", "count_tiles", "to_json"]
