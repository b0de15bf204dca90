"""Public voxel dungeon package interface."""

from .config import ConfigError, VoxelDungeonConfig
from .graph import Edge
from .grid import VoxelGrid, cell_to_world, world_to_cell
from .pipeline import VoxelDungeon, generate
from .rooms import Room
from .tiles import CORRIDOR, DOOR, EMPTY, ROOM  # noqa: F401

__all__ = [
    "VoxelDungeon",
    "VoxelDungeonConfig",
    "ConfigError",
    "VoxelGrid",
    "Room",
    "Edge",
    "generate",
    "cell_to_world",
    "world_to_cell",
    "EMPTY",
    "ROOM",
    "DOOR",
    "CORRIDOR",
]
