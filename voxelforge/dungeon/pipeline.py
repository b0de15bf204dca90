"""Pipeline orchestration for voxel dungeon generation.

Stages run strictly in order, each mutating the shared grid and room list:

    place_rooms -> choose_doors -> build_connectivity -> carve_corridors -> select_start_end

All randomness comes from one ``random.Random`` seeded per run. Draws are taken
in a fixed order so a seed reproduces the whole dungeon:

    1. room placement: per attempt w, d, h then origin x, y, z
    2. door choice: one draw per room, in id order
    3. extra edges: one draw per candidate edge, in sorted order
    4. noise seed: one ``getrandbits(32)`` (A* corridor mode only)

Corridor search and start/end selection consume no randomness.
"""
from __future__ import annotations

import logging
import os
import random
import time
from dataclasses import replace
from typing import Any, Dict, List, Optional, Set, Tuple

from .config import VoxelDungeonConfig
from .corridors import CorridorReport, carve_corridors
from .doors import choose_doors
from .endpoints import select_start_end
from .export import classify as _classify
from .export import to_ascii as _to_ascii
from .export import to_json as _to_json
from .graph import ConnectivityGraph, Edge, build_connectivity, count_components
from .grid import Coord3D, VoxelGrid, cell_to_world
from .metrics import init_metrics
from .noise import NoiseField
from .rooms import Room, place_rooms

logger = logging.getLogger(__name__)

MAX_SEED = 2**31 - 1


def _env_flag(name: str) -> Optional[bool]:
    if name not in os.environ:
        return None
    return os.environ.get(name, '').lower() not in {'0', 'false', 'no', ''}


def _metrics_default() -> bool:
    # Flask app config wins over the environment, which wins over the default.
    from flask import current_app, has_app_context

    if has_app_context() and 'DUNGEON_ENABLE_GENERATION_METRICS' in current_app.config:
        return bool(current_app.config['DUNGEON_ENABLE_GENERATION_METRICS'])
    env = _env_flag('DUNGEON_ENABLE_GENERATION_METRICS')
    return True if env is None else env


class VoxelDungeon:
    """A generated dungeon plus the config and seed that produced it.

    Construct with a config, or with ``seed=`` / ``size=`` shortcuts over the
    defaults. Generation runs immediately; call ``generate()`` again to rebuild
    from scratch (a config seed of 0 draws a fresh seed each time).
    """

    def __init__(
        self,
        config: VoxelDungeonConfig | None = None,
        *,
        seed: int | None = None,
        size: Tuple[int, int, int] | None = None,
        enable_metrics: bool | None = None,
    ):
        if config is None:
            config = VoxelDungeonConfig()
        overrides: Dict[str, Any] = {}
        if seed is not None:
            overrides['seed'] = seed
        if size is not None:
            overrides['size_x'], overrides['size_y'], overrides['size_z'] = size
        if overrides:
            config = replace(config, **overrides)
        self.config = config.normalized()
        self.enable_metrics = _metrics_default() if enable_metrics is None else enable_metrics

        self.seed: int = 0
        self.grid = VoxelGrid(self.config.size)
        self.rooms: List[Room] = []
        self.doors: Set[Coord3D] = set()
        self.graph = ConnectivityGraph([], [], [])
        self.corridors = CorridorReport([], [], {}, 0, 0)
        self.start_room: Optional[int] = None
        self.end_room: Optional[int] = None
        self.metrics: Dict[str, Any] = {}
        self.generate()

    # Convenience accessors
    @property
    def size(self) -> Tuple[int, int, int]:
        return self.grid.size

    @property
    def carved_edges(self) -> List[Edge]:
        return self.corridors.carved

    @property
    def skipped_edges(self) -> List[Edge]:
        return self.corridors.skipped

    def _reset(self) -> None:
        self.grid.clear()
        self.rooms = []
        self.doors = set()
        self.graph = ConnectivityGraph([], [], [])
        self.corridors = CorridorReport([], [], {}, 0, 0)
        self.start_room = None
        self.end_room = None
        self.metrics = init_metrics() if self.enable_metrics else {}

    def generate(self) -> "VoxelDungeon":
        """Rebuild everything from the config; returns self."""
        cfg = self.config
        self._reset()
        self.seed = cfg.seed if cfg.seed != 0 else random.randint(1, MAX_SEED)
        logger.info("generating voxel dungeon seed=%d size=%s", self.seed, cfg.size)
        rng = random.Random(self.seed)

        if self.enable_metrics:
            start = time.perf_counter()
            phase_times: Dict[str, int] = {}

            def _phase(label, fn, *a, **k):
                ps = time.perf_counter(); r = fn(*a, **k); pe = time.perf_counter()
                phase_times[label] = int((pe - ps) * 1000)
                return r
        else:
            def _phase(label, fn, *a, **k):
                return fn(*a, **k)

        placement = _phase('place_rooms', place_rooms, self.grid, cfg, rng)
        self.rooms = placement.rooms
        self.doors = _phase('choose_doors', choose_doors, self.grid, self.rooms, rng)
        self.graph = _phase('build_connectivity', build_connectivity, self.rooms, cfg, rng)

        noise = None
        if cfg.corridor_mode == 'astar':
            noise = NoiseField(rng.getrandbits(32), cfg.noise_scale)
        self.corridors = _phase(
            'carve_corridors', carve_corridors,
            self.grid, self.rooms, self.graph.chosen, self.doors, cfg, noise,
        )

        pair = _phase('select_start_end', select_start_end, self.rooms, self.carved_edges, cfg.start_end_strategy)
        if pair is not None:
            self.start_room, self.end_room = pair

        if self.skipped_edges:
            logger.info("skipped %d of %d corridors", len(self.skipped_edges), len(self.graph.chosen))

        if self.enable_metrics:
            self.metrics.update(
                {
                    'seed': self.seed,
                    'rooms_target': placement.target,
                    'rooms_placed': len(self.rooms),
                    'placement_attempts': placement.attempts,
                    'doors_fallback_center': sum(1 for r in self.rooms if not r.door_candidates),
                    'edges_candidate': len(self.graph.candidates),
                    'edges_spanning': len(self.graph.spanning),
                    'edges_extra': len(self.graph.extras),
                    'edges_carved': len(self.carved_edges),
                    'edges_skipped': len(self.skipped_edges),
                    'components': count_components(len(self.rooms), self.carved_edges),
                    'corridor_cells': self.corridors.corridor_cells,
                    'path_expansions': self.corridors.expansions,
                }
            )
            end = time.perf_counter()
            self.metrics['runtime_ms'] = int((end - start) * 1000)
            self.metrics['phase_ms'] = phase_times
        return self

    # Outputs
    def classify(self, cell: Coord3D) -> str:
        return _classify(self.grid, self.doors, cell)

    def cell_to_world(self, cell: Coord3D, origin=(0.0, 0.0, 0.0)):
        return cell_to_world(cell, self.config.cell_size, origin)

    def room_of(self, room_id: Optional[int]) -> Optional[Room]:
        if room_id is None:
            return None
        return self.rooms[room_id]

    def to_ascii(self) -> str:
        return _to_ascii(self.grid, self.doors)

    def to_json(self, include_layers: bool = True) -> Dict[str, Any]:
        return _to_json(self, include_layers=include_layers)


def generate(config: VoxelDungeonConfig | None = None, **kwargs) -> VoxelDungeon:
    return VoxelDungeon(config, **kwargs)


__all__ = ["VoxelDungeon", "generate", "MAX_SEED"]


if __name__ == "__main__":  # manual quick smoke
    d = VoxelDungeon(seed=1234, size=(24, 6, 24))
    print(d.to_ascii())
    print(d.metrics)
