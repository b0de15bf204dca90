import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

SPANNING_ALGORITHMS = ("kruskal", "prim")
CORRIDOR_MODES = ("bfs", "astar")
START_END_STRATEGIES = ("graph", "euclidean")


class ConfigError(ValueError):
    """Raised for configurations that make the coordinate system meaningless."""


@dataclass
class VoxelDungeonConfig:
    # Seed and grid
    seed: int = 0  # 0 => pick a new random seed each run
    size_x: int = 30
    size_y: int = 10
    size_z: int = 30
    cell_size: float = 1.0

    # Rooms
    room_count: int = 10
    room_size_range_xz: Tuple[int, int] = (3, 8)  # inclusive
    min_room_y: int = 1
    max_room_y: int = 4
    max_placement_tries: int = 1000
    room_gap: int = 1  # keep this many empty cells between rooms

    # Graph
    nearest: int = 3
    extra_edge_chance: float = 0.15
    spanning: str = "kruskal"

    # Corridors
    corridor_mode: str = "bfs"
    meander_strength: float = 0.0
    max_slope_run: int = 2  # 0 disables the limit
    corridor_radius: int = 0
    noise_scale: float = 0.15
    noise_weight: float = 0.0
    max_path_search: int = 200_000

    # Start / end
    start_end_strategy: str = "graph"

    @property
    def size(self) -> Tuple[int, int, int]:
        return (self.size_x, self.size_y, self.size_z)

    def normalized(self) -> "VoxelDungeonConfig":
        """Return a validated copy with ranges swapped and clamped into usable bounds.

        Non-positive grid dimensions or cell size, non-finite numbers and unknown
        strategy names are rejected; everything else is coerced so generation
        degrades instead of failing.
        """
        for name in ("size_x", "size_y", "size_z"):
            if _as_int(name, getattr(self, name)) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)!r}")
        if _as_float("cell_size", self.cell_size) <= 0:
            raise ConfigError(f"cell_size must be positive, got {self.cell_size!r}")
        _check_choice("spanning", self.spanning, SPANNING_ALGORITHMS)
        _check_choice("corridor_mode", self.corridor_mode, CORRIDOR_MODES)
        _check_choice("start_end_strategy", self.start_end_strategy, START_END_STRATEGIES)

        lo, hi = _ordered("room_size_range_xz", *self.room_size_range_xz)
        lo, hi = max(1, lo), max(1, hi)

        size_y = _as_int("size_y", self.size_y)
        y_cap = max(1, size_y - 1)
        min_y, max_y = _ordered("min_room_y/max_room_y", self.min_room_y, self.max_room_y)
        min_y = min(max(1, min_y), y_cap)
        max_y = min(max(1, max_y), y_cap)

        return replace(
            self,
            seed=_as_int("seed", self.seed),
            size_x=_as_int("size_x", self.size_x),
            size_y=size_y,
            size_z=_as_int("size_z", self.size_z),
            cell_size=_as_float("cell_size", self.cell_size),
            room_count=max(0, _as_int("room_count", self.room_count)),
            room_size_range_xz=(lo, hi),
            min_room_y=min_y,
            max_room_y=max_y,
            max_placement_tries=max(0, _as_int("max_placement_tries", self.max_placement_tries)),
            room_gap=max(0, _as_int("room_gap", self.room_gap)),
            nearest=max(1, _as_int("nearest", self.nearest)),
            extra_edge_chance=min(1.0, max(0.0, _as_float("extra_edge_chance", self.extra_edge_chance))),
            meander_strength=max(0.0, _as_float("meander_strength", self.meander_strength)),
            max_slope_run=max(0, _as_int("max_slope_run", self.max_slope_run)),
            corridor_radius=max(0, _as_int("corridor_radius", self.corridor_radius)),
            noise_scale=_as_float("noise_scale", self.noise_scale),
            noise_weight=max(0.0, _as_float("noise_weight", self.noise_weight)),
            max_path_search=max(1, _as_int("max_path_search", self.max_path_search)),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "VoxelDungeonConfig":
        """Build a config from JSON-like input. Unknown keys raise ConfigError."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        values = dict(data)
        if "room_size_range_xz" in values:
            rng = values["room_size_range_xz"]
            try:
                lo, hi = rng
            except (TypeError, ValueError):
                raise ConfigError("room_size_range_xz must be a pair of integers") from None
            values["room_size_range_xz"] = (_as_int("room_size_range_xz", lo), _as_int("room_size_range_xz", hi))
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["room_size_range_xz"] = list(self.room_size_range_xz)
        return out


def _as_int(name: str, value) -> int:
    # int() raises ValueError for NaN and OverflowError for infinity.
    try:
        return int(value)
    except (OverflowError, TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _as_float(name: str, value) -> float:
    try:
        out = float(value)
    except (OverflowError, TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(out):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return out


def _ordered(name: str, a, b):
    a, b = _as_int(name, a), _as_int(name, b)
    return (a, b) if a <= b else (b, a)


def _check_choice(name: str, value: str, choices) -> None:
    if value not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)}; got {value!r}")


__all__ = [
    "VoxelDungeonConfig",
    "ConfigError",
    "SPANNING_ALGORITHMS",
    "CORRIDOR_MODES",
    "START_END_STRATEGIES",
]
