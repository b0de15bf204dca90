"""Deterministic smooth gradient noise used to bias corridor routing."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

_CORNERS = [(dx, dy, dz) for dx in (0, 1) for dy in (0, 1) for dz in (0, 1)]


def _hash3(seed: int, x: int, y: int, z: int) -> int:
    value = (seed ^ (x * 374761393) ^ (y * 668265263) ^ (z * 2147483647)) & 0xFFFFFFFF
    value = ((value ^ (value >> 13)) * 1274126177) & 0xFFFFFFFF
    return (value ^ (value >> 16)) & 0xFFFFFFFF


def _fade(t: float) -> float:
    return t * t * t * (t * (t * 6 - 15) + 10)


@dataclass(frozen=True)
class NoiseField:
    """Perlin-style gradient noise over voxel cells.

    ``raw`` is the lattice noise, roughly in [-1, 1] and exactly 0 on integer
    lattice points; ``sample`` scales a cell center into it and maps to [0, 1].
    """

    seed: int
    scale: float

    def _gradient(self, x: int, y: int, z: int) -> Tuple[float, float, float]:
        h = _hash3(self.seed, x, y, z)
        g = [((h >> shift) & 0xFF) / 255.0 * 2.0 - 1.0 for shift in (0, 8, 16)]
        length = math.sqrt(sum(c * c for c in g)) or 1.0
        return g[0] / length, g[1] / length, g[2] / length

    def raw(self, x: float, y: float, z: float) -> float:
        xi, yi, zi = math.floor(x), math.floor(y), math.floor(z)
        xf, yf, zf = x - xi, y - yi, z - zi
        u, v, w = _fade(xf), _fade(yf), _fade(zf)
        total = 0.0
        # Trilinear blend of the eight corner contributions.
        for dx, dy, dz in _CORNERS:
            gx, gy, gz = self._gradient(xi + dx, yi + dy, zi + dz)
            dot = (xf - dx) * gx + (yf - dy) * gy + (zf - dz) * gz
            weight = (u if dx else 1 - u) * (v if dy else 1 - v) * (w if dz else 1 - w)
            total += weight * dot
        return total

    def sample(self, cell) -> float:
        """Noise at a cell center mapped into [0, 1]."""
        x, y, z = cell
        s = self.scale
        # Offset by half a cell so integer lattice points do not all sample zero.
        n = self.raw((x + 0.5) * s, (y + 0.5) * s, (z + 0.5) * s)
        return min(1.0, max(0.0, 0.5 * (n + 1.0)))


__all__ = ["NoiseField"]
