"""Terrain height, caves, ore veins, sky islands and the sky colour."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from voxelworld import spline
from voxelworld.block import BlockKind
from voxelworld.noise import fbm, perlin_noise, perlin_noise3d, worley_noise
from voxelworld.world import CHUNK_LEN, CHUNK_MAX_XZ, TICK_PERIOD

PI = 3.1415926536
TERRAIN_SIZE = CHUNK_LEN * CHUNK_MAX_XZ


def terrain_base_height(x: int, z: int) -> int:
    """Height of the stone base at column (x, z)."""
    base = 35
    amp = 35
    f = 0.015
    n = perlin_noise((x * f, z * f))
    n1 = spline.continent(n) * 0.5
    n2 = spline.peak_valley(n) * 0.1
    n3 = spline.erosion(n) * 0.4
    return int(base + amp * (n1 + n2 + n3))


def _pow(base: float, exponent: float) -> float:
    if base < 0 and not float(exponent).is_integer():
        return math.nan
    return base**exponent


def _shift(x: float, z: float, offset: float, scale: float) -> tuple[float, float]:
    return ((x + offset) / scale, (z + offset) / scale)


def _surface_height(x: float, z: float) -> float:
    # Plains: a mix of several noise layers.
    n1 = 1 - abs(perlin_noise(_shift(x, z, 1000, 60.0)))
    n2 = 0.5 * (perlin_noise(_shift(x, z, 100, 150.0)) + 1.0)
    n3 = fbm((x / 250.0, z / 250.0))
    n4 = worley_noise((x / 100.0, z / 100.0))
    a, b, c, d = 0.0, 1.0, 1.0, 0.1
    plains = (n1 * a + n2 * b + n3 * c + n4 * d) / (a + b + c + d)
    plains = 40 * _pow(plains, 2.5)

    # Mountains: summed octaves of ridged noise plus more fbm.
    ridges = 0.0
    amp = 0.5
    freq = 64.0
    for _ in range(4):
        ridges += (1 - abs(perlin_noise((x / freq, z / freq)))) * amp
        freq *= 0.5
        amp *= 0.5
    n2 = 0.5 * (perlin_noise(_shift(x, z, 100, 60.0)) + 1.0)
    n3 = fbm((x / 200.0, z / 200.0))
    n4 = fbm(_shift(x, z, 50, 400.0))
    a, b, c, d = 4.0, 3.0, 10.0, 0.0
    mountains = (ridges * a + n2 * b + n3 * c + n4 * d) / (a + b + c + d)
    mountains = (
        140 * mountains
        + 100 * (worley_noise((x / 200.0, z / 200.0)) + fbm((x / 500.0, z / 500.0)))
    ) / 2

    # Blend weight between mountains and plains.
    n1 = worley_noise(_shift(x, z, 10, 200.0))
    n3 = fbm((x / 400.0, z / 400.0))
    n4 = fbm((x / 200.0, z / 200.0))
    weight = (n1 + n3 + n4) / 3.0
    exponent = worley_noise(_shift(x, z, 3000, 400.0))
    weight = 1 - _pow(weight, 4 * exponent)

    return (1 - weight) * mountains + weight * plains


@dataclass
class TerrainHeights:
    """Cached surface heights for every column of the world."""

    heights: np.ndarray = field(
        default_factory=lambda: np.zeros((TERRAIN_SIZE, TERRAIN_SIZE), dtype=np.int64)
    )

    def _check(self, x: int, z: int) -> tuple[int, int]:
        x, z = int(x), int(z)
        size_x, size_z = self.heights.shape
        if not (0 <= x < size_x and 0 <= z < size_z):
            raise IndexError(f"column ({x}, {z}) is outside the terrain")
        return x, z

    def generate(self, x: int, z: int) -> int:
        """Compute the surface height of column (x, z) unless already known."""
        x, z = self._check(x, z)
        if self.heights[x, z] > 0:
            return int(self.heights[x, z])
        value = _surface_height(float(x), float(z))
        self.heights[x, z] = math.floor(value) if math.isfinite(value) else 0
        return int(self.heights[x, z])

    def height(self, x: int, z: int) -> int:
        """The stored surface height of column (x, z); 0 if not generated."""
        x, z = self._check(x, z)
        return int(self.heights[x, z])


def cave_block(x: int, y: int, z: int) -> BlockKind:
    """AIR where a cave or connecting pipe is carved, NULL elsewhere."""
    hole_f, threshold = 0.15, -0.2
    is_cave = perlin_noise3d((x * hole_f, y * hole_f, z * hole_f)) < threshold
    f, pipe_max, pipe_min = 0.2, -0.25, -0.2
    pipe = perlin_noise3d((x * f, y * f, z * f))
    is_pipe = pipe_min < pipe < pipe_max
    return BlockKind.AIR if is_cave or is_pipe else BlockKind.NULL


def vein_block(x: int, y: int, z: int) -> BlockKind:
    """IRON_ORE inside an ore vein, NULL elsewhere."""
    f, threshold = 0.2, -0.45
    if perlin_noise3d((x * f, y * f, z * f)) < threshold:
        return BlockKind.IRON_ORE
    return BlockKind.NULL


def skyblock(x: int, y: int, z: int) -> BlockKind:
    """DIRT inside a floating island, NULL elsewhere."""
    f, threshold = 0.05, 0.35
    if perlin_noise3d((x * f, y * f, z * f)) > threshold:
        return BlockKind.DIRT
    return BlockKind.NULL


@dataclass
class LevelSystem:
    """Per-world state: the sky colour (the fourth component is unused)."""

    sky_color: list[float] = field(default_factory=lambda: [1.0, 1.0, 1.0, 0.0])

    def update_sky_color(self, elapsed_seconds: float) -> list[float]:
        """Set the sky colour for the time elapsed since the game started."""
        micros = int(elapsed_seconds * 1_000_000)
        past_tick = micros * TICK_PERIOD
        w = 0.000005 * past_tick + PI
        s = math.sin(w)
        self.sky_color[0] = (s + 1) / 2
        self.sky_color[1] = (1 - s) / 2 + 0.15
        self.sky_color[2] = (1 - s) / 2 + 0.05
        return self.sky_color