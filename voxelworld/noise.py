"""Hash-based noise functions used for terrain generation.

Points are given as sequences of floats: ``(x, y)`` for the 2D functions and
``(x, y, z)`` for the 3D ones.
"""

from __future__ import annotations

import math
from typing import Sequence

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


def _fract(value: float) -> float:
    return value - math.floor(value)


def _mix(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _fade(distance: float) -> float:
    return 1 - 6 * distance**5 + 15 * distance**4 - 10 * distance**3


def smoothing(a: float, b: float, t: float) -> float:
    """Interpolate between ``a`` and ``b`` with a quintic ease curve."""
    t = t * t * t * (t * (t * 6.0 - 15.0) + 10.0)
    return _mix(a, b, t)


def random1(p: Sequence[float]) -> float:
    """Pseudo-random value in [0, 1) for a 2D point."""
    x, y = p
    return _fract(math.sin(x * 127.1 + y * 311.7) * 43758.5453)


def random2(p: Sequence[float]) -> Vec2:
    """Pseudo-random 2D vector with components in [0, 1) for a 2D point."""
    x, y = p
    return (
        _fract(math.sin(x * 127.1 + y * 311.7) * 43758.5453),
        _fract(math.sin(x * 269.5 + y * 183.3) * 43758.5453),
    )


def noise2d(n: Sequence[float]) -> float:
    """Value noise hash of a 2D lattice point, in [0, 1)."""
    x, y = n
    return _fract(math.sin(x * 127.1 + y * 311.7) * 43758.543)


def interp_noise2d(x: float, y: float) -> float:
    """Smoothly interpolated value noise at ``(x, y)``."""
    int_x = math.floor(x)
    int_y = math.floor(y)
    fract_x = _fract(x)
    fract_y = _fract(y)

    v1 = noise2d((int_x, int_y))
    v2 = noise2d((int_x + 1, int_y))
    v3 = noise2d((int_x, int_y + 1))
    v4 = noise2d((int_x + 1, int_y + 1))

    i1 = smoothing(v1, v2, fract_x)
    i2 = smoothing(v3, v4, fract_x)
    return smoothing(i1, i2, fract_y)


def fbm(uv: Sequence[float]) -> float:
    """Fractal Brownian motion: six octaves of interpolated value noise."""
    u, v = uv
    total = 0.0
    persistence = 0.5
    freq = 4.0
    amp = 0.5
    for _ in range(6):
        total += interp_noise2d(u * freq, v * freq) * amp
        freq *= 2.0
        amp *= persistence
    return total


def surflet(p: Sequence[float], grid_point: Sequence[float]) -> float:
    """Contribution of one lattice corner to 2D Perlin noise."""
    px, py = p
    gx, gy = grid_point
    t_x = _fade(abs(px - gx))
    t_y = _fade(abs(py - gy))
    grad_x, grad_y = random2(grid_point)
    height = (px - gx) * grad_x + (py - gy) * grad_y
    return height * t_x * t_y


def perlin_noise(uv: Sequence[float]) -> float:
    """2D Perlin noise at ``uv``."""
    u, v = uv
    x0 = math.floor(u)
    y0 = math.floor(v)
    corners = ((x0, y0), (x0 + 1, y0), (x0 + 1, y0 + 1), (x0, y0 + 1))
    return sum(surflet((u, v), corner) for corner in corners)


def worley_noise(uv: Sequence[float]) -> float:
    """Cellular noise: distance to the nearest feature point, capped at 1."""
    u, v = uv
    cell_x = math.floor(u)
    cell_y = math.floor(v)
    frac_x = _fract(u)
    frac_y = _fract(v)
    min_dist = 1.0
    for ny in (-1, 0, 1):
        for nx in (-1, 0, 1):
            px, py = random2((cell_x + nx, cell_y + ny))
            dist = math.hypot(nx + px - frac_x, ny + py - frac_y)
            min_dist = min(min_dist, dist)
    return min_dist


def random3(p: Sequence[float]) -> Vec3:
    """Pseudo-random 3D vector with components in [0, 1) for a 3D point."""
    x, y, z = p
    return (
        _fract(math.sin(x * 127.1 + y * 311.7 + z * 350.7) * 43758.5453),
        _fract(math.sin(x * 269.5 + y * 183.3 + z * 450.6) * 43758.5453),
        _fract(math.sin(x * 420.6 + y * 631.2 + z * 120.1) * 43758.5453),
    )


def surflet3d(p: Sequence[float], grid_point: Sequence[float]) -> float:
    """Contribution of one lattice corner to 3D Perlin noise."""
    diff = [a - b for a, b in zip(p, grid_point)]
    fades = [_fade(abs(d)) for d in diff]
    gradient = [2.0 * g - 1.0 for g in random3(grid_point)]
    height = sum(d * g for d, g in zip(diff, gradient))
    return height * fades[0] * fades[1] * fades[2]


def perlin_noise3d(p: Sequence[float]) -> float:
    """3D Perlin noise at ``p``."""
    x, y, z = p
    base = (math.floor(x), math.floor(y), math.floor(z))
    return sum(
        surflet3d(p, (base[0] + dx, base[1] + dy, base[2] + dz))
        for dx in (0, 1)
        for dy in (0, 1)
        for dz in (0, 1)
    )