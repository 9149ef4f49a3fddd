"""Physical entities and the player physics step."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

import numpy as np

from voxelworld.world import CHUNK_LEN, CHUNK_MAX_XZ, CHUNK_MAX_Y, World

ChunkKey = tuple[int, int, int]


def _zeros() -> np.ndarray:
    return np.zeros(3)


@dataclass(eq=False)
class PhysicsEntity:
    """A body shaped as an axis-aligned prism of height ``h`` and width ``d``."""

    pos: np.ndarray = field(default_factory=_zeros)
    v: np.ndarray = field(default_factory=_zeros)
    force: np.ndarray = field(default_factory=_zeros)
    m: float = 1.0
    h: int = 1
    d: int = 1

    def __post_init__(self) -> None:
        self.pos = np.array(self.pos, dtype=float)
        self.v = np.array(self.v, dtype=float)
        self.force = np.array(self.force, dtype=float)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def _chunk_of(pos: Sequence[float]) -> ChunkKey:
    x, y, z = (_trunc_div(int(c), CHUNK_LEN) for c in pos)
    return (x, y, z)


@dataclass
class PhysicsSystem:
    """Moves the camera's entity with gravity and block collisions.

    ``on_chunk_change`` is called with the new chunk and position whenever the
    player crosses into another chunk.
    """

    camera: Any
    world: World
    gravity: np.ndarray = field(default_factory=lambda: np.array([0.0, -0.5, 0.0]))
    player_physics: bool = True
    on_chunk_change: Optional[Callable[[ChunkKey, np.ndarray], None]] = None

    def simulate(self, dt: float) -> None:
        """Advance the player by ``dt`` with semi-implicit Euler integration."""
        entity = self.camera.entity
        last_pos = entity.pos.copy()
        last_chunk = _chunk_of(last_pos)

        if self.player_physics:
            entity.v = entity.v + self.gravity * dt
        entity.pos = entity.pos + entity.v * dt

        pos = entity.pos.copy()
        v = entity.v.copy()
        x, y, z = (int(c) for c in pos)
        d, h = entity.d, entity.h

        if self.player_physics:
            xz_size = CHUNK_MAX_XZ * CHUNK_LEN
            y_size = CHUNK_MAX_Y * CHUNK_LEN
            x = min(xz_size - d, max(d, x))
            y = min(y_size - 1, max(h, y))
            z = min(xz_size - d, max(d, z))
            air = self.world.is_air_block
            blocked = (
                (v[0] > 0 and not air(x + d, y, z)) or (v[0] < 0 and not air(x - d, y, z)),
                (v[1] > 0 and not air(x, y + 1, z)) or (v[1] < 0 and not air(x, y - h, z)),
                (v[2] > 0 and not air(x, y, z + d)) or (v[2] < 0 and not air(x, y, z - d)),
            )
            for axis, hit in enumerate(blocked):
                if hit:
                    entity.v[axis] = 0.0
                    entity.pos[axis] = last_pos[axis]

        if pos[1] <= 0:
            entity.v[1] = 0.0
            entity.pos[1] = 0.0

        chunk = _chunk_of(pos)
        if chunk != last_chunk and self.on_chunk_change is not None:
            self.on_chunk_change(chunk, pos)