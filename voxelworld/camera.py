"""The first-person camera: orientation, movement, projection and picking."""

from __future__ import annotations

import enum
import math
from typing import Optional, Sequence

import numpy as np

from voxelworld.block import PLAYER_INIT_POS
from voxelworld.physics import PhysicsEntity
from voxelworld.world import World

MAX_WIDTH = 800
MAX_HEIGHT = 600
CAMERA_NEAREST = 0.1
CAMERA_FURTHEST = 5000.0
FOV_MAX = 36000.0
FOV_MIN = 10.0
MOVE_SPEED = 0.3
JUMP_SPEED = 3.0
REACH = 5
DEFAULT_ASPECT_RATIO = float(MAX_WIDTH // MAX_HEIGHT)


class MoveDirection(enum.Enum):
    """Directions the camera can move in."""

    FORWARD = enum.auto()
    BACKWARD = enum.auto()
    RIGHT = enum.auto()
    LEFT = enum.auto()
    UPWARD = enum.auto()
    DOWNWARD = enum.auto()


def _vec(values: Sequence[float]) -> np.ndarray:
    return np.array(values, dtype=float)


def _normalize(v: np.ndarray) -> np.ndarray:
    with np.errstate(invalid="ignore", divide="ignore"):
        return v / np.linalg.norm(v)


def _look_at(eye: np.ndarray, center: np.ndarray, up: np.ndarray) -> np.ndarray:
    f = _normalize(center - eye)
    s = _normalize(np.cross(f, up))
    u = np.cross(s, f)
    view = np.identity(4)
    view[0, :3] = s
    view[1, :3] = u
    view[2, :3] = -f
    view[0, 3] = -np.dot(s, eye)
    view[1, 3] = -np.dot(u, eye)
    view[2, 3] = np.dot(f, eye)
    return view


def _perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    tan_half = math.tan(fovy / 2)
    proj = np.zeros((4, 4))
    proj[0, 0] = 1 / (aspect * tan_half)
    proj[1, 1] = 1 / tan_half
    proj[2, 2] = -(far + near) / (far - near)
    proj[3, 2] = -1.0
    proj[2, 3] = -(2 * far * near) / (far - near)
    return proj


class Camera:
    """A camera carried by a physics entity; angles are in degrees."""

    def __init__(
        self,
        pos: Optional[Sequence[float]] = None,
        front: Optional[Sequence[float]] = None,
        look_at: Optional[Sequence[float]] = None,
        fov: float = 6400.0,
        aspect_ratio: float = DEFAULT_ASPECT_RATIO,
        near: float = CAMERA_NEAREST,
        far: float = CAMERA_FURTHEST,
    ) -> None:
        self.target = _vec(look_at if look_at is not None else (50.0, 10.0, 10.0))
        self.y_axis = _vec((0.0, 1.0, 0.0))
        self.z_axis = _normalize(_vec(front)) if front is not None else _vec((0.0, 0.0, 1.0))
        self.world_up = _vec((0.0, 1.0, 0.0))
        self.x_axis = _normalize(np.cross(self.z_axis, self.y_axis))
        self.fov = fov
        self.aspect_ratio = aspect_ratio
        self.near = near
        self.far = far
        self.pitch = 0.0
        self.yaw = 90.0
        self.entity = PhysicsEntity(pos=pos if pos is not None else PLAYER_INIT_POS)

    def stay(self) -> None:
        """Stop moving."""
        self.entity.v = np.zeros(3)

    def move_by(self, direction: MoveDirection, walking: bool) -> None:
        """Set the velocity for a move; walking keeps to the horizontal plane."""
        v = self.entity.v
        if walking:
            if direction in (MoveDirection.FORWARD, MoveDirection.BACKWARD):
                sign = 1.0 if direction is MoveDirection.FORWARD else -1.0
                norm = _normalize(_vec((self.z_axis[0], self.z_axis[2])))
                v[0] = sign * norm[0] * MOVE_SPEED
                v[2] = sign * norm[1] * MOVE_SPEED
        else:
            flights = {
                MoveDirection.FORWARD: self.z_axis,
                MoveDirection.BACKWARD: -self.z_axis,
                MoveDirection.UPWARD: self.y_axis,
                MoveDirection.DOWNWARD: -self.y_axis,
            }
            if direction in flights:
                self.entity.v = flights[direction] * MOVE_SPEED
        if direction is MoveDirection.LEFT:
            self.entity.v = -self.x_axis * MOVE_SPEED
        elif direction is MoveDirection.RIGHT:
            self.entity.v = self.x_axis * MOVE_SPEED

    def jump(self) -> None:
        """Jump, unless already moving vertically."""
        if abs(self.entity.v[1]) < 0.1:
            self.entity.v[1] = JUMP_SPEED

    def cursor_rotation(self, delta_x: float, delta_y: float) -> None:
        """Turn the camera by mouse deltas; pitch is kept within ±89 degrees."""
        self.pitch = min(89.0, max(-89.0, self.pitch - delta_y))
        self.yaw += delta_x
        pitch = math.radians(self.pitch)
        yaw = math.radians(self.yaw)
        forward = _vec(
            (math.cos(pitch) * math.cos(yaw), math.sin(pitch), math.cos(pitch) * math.sin(yaw))
        )
        self.z_axis = _normalize(forward)
        self.x_axis = _normalize(np.cross(self.z_axis, self.world_up))
        self.y_axis = _normalize(np.cross(self.x_axis, self.z_axis))

    def zoom(self, delta: float) -> None:
        """Change the field of view, clamped to its limits."""
        self.fov = min(FOV_MAX, max(FOV_MIN, self.fov + delta))

    def view_projection(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """View matrix, projection matrix (x mirrored) and homogeneous camera position."""
        pos = self.entity.pos
        view = _look_at(pos, pos + self.z_axis, self.y_axis)
        proj = _perspective(math.radians(self.fov), self.aspect_ratio, self.near, self.far)
        proj[0, 0] *= -1
        return view, proj, np.append(pos, 1.0)

    def point_at(self, world: World, place_block: bool) -> Optional[np.ndarray]:
        """The point the camera aims at within reach, or None.

        For breaking, the first solid cell is returned; for placing, the air
        cell just before it.
        """
        fact = self.entity.pos + self.z_axis
        seen_air = False
        for _ in range(REACH):
            x, y, z = (int(c) for c in fact)
            if x < 0 or y < 0 or z < 0:
                return None
            if not world.is_air_block(x, y, z):
                if not place_block:
                    return fact
                if seen_air:
                    return fact - self.z_axis
                return None
            seen_air = True
            fact = fact + self.z_axis
        return None