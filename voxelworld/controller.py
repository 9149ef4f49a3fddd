"""Keyboard and mouse handling for the player."""

from __future__ import annotations

import enum
from collections.abc import Container
from dataclasses import dataclass, field
from typing import Optional

from voxelworld.block import BlockKind, Player
from voxelworld.camera import Camera, MoveDirection
from voxelworld.physics import PhysicsSystem
from voxelworld.render import RenderSystem

CURSOR_SENSITIVITY = 0.05


class Key(enum.IntEnum):
    """Keys and mouse buttons the game reacts to."""

    MOUSE_LEFT = 0
    MOUSE_RIGHT = 1
    SPACE = 32
    A = 65
    D = 68
    G = 71
    S = 83
    W = 87
    TAB = 258
    RIGHT = 262
    LEFT = 263
    DOWN = 264
    UP = 265


@dataclass
class InputTracker:
    """Turns the set of currently pressed keys into press and release edges."""

    held: set = field(default_factory=set)

    def is_down(self, key: Key, pressed: Container) -> bool:
        """True on the first frame ``key`` is pressed."""
        if key in pressed and key not in self.held:
            self.held.add(key)
            return True
        return False

    def is_pressing(self, key: Key, pressed: Container) -> bool:
        """True while ``key`` is pressed."""
        return key in pressed

    def is_up(self, key: Key, pressed: Container) -> bool:
        """True on the first frame ``key`` is released."""
        if key not in pressed and key in self.held:
            self.held.discard(key)
            return True
        return False


_WALK_KEYS = (
    (Key.A, MoveDirection.LEFT),
    (Key.D, MoveDirection.RIGHT),
    (Key.W, MoveDirection.FORWARD),
    (Key.S, MoveDirection.BACKWARD),
)
_IDLE_KEYS = (Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT)


@dataclass
class Controller:
    """Applies player input to the camera, the world and the rendered scene."""

    render: RenderSystem
    camera: Camera = field(default_factory=Camera)
    player: Player = field(default_factory=Player)
    physics: Optional[PhysicsSystem] = None
    tracker: InputTracker = field(default_factory=InputTracker)
    cursor_locked: bool = False
    entering_cursor: bool = False
    _last_cursor: tuple[float, float] = (0.0, 0.0)

    def __post_init__(self) -> None:
        if self.physics is None:
            self.physics = PhysicsSystem(
                self.camera, self.render.world, on_chunk_change=self.render.update_render_chunks
            )

    def on_cursor(self, pos_x: float, pos_y: float) -> None:
        """Rotate the camera by the cursor movement while the cursor is locked."""
        if not self.cursor_locked:
            return
        if self.entering_cursor:
            self.entering_cursor = False
            self._last_cursor = (pos_x, pos_y)
        last_x, last_y = self._last_cursor
        self._last_cursor = (pos_x, pos_y)
        self.camera.cursor_rotation(
            (pos_x - last_x) * CURSOR_SENSITIVITY, (pos_y - last_y) * CURSOR_SENSITIVITY
        )

    def on_scroll(self, offset_x: float, offset_y: float) -> None:
        """Zoom with the scroll wheel while the cursor is locked."""
        if self.cursor_locked:
            self.camera.zoom(offset_y)

    def _edge(self, key: Key, pressed: Container) -> str:
        if self.tracker.is_down(key, pressed):
            return "down"
        if self.tracker.is_up(key, pressed):
            return "up"
        if self.tracker.is_pressing(key, pressed):
            return "pressing"
        return "idle"

    def update(self, pressed: Container) -> None:
        """Handle one frame of input given the keys and buttons currently pressed."""
        world = self.render.world

        if self._edge(Key.TAB, pressed) == "down":
            self.cursor_locked = not self.cursor_locked
            if self.cursor_locked:
                self.entering_cursor = True

        if self._edge(Key.MOUSE_LEFT, pressed) == "pressing":
            pick = self.camera.point_at(world, False)
            if pick is not None:
                pos = tuple(int(c) for c in pick)
                self.render.unrender_block(pos)
                world.create_block(pos, BlockKind.AIR, True, None)

        if self._edge(Key.MOUSE_RIGHT, pressed) == "down":
            pick = self.camera.point_at(world, True)
            if pick is not None:
                pos = tuple(int(c) for c in pick)
                block = world.create_block(pos, self.player.hold_block, False, None)
                self.render.render_block(block)

        if self._edge(Key.SPACE, pressed) == "down":
            self.camera.jump()

        for key, direction in _WALK_KEYS:
            edge = self._edge(key, pressed)
            if edge == "up":
                self.camera.stay()
            elif edge == "pressing":
                self.camera.move_by(direction, self.physics.player_physics)

        if self._edge(Key.G, pressed) == "down":
            self.physics.player_physics = not self.physics.player_physics

        for key in _IDLE_KEYS:
            self._edge(key, pressed)