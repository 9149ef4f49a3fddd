import math

import numpy as np
import pytest

from voxelworld.block import PLAYER_INIT_POS, BlockKind
from voxelworld.camera import (
    FOV_MAX,
    FOV_MIN,
    JUMP_SPEED,
    MOVE_SPEED,
    Camera,
    MoveDirection,
)
from voxelworld.world import World


def _assert_orthonormal(cam):
    for axis in (cam.x_axis, cam.y_axis, cam.z_axis):
        assert np.linalg.norm(axis) == pytest.approx(1.0)
    assert np.dot(cam.x_axis, cam.z_axis) == pytest.approx(0.0, abs=1e-9)
    assert np.dot(cam.y_axis, cam.z_axis) == pytest.approx(0.0, abs=1e-9)


def test_default_camera():
    cam = Camera()
    assert np.allclose(cam.entity.pos, PLAYER_INIT_POS)
    assert cam.fov == 6400.0
    assert cam.aspect_ratio == 1.0
    _assert_orthonormal(cam)


def test_front_is_normalized():
    cam = Camera(pos=(1, 2, 3), front=(0, 0, 5))
    assert np.allclose(cam.z_axis, (0, 0, 1))
    assert np.allclose(cam.entity.pos, (1, 2, 3))


def test_zoom_is_clamped():
    cam = Camera()
    cam.zoom(1e9)
    assert cam.fov == FOV_MAX
    cam.zoom(-1e9)
    assert cam.fov == FOV_MIN


def test_cursor_rotation_clamps_pitch_and_keeps_axes_orthonormal():
    cam = Camera()
    cam.cursor_rotation(30.0, -500.0)
    assert cam.pitch == 89.0
    cam.cursor_rotation(0.0, 1000.0)
    assert cam.pitch == -89.0
    _assert_orthonormal(cam)


def test_cursor_rotation_at_rest_faces_z():
    cam = Camera()
    cam.cursor_rotation(0.0, 0.0)
    assert np.allclose(cam.z_axis, (0, 0, 1))


def test_walking_forward_and_backward_stay_horizontal():
    cam = Camera()
    cam.cursor_rotation(20.0, -30.0)
    cam.entity.v[1] = 1.5
    cam.move_by(MoveDirection.FORWARD, True)
    forward = cam.entity.v.copy()
    assert math.hypot(forward[0], forward[2]) == pytest.approx(MOVE_SPEED)
    assert forward[1] == 1.5
    cam.move_by(MoveDirection.BACKWARD, True)
    assert np.allclose(cam.entity.v[[0, 2]], -forward[[0, 2]])


def test_flying_and_strafing():
    cam = Camera()
    cam.move_by(MoveDirection.UPWARD, False)
    assert np.allclose(cam.entity.v, cam.y_axis * MOVE_SPEED)
    cam.move_by(MoveDirection.LEFT, False)
    assert np.allclose(cam.entity.v, -cam.x_axis * MOVE_SPEED)
    cam.move_by(MoveDirection.RIGHT, True)
    assert np.allclose(cam.entity.v, cam.x_axis * MOVE_SPEED)


def test_walking_ignores_vertical_directions():
    cam = Camera()
    cam.entity.v[:] = (0.1, 0.2, 0.3)
    cam.move_by(MoveDirection.UPWARD, True)
    assert np.allclose(cam.entity.v, (0.1, 0.2, 0.3))


def test_jump_only_when_not_moving_vertically():
    cam = Camera()
    cam.jump()
    assert cam.entity.v[1] == JUMP_SPEED
    cam.entity.v[1] = -1.0
    cam.jump()
    assert cam.entity.v[1] == -1.0


def test_stay_stops():
    cam = Camera()
    cam.move_by(MoveDirection.FORWARD, False)
    cam.stay()
    assert np.allclose(cam.entity.v, 0)


def test_view_matrix_maps_camera_to_origin():
    cam = Camera(pos=(3, 4, 5))
    cam.cursor_rotation(15.0, 10.0)
    view, proj, cam_pos = cam.view_projection()
    assert np.allclose(view @ cam_pos, (0, 0, 0, 1))
    ahead = np.append(cam.entity.pos + cam.z_axis, 1.0)
    assert np.allclose(view @ ahead, (0, 0, -1, 1))
    assert proj[3, 2] == -1.0


def test_projection_mirrors_x():
    cam = Camera(fov=90.0, aspect_ratio=1.0)
    _, proj, _ = cam.view_projection()
    assert proj[0, 0] == pytest.approx(-1.0)
    assert proj[1, 1] == pytest.approx(1.0)


def _air_world():
    world = World()
    world.get_or_create_chunk(0, 0, 0)
    return world


def test_point_at_break_and_place():
    world = _air_world()
    world.create_block((1, 1, 4), BlockKind.STONE)
    cam = Camera(pos=(1.5, 1.5, 1.5))
    hit = cam.point_at(world, False)
    assert np.allclose(hit, cam.entity.pos + 3 * cam.z_axis)
    place = cam.point_at(world, True)
    assert np.allclose(place, cam.entity.pos + 2 * cam.z_axis)


def test_point_at_nothing_in_reach():
    cam = Camera(pos=(1.5, 1.5, 0.5))
    world = _air_world()
    world.get_or_create_chunk(0, 0, 1)
    assert cam.point_at(world, False) is None


def test_point_at_cannot_place_when_enclosed():
    world = _air_world()
    world.create_block((1, 1, 2), BlockKind.STONE)
    cam = Camera(pos=(1.5, 1.5, 1.5))
    assert cam.point_at(world, True) is None
    assert np.allclose(cam.point_at(world, False), cam.entity.pos + cam.z_axis)