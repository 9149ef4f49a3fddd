import itertools

import numpy as np
import pytest

from voxelworld.block import FACE_UNRENDERED, BlockKind
from voxelworld.generator import WorldGenerator
from voxelworld.render import (
    CHUNK_RENDER_RADIUS,
    FACE_D,
    FACE_F,
    FACE_L,
    FACE_R,
    FACE_U,
    TEXTURE_SIZE,
    RenderSystem,
)


def _prefilled(size=5):
    render = RenderSystem(generator=WorldGenerator())
    for key in itertools.product(range(size), repeat=3):
        render.world.get_or_create_chunk(*key)
    return render


def _system_with_chunk():
    render = RenderSystem()
    render.world.get_or_create_chunk(0, 0, 0)
    return render


def test_meshes_cover_atlas_plus_one():
    render = RenderSystem()
    assert len(render.meshes) == TEXTURE_SIZE * TEXTURE_SIZE + 1


def test_get_mesh_bounds():
    render = RenderSystem()
    assert render.get_mesh(BlockKind.STONE) is render.meshes[1]
    assert render.get_mesh(BlockKind.AIR) is render.meshes[181]
    assert render.get_mesh(BlockKind.NULL) is None
    assert render.get_mesh(len(render.meshes)) is None


def test_material_round_trip():
    render = RenderSystem()
    material = render.create_material("textured", "pipe", "layout")
    assert render.get_material("textured") is material
    assert material.pipeline == "pipe"
    assert material.pipeline_layout == "layout"
    assert material.texture_set is None
    assert render.get_material("missing") is None


def test_grass_faces_use_special_meshes():
    render = _system_with_chunk()
    block = render.world.create_block((1, 1, 1), BlockKind.GRASS)
    assert render.render_face(block, FACE_U).mesh is render.get_mesh(BlockKind.RENDER_GRASS_TOP)
    assert render.render_face(block, FACE_D).mesh is render.get_mesh(BlockKind.DIRT)
    assert render.render_face(block, FACE_F).mesh is render.get_mesh(BlockKind.GRASS)


def test_tnt_faces_use_special_meshes():
    render = _system_with_chunk()
    block = render.world.create_block((1, 1, 1), BlockKind.TNT)
    assert render.render_face(block, FACE_U).mesh is render.get_mesh(BlockKind.TNT_TOP)
    assert render.render_face(block, FACE_D).mesh is render.get_mesh(BlockKind.TNT_BOTTOM)
    assert render.render_face(block, FACE_L).mesh is render.get_mesh(BlockKind.TNT)


def test_render_face_transform_and_normal():
    render = _system_with_chunk()
    block = render.world.create_block((2, 3, 4), BlockKind.STONE)
    front = render.render_face(block, FACE_F)
    assert np.allclose(front.model_transform[:3, 3], (2, 3, 4))
    assert np.allclose(front.model_transform[:3, :3], np.identity(3))
    right = render.render_face(block, FACE_R)
    assert np.allclose(right.model_transform[:3, 3], (2, 3, 5))
    assert right.normal == (1.0, 0.0, 0.0)


def test_isolated_block_renders_six_faces():
    render = _system_with_chunk()
    block = render.world.create_block((3, 3, 3), BlockKind.STONE)
    render.render_block(block)
    assert len(render.renderables) == 6
    assert block.face_id == list(range(6))


def test_block_at_origin_skips_negative_neighbours():
    render = _system_with_chunk()
    block = render.world.create_block((0, 0, 0), BlockKind.STONE)
    render.render_block(block)
    assert len(render.renderables) == 3
    assert block.face_id[FACE_F] == FACE_UNRENDERED
    assert block.face_id[FACE_R] == FACE_UNRENDERED
    assert block.face_id[FACE_D] == FACE_UNRENDERED


def test_transparent_block_renders_all_faces():
    render = _system_with_chunk()
    block = render.world.create_block((0, 0, 0), BlockKind.ROSE)
    render.render_block(block)
    assert len(render.renderables) == 6


def test_air_and_none_are_not_rendered():
    render = _system_with_chunk()
    render.render_block(None)
    render.render_block(render.world.create_block((1, 1, 1), BlockKind.AIR))
    assert render.renderables == []


def test_adjacent_block_hides_shared_face():
    render = _system_with_chunk()
    a = render.world.create_block((2, 2, 2), BlockKind.STONE)
    render.render_block(a)
    shared = a.face_id[FACE_L]
    b = render.world.create_block((3, 2, 2), BlockKind.STONE)
    render.render_block(b)
    assert a.face_id[FACE_L] == FACE_UNRENDERED
    assert render.renderables[shared].mesh is None
    assert render.renderables[shared].material is None
    assert b.face_id[FACE_R] == FACE_UNRENDERED
    assert len(render.renderables) == 11


def test_unrender_block_uncovers_neighbour():
    render = _system_with_chunk()
    a = render.world.create_block((2, 2, 2), BlockKind.STONE)
    b = render.world.create_block((3, 2, 2), BlockKind.STONE)
    render.render_block(a)
    render.render_block(b)
    before = len(render.renderables)
    render.unrender_block((3, 2, 2))
    assert all(i == FACE_UNRENDERED for i in b.face_id)
    assert a.face_id[FACE_L] == before
    assert render.renderables[a.face_id[FACE_L]].mesh is render.get_mesh(BlockKind.STONE)


def test_render_chunk_once_and_unrender():
    render = _system_with_chunk()
    block = render.world.create_block((1, 1, 1), BlockKind.STONE)
    render.render_chunk(0, 0, 0)
    render.render_chunk(0, 0, 0)
    chunk = render.world.get_chunk(0, 0, 0)
    assert chunk.rendered
    assert render.rendered_chunks == [chunk]
    assert len(render.renderables) == 6
    render.unrender_chunk(chunk)
    assert not chunk.rendered
    assert all(i == FACE_UNRENDERED for i in block.face_id)


def test_render_chunk_negative_is_ignored():
    render = RenderSystem()
    render.render_chunk(-1, 0, 0)
    assert render.rendered_chunks == []
    assert render.world.chunks == {}


def test_render_all_chunks_uses_sphere():
    render = _prefilled()
    render.render_all_chunks((0.0, 0.0, 0.0), False)
    keys = {(c.cx, c.cy, c.cz) for c in render.rendered_chunks}
    assert (4, 0, 0) in keys
    assert (3, 3, 0) not in keys
    assert all(np.linalg.norm(k) <= 4 for k in keys)


def test_init_scene_sets_default_material():
    render = _prefilled()
    material = render.create_material("textured", None, None)
    render.init_scene((0.0, 0.0, 0.0))
    block = render.world.create_block((1, 1, 1), BlockKind.STONE, True)
    assert render.render_face(block, FACE_F).material is material
    assert render.world.get_chunk(0, 0, 0).rendered


def test_update_render_chunks_drops_far_chunks():
    render = _prefilled(4)
    far = [render.world.get_or_create_chunk(x, 0, 0) for x in range(20, 231)]
    for chunk in far:
        render.render_chunk(chunk.cx, chunk.cy, chunk.cz)
    render.update_render_chunks((0, 0, 0), np.zeros(3))
    assert all(not chunk.rendered for chunk in far)
    assert render.rendered_chunks
    for chunk in render.rendered_chunks:
        assert max(abs(chunk.cx), abs(chunk.cy), abs(chunk.cz)) <= CHUNK_RENDER_RADIUS