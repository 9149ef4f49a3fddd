"""Scene management: materials, meshes and the faces of blocks to draw."""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np

from voxelworld.block import FACE_UNRENDERED, Block, BlockKind
from voxelworld.generator import WorldGenerator
from voxelworld.mesh import Mesh, RenderObject, tile_mesh
from voxelworld.world import CHUNK_LEN, Chunk, World

logger = logging.getLogger(__name__)

CHUNK_RENDER_RADIUS = 3
CHUNK_GEN_RADIUS = 4
CHUNK_RENDER_COUNT_MAX = 200
REFRESH_RENDER_FACE_MAX = 100_000
TEXTURE_SIZE = 16
DEFAULT_MATERIAL_NAME = "textured"

FACE_F, FACE_R, FACE_U, FACE_D, FACE_L, FACE_B = range(6)
FACE_NORMALS: tuple[tuple[float, float, float], ...] = (
    (0.0, -1.0, 0.0),
    (1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, 0.0, -1.0),
    (-1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
)

# Offsets, rotations and neighbour directions of the six faces, in FRUDLB order.
BLOCK_TRANSLATE_DIST: tuple[tuple[int, int, int], ...] = (
    (0, 0, 0),
    (0, 0, 1),
    (0, 1, 0),
    (0, 0, 1),
    (1, 0, 0),
    (1, 0, 1),
)
BLOCK_DIR: tuple[tuple[int, int, int], ...] = (
    (0, 0, -1),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (1, 0, 0),
    (0, 0, 1),
)

PathLike = Union[str, Path]
ChunkKey = tuple[int, int, int]


def _rotation(degrees: float, axis: Sequence[float]) -> np.ndarray:
    a = np.array(axis, dtype=float)
    a /= np.linalg.norm(a)
    angle = math.radians(degrees)
    c, s = math.cos(angle), math.sin(angle)
    cross = np.array([[0.0, -a[2], a[1]], [a[2], 0.0, -a[0]], [-a[1], a[0], 0.0]])
    rot = np.identity(4)
    rot[:3, :3] = c * np.identity(3) + (1 - c) * np.outer(a, a) + s * cross
    return rot


def _translation(offset: Sequence[float]) -> np.ndarray:
    mat = np.identity(4)
    mat[:3, 3] = offset
    return mat


BLOCK_ROTATION: tuple[np.ndarray, ...] = (
    _rotation(0.0, (1, 0, 0)),
    _rotation(90.0, (0, 1, 0)),
    _rotation(90.0, (1, 0, 0)),
    _rotation(-90.0, (1, 0, 0)),
    _rotation(-90.0, (0, 1, 0)),
    _rotation(180.0, (0, 1, 0)),
)

_FACE_MESH_OVERRIDES: dict[int, dict[int, BlockKind]] = {
    BlockKind.GRASS: {FACE_U: BlockKind.RENDER_GRASS_TOP, FACE_D: BlockKind.DIRT},
    BlockKind.TNT: {FACE_U: BlockKind.TNT_TOP, FACE_D: BlockKind.TNT_BOTTOM},
}


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def _sphere(center: Sequence[int], radius: int) -> Iterator[ChunkKey]:
    cx, cy, cz = center
    for i in range(cx - radius, cx + radius + 1):
        for j in range(cy - radius, cy + radius + 1):
            for k in range(cz - radius, cz + radius + 1):
                if math.dist((i, j, k), (cx, cy, cz)) <= radius:
                    yield (i, j, k)


def _all_meshes() -> list[Mesh]:
    meshes = [
        tile_mesh(ux, vy, TEXTURE_SIZE)
        for vy in range(TEXTURE_SIZE)
        for ux in range(TEXTURE_SIZE)
    ]
    meshes.append(Mesh())
    return meshes


@dataclass(eq=False)
class Material:
    """A pipeline, its layout and an optional texture descriptor set."""

    pipeline: Any = None
    pipeline_layout: Any = None
    texture_set: Any = None


@dataclass
class RenderSystem:
    """Keeps the list of faces to draw in step with the blocks of the world."""

    generator: WorldGenerator = field(default_factory=WorldGenerator)
    model_dir: Optional[PathLike] = None
    model_name: str = "monu1"
    renderables: list[RenderObject] = field(default_factory=list)
    rendered_chunks: list[Chunk] = field(default_factory=list)
    materials: dict[str, Material] = field(default_factory=dict)
    meshes: list[Mesh] = field(default_factory=_all_meshes)
    default_material: Optional[Material] = None

    @property
    def world(self) -> World:
        """The world whose blocks are drawn."""
        return self.generator.world

    def create_material(self, name: str, pipeline: Any, layout: Any) -> Material:
        """Register a material under ``name`` and return it."""
        material = Material(pipeline=pipeline, pipeline_layout=layout)
        self.materials[name] = material
        return material

    def get_material(self, name: str) -> Optional[Material]:
        """The material registered under ``name``, or None."""
        return self.materials.get(name)

    def get_mesh(self, kind: int) -> Optional[Mesh]:
        """The atlas mesh for a block kind, or None if there is none."""
        kind = int(kind)
        if 0 <= kind < len(self.meshes):
            return self.meshes[kind]
        return None

    def init_scene(self, player_pos: Sequence[float]) -> None:
        """Reset terrain heights, import the building model if any, and render around the player."""
        self.default_material = self.get_material(DEFAULT_MATERIAL_NAME)
        self.generator.heights.heights.fill(0)
        if self.model_dir is not None:
            directory = Path(self.model_dir)
            self.generator.import_model(
                self.model_name,
                directory / f"{self.model_name}.obj",
                directory / f"{self.model_name}.png",
            )
        self.render_all_chunks(player_pos, False)

    def render_face(self, block: Block, face: int) -> RenderObject:
        """Fill in the render object of one face of ``block`` and return it."""
        obj = block.faces[face]
        obj.material = self.default_material
        offset = np.add(block.pos, BLOCK_TRANSLATE_DIST[face])
        obj.model_transform = _translation(offset) @ BLOCK_ROTATION[face]
        obj.normal = FACE_NORMALS[face]
        overrides = _FACE_MESH_OVERRIDES.get(block.kind, {})
        obj.mesh = self.get_mesh(overrides.get(face, block.kind))
        return obj

    def unrender_face(self, block: Block, face: int) -> None:
        """Stop drawing one face of ``block``."""
        index = block.face_id[face]
        if index == FACE_UNRENDERED:
            return
        block.face_id[face] = FACE_UNRENDERED
        if index >= len(self.renderables):
            return
        self.renderables[index].mesh = None
        self.renderables[index].material = None

    def _push_face(self, block: Block, face: int) -> None:
        self.renderables.append(copy.copy(self.render_face(block, face)))
        block.face_id[face] = len(self.renderables) - 1

    def render_block(self, block: Optional[Block]) -> None:
        """Draw the faces of ``block`` that touch air and hide neighbours' covered faces."""
        if block is None or block.kind == BlockKind.AIR:
            return
        if block.transparent:
            for face in range(6):
                self._push_face(block, face)
            return
        for face, direction in enumerate(BLOCK_DIR):
            near_pos = tuple(p + d for p, d in zip(block.pos, direction))
            if min(near_pos) < 0:
                continue
            near = self.world.get_block(near_pos)
            if near is None or near.kind == BlockKind.AIR:
                self._push_face(block, face)
            else:
                self.unrender_face(near, 5 - face)

    def unrender_block(self, pos: Sequence[int]) -> None:
        """Hide the block at ``pos`` and draw the neighbour faces it uncovers."""
        pos = tuple(int(c) for c in pos)
        block = self.world.get_block(pos)
        if block is None or block.kind == BlockKind.AIR:
            return
        for face in range(6):
            self.unrender_face(block, face)
        for face, direction in enumerate(BLOCK_DIR):
            near_pos = tuple(p + d for p, d in zip(pos, direction))
            if min(near_pos) < 0:
                continue
            near = self.world.get_block(near_pos)
            if near is None or near.kind == BlockKind.AIR or near.transparent:
                continue
            self._push_face(near, 5 - face)

    def render_chunk(self, cx: int, cy: int, cz: int) -> None:
        """Draw every block of a chunk, generating the chunk if needed."""
        if cx < 0 or cy < 0 or cz < 0:
            return
        chunk = self.world.get_chunk(cx, cy, cz)
        if chunk is None:
            chunk = self.generator.generate_chunk(cx, cy, cz, False)
        if chunk is None or chunk.rendered:
            return
        for plane in chunk.blocks:
            for row in plane:
                for block in row:
                    if block is not None and block.kind != BlockKind.AIR:
                        self.render_block(block)
        chunk.rendered = True
        self.rendered_chunks.append(chunk)

    def unrender_chunk(self, chunk: Optional[Chunk]) -> None:
        """Hide every face of a chunk; the chunk itself is kept."""
        if chunk is None or not chunk.rendered:
            return
        chunk.rendered = False
        for plane in chunk.blocks:
            for row in plane:
                for block in row:
                    if block is None or block.kind == BlockKind.AIR:
                        continue
                    for face in range(6):
                        self.unrender_face(block, face)

    def render_all_chunks(self, player_pos: Sequence[float], rerender: bool) -> None:
        """Clear all faces and draw the chunks near the player, generating them first unless rerendering."""
        self.renderables = []
        center = tuple(_trunc_div(int(c), CHUNK_LEN) for c in player_pos)
        if not rerender:
            for key in _sphere(center, CHUNK_GEN_RADIUS):
                self.generator.generate_chunk(*key, False)
        for key in _sphere(center, CHUNK_GEN_RADIUS):
            self.render_chunk(*key)

    def update_render_chunks(
        self, chunk_pos: Sequence[int], player_pos: Sequence[float]
    ) -> None:
        """Draw chunks around the player's new chunk and drop far ones when too many are drawn."""
        center = tuple(int(c) for c in chunk_pos)
        for key in _sphere(center, CHUNK_RENDER_RADIUS):
            self.render_chunk(*key)

        if len(self.renderables) > REFRESH_RENDER_FACE_MAX:
            for chunk in self.rendered_chunks:
                self.unrender_chunk(chunk)
            self.rendered_chunks.clear()
            self.render_all_chunks(player_pos, True)
            logger.info("too many faces drawn, refreshing")
            return

        if len(self.rendered_chunks) > CHUNK_RENDER_COUNT_MAX:
            logger.info("too many rendered chunks: %d", len(self.rendered_chunks))
            kept = []
            for chunk in self.rendered_chunks:
                far = any(
                    abs(c - own) > CHUNK_RENDER_RADIUS
                    for c, own in zip(center, (chunk.cx, chunk.cy, chunk.cz))
                )
                if far:
                    self.unrender_chunk(chunk)
                else:
                    kept.append(chunk)
            self.rendered_chunks = kept
            logger.info("cleaned far rendered chunks, %d remain", len(kept))