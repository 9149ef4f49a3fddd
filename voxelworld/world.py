"""Chunks of blocks and the world that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from voxelworld.block import Block, BlockKind

CHUNK_LEN = 8
CHUNK_LEN_SQUARE = CHUNK_LEN * CHUNK_LEN
CHUNK_LEN_CUBIC = CHUNK_LEN * CHUNK_LEN * CHUNK_LEN
CHUNK_MAX_XZ = 64
CHUNK_MAX_Y = 32

RANDOM_BUILDING_TEXTURE = True
MODEL_MAGNIFICATION = 2.5

TICK_PERIOD = 0.2

ChunkKey = tuple[int, int, int]


def _empty_blocks() -> list[list[list[Optional[Block]]]]:
    return [[[None] * CHUNK_LEN for _ in range(CHUNK_LEN)] for _ in range(CHUNK_LEN)]


@dataclass(eq=False)
class Chunk:
    """A cube of CHUNK_LEN blocks per side, indexed ``blocks[x][y][z]``."""

    cx: int
    cy: int
    cz: int
    built: bool = False
    rendered: bool = False
    blocks: list[list[list[Optional[Block]]]] = field(
        default_factory=_empty_blocks, repr=False
    )


def _split(pos: Sequence[int]) -> tuple[ChunkKey, tuple[int, int, int]]:
    x, y, z = (int(c) for c in pos)
    return (
        (x // CHUNK_LEN, y // CHUNK_LEN, z // CHUNK_LEN),
        (x % CHUNK_LEN, y % CHUNK_LEN, z % CHUNK_LEN),
    )


@dataclass
class World:
    """All chunks of a world, keyed by chunk coordinates."""

    chunks: dict[ChunkKey, Chunk] = field(default_factory=dict)

    def get_chunk(self, cx: int, cy: int, cz: int) -> Optional[Chunk]:
        """The chunk at the given chunk coordinates, or None."""
        return self.chunks.get((cx, cy, cz))

    def get_or_create_chunk(self, cx: int, cy: int, cz: int) -> Chunk:
        """The chunk at the given chunk coordinates, created empty if missing."""
        chunk = self.get_chunk(cx, cy, cz)
        if chunk is None:
            chunk = Chunk(cx, cy, cz)
            self.chunks[(cx, cy, cz)] = chunk
        return chunk

    def set_chunk(self, cx: int, cy: int, cz: int, chunk: Chunk) -> Chunk:
        """Store ``chunk`` at the given coordinates, replacing any previous one."""
        self.chunks[(cx, cy, cz)] = chunk
        return chunk

    def get_block(self, pos: Sequence[int]) -> Optional[Block]:
        """The block at world position ``pos``, or None if there is none."""
        if any(int(c) < 0 for c in pos):
            return None
        key, (i, j, k) = _split(pos)
        chunk = self.chunks.get(key)
        if chunk is None:
            return None
        return chunk.blocks[i][j][k]

    def is_air_block(self, x: int, y: int, z: int) -> bool:
        """Whether the position holds air; positions without a chunk count as solid."""
        if x < 0 or y < 0 or z < 0:
            return False
        key, (i, j, k) = _split((x, y, z))
        chunk = self.chunks.get(key)
        if chunk is None:
            return False
        block = chunk.blocks[i][j][k]
        return block is None or block.kind == BlockKind.AIR

    def create_block(
        self,
        pos: Sequence[int],
        kind: int,
        replace: bool = False,
        chunk: Optional[Chunk] = None,
    ) -> Optional[Block]:
        """Place a block of ``kind`` at ``pos``.

        An existing non-air block is kept unless ``replace`` is set. ``chunk``,
        when given, is the chunk that holds ``pos``. Returns None for the null
        kind or a negative position.
        """
        if kind == BlockKind.NULL or any(int(c) < 0 for c in pos):
            return None
        key, (i, j, k) = _split(pos)
        if chunk is None:
            chunk = self.get_or_create_chunk(*key)
        existing = chunk.blocks[i][j][k]
        if existing is not None and not replace and existing.kind != BlockKind.AIR:
            return existing
        block = Block(tuple(int(c) for c in pos), kind)
        chunk.blocks[i][j][k] = block
        return block