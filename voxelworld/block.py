"""Block kinds, blocks, colour-to-block mapping and the player."""

from __future__ import annotations

import enum
import random
from dataclasses import dataclass, field

from voxelworld.mesh import LIGHT_SCALE, RenderObject

FACE_UNRENDERED = -1
PLAYER_INIT_POS: tuple[float, float, float] = (5.0, 60.0, 5.0)
RANDOM_KIND_RANGE = 128


class BlockKind(enum.IntEnum):
    """Block kinds; values are tile indices in the texture atlas (row by row)."""

    NULL = -1
    AIR = 181

    CLAY = 0
    STONE = 1
    DIRT = 2
    GRASS = 3
    OAK_SLAB = 4
    DOUBLE_STONE_SLAB = 5
    TILE_232 = 6
    BRICK = 7
    TNT = 8
    TNT_TOP = 9
    TNT_BOTTOM = 10
    SPIDER_WEB = 11
    ROSE = 12
    YELLOW_FLOWER = 13
    WATER = 14
    OAK_SAPLING = 15

    COBBLE_STONE = 16
    BEDROCK = 17
    TILE_24 = 18
    TILE_123 = 19
    TILE_43 = 20
    TILE_5 = 21
    TILE_2 = 22
    TILE_55 = 23
    TILE_455 = 24
    TILE_4 = 25
    TILE_3 = 26
    TILE_46 = 27
    TILE_513 = 28
    TILE_34 = 29
    TILE_45 = 30
    TILE_54 = 31

    GOLD_ORE = 32
    IRON_ORE = 33
    COAL_ORE = 34
    BOOK_SHELF = 35
    MOSS_STONE = 36
    OBSIDIAN = 37
    GRASS_TRANSPARENT = 38
    GRASS_ENTITY = 39
    RENDER_GRASS_TOP = 40


TRANSPARENT_KINDS = frozenset({BlockKind.SPIDER_WEB, BlockKind.ROSE, BlockKind.YELLOW_FLOWER})


def _as_kind(value: int) -> int:
    """Return the named kind for ``value`` when there is one, else the bare tile index."""
    try:
        return BlockKind(value)
    except ValueError:
        return value


def _six_faces() -> list[RenderObject]:
    return [RenderObject() for _ in range(6)]


@dataclass(eq=False)
class Block:
    """One voxel of the world. Faces are ordered front, right, up, down, left, back."""

    pos: tuple[int, int, int]
    kind: int
    faces: list[RenderObject] = field(default_factory=_six_faces, repr=False)
    face_id: list[int] = field(default_factory=lambda: [FACE_UNRENDERED] * 6)
    brightness: float = LIGHT_SCALE
    transparent: bool = field(init=False)

    def __post_init__(self) -> None:
        self.pos = tuple(int(c) for c in self.pos)
        self.transparent = self.kind in TRANSPARENT_KINDS


@dataclass
class ColorBlockMap:
    """Maps ARGB colours of a model texture to block kinds."""

    mapping: dict[int, int] = field(default_factory=dict)
    rng: random.Random = field(default_factory=random.Random)

    def lookup(self, argb: int, randomize: bool) -> int:
        """Kind for ``argb``; unknown colours get a random kind or default to clay."""
        if randomize and argb not in self.mapping:
            self.mapping[argb] = _as_kind(self.rng.randrange(RANDOM_KIND_RANGE))
        return self.mapping.setdefault(argb, BlockKind.CLAY)


@dataclass
class Player:
    """The player's state."""

    hold_block: int = BlockKind.SPIDER_WEB