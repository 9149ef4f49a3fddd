"""Procedural world generation: terrain chunks, roads, buildings and towns."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image

from voxelworld.block import Block, BlockKind, ColorBlockMap
from voxelworld.mesh import ObjModel, load_obj
from voxelworld.noise import perlin_noise
from voxelworld.terrain import (
    TerrainHeights,
    cave_block,
    skyblock,
    terrain_base_height,
    vein_block,
)
from voxelworld.world import (
    CHUNK_LEN,
    MODEL_MAGNIFICATION,
    RANDOM_BUILDING_TEXTURE,
    Chunk,
    World,
)

PathLike = Union[str, Path]
MODEL_TEXTURE_SIZE = (256, 1)


@dataclass
class GenerationOptions:
    """Switches and parameters for world generation."""

    vein: bool = False
    cave: bool = True
    skyblock: bool = False
    building: bool = False
    random_building_texture: bool = RANDOM_BUILDING_TEXTURE
    model_magnification: float = MODEL_MAGNIFICATION
    town_model: str = "monu1"
    town_radius: int = 50
    town_gap: int = 30


@dataclass
class _ImportedModel:
    obj: ObjModel
    kinds: list[int]


def _chunk_coord(value: float) -> int:
    """Chunk coordinate of a world coordinate, truncating toward zero."""
    return int(value / CHUNK_LEN)


@dataclass
class WorldGenerator:
    """Fills a world with generated terrain, roads and buildings."""

    world: World = field(default_factory=World)
    heights: TerrainHeights = field(default_factory=TerrainHeights)
    options: GenerationOptions = field(default_factory=GenerationOptions)
    color_map: ColorBlockMap = field(default_factory=ColorBlockMap)
    rng: random.Random = field(default_factory=random.Random)
    models: dict[str, _ImportedModel] = field(default_factory=dict)

    def import_model(self, name: str, obj_path: PathLike, png_path: PathLike) -> list[int]:
        """Load a building model and its 256x1 palette; return the kind of each uv."""
        obj = load_obj(obj_path)
        with Image.open(png_path) as image:
            rgba = image.convert("RGBA")
        if rgba.size != MODEL_TEXTURE_SIZE:
            width, height = rgba.size
            raise ValueError(
                f"model texture {png_path} should be 256 * 1, but it is {width} * {height}"
            )
        pixels = list(rgba.getdata())
        last = MODEL_TEXTURE_SIZE[0] - 1
        kinds = []
        for u in obj.texcoords[0::2]:
            r, g, b, a = pixels[min(last, max(0, int(256 * u)))]
            argb = (a << 24) | (r << 16) | (g << 8) | b
            kinds.append(self.color_map.lookup(argb, self.options.random_building_texture))
        self.models[name] = _ImportedModel(obj, kinds)
        return kinds

    def generate_chunk(
        self, cx: int, cy: int, cz: int, constructing: bool = False
    ) -> Optional[Chunk]:
        """Create and fill a chunk, or return the existing one; None for negative coordinates."""
        if cx < 0 or cy < 0 or cz < 0:
            return None
        chunk = self.world.get_chunk(cx, cy, cz)
        if chunk is not None:
            if constructing:
                chunk.built = True
            return chunk

        chunk = self.world.set_chunk(cx, cy, cz, Chunk(cx, cy, cz, built=constructing))
        x_min, y_min, z_min = cx * CHUNK_LEN, cy * CHUNK_LEN, cz * CHUNK_LEN
        x_max, y_max, z_max = x_min + CHUNK_LEN, y_min + CHUNK_LEN, z_min + CHUNK_LEN
        columns = [(x, z) for x in range(x_min, x_max) for z in range(z_min, z_max)]
        create = self.world.create_block

        for x, z in columns:
            top = min(y_max, terrain_base_height(x, z))
            for y in range(y_min, top):
                create((x, y, z), BlockKind.STONE, False, chunk)

        for x, z in columns:
            surface = self.heights.generate(x, z)
            for y in range(y_min, min(y_max, surface)):
                if y >= surface - 1:
                    create((x, y, z), BlockKind.GRASS, True, chunk)
                    break
                create((x, y, z), BlockKind.DIRT, False, chunk)

        layers = (
            (self.options.vein, 1, 20, vein_block),
            (self.options.cave, 1, 50, cave_block),
            (self.options.skyblock, 80, 128, skyblock),
        )
        for x, z in columns:
            for enabled, low, high, carve in layers:
                if not enabled:
                    continue
                for y in range(max(y_min, low), min(y_max, high)):
                    create((x, y, z), carve(x, y, z), True, chunk)

        if self.options.building and not chunk.built:
            self.generate_town(x_min, z_min, self.options.town_radius, self.options.town_gap)

        if cy == 0:
            for x, z in columns:
                create((x, 0, z), BlockKind.BEDROCK, True, chunk)

        for i, plane in enumerate(chunk.blocks):
            for j, row in enumerate(plane):
                for k, block in enumerate(row):
                    if block is None:
                        row[k] = Block((x_min + i, y_min + j, z_min + k), BlockKind.AIR)
        return chunk

    def _place_road_block(self, pos: tuple[int, int, int]) -> None:
        chunk = self.generate_chunk(*(_chunk_coord(c) for c in pos), True)
        self.world.create_block(pos, BlockKind.COBBLE_STONE, True, chunk)

    def generate_straight_road(
        self, start: Sequence[int], end: Sequence[int], half_width: int
    ) -> None:
        """Pave a cobblestone road between two (x, z) points on one axis."""
        (sx, sz), (ex, ez) = start, end
        if sx != ex and sz != ez:
            raise ValueError("expected a straight road along the x or z axis")
        if sx == ex:
            road_x = sx
            for x in range(road_x - half_width, road_x + half_width + 1):
                for z in range(min(sz, ez), max(sz, ez) + 1):
                    self._place_road_block((x, self.heights.height(road_x, z), z))
        if sz == ez:
            road_z = sz
            for z in range(road_z - half_width, road_z + half_width + 1):
                for x in range(min(sx, ex), max(sx, ex) + 1):
                    self._place_road_block((x, self.heights.height(x, road_z), z))

    def generate_building(
        self, x: int, y: int, z: int, model_name: str, chance: float
    ) -> None:
        """With probability ``chance``, voxelize an imported model at (x, y, z)."""
        if self.rng.randrange(100) > 100 * chance:
            return
        model = self.models.get(model_name)
        if model is None:
            return
        base = np.array([x, y, z], dtype=float)
        scale = self.options.model_magnification
        verts = model.obj.vertices
        for shape in model.obj.shapes:
            tri: list[np.ndarray] = [np.zeros(3)] * 3
            for n, index in enumerate(shape.indices):
                v = 3 * index.vertex_index
                tri[n % 3] = scale * np.array(verts[v : v + 3], dtype=float)
                if n % 3 != 2:
                    continue
                if index.texcoord_index < 0:
                    raise ValueError(f"model {model_name!r} has a face without texture coordinates")
                self._fill_triangle(base, tri, model.kinds[index.texcoord_index])

    def _fill_triangle(self, base: np.ndarray, tri: list[np.ndarray], kind: int) -> None:
        centroid = (tri[0] + tri[1] + tri[2]) / 3.0
        oa, ob, oc = (p - centroid for p in tri)
        longest = max(
            np.linalg.norm(tri[1] - tri[0]),
            np.linalg.norm(tri[2] - tri[0]),
            np.linalg.norm(tri[2] - tri[1]),
        )
        step = 1 / longest if longest > 0 else math.inf
        a = 0.0
        while a <= 1.0:
            b = 0.0
            while b <= 1.0 - a:
                w_pos = base + centroid + a * oa + b * ob + (1.0 - a - b) * oc
                chunk = self.generate_chunk(*(_chunk_coord(c) for c in w_pos), True)
                self.world.create_block(tuple(int(c) for c in w_pos), kind, False, chunk)
                b += step
            a += step

    def generate_town(self, x: int, z: int, max_r: int, gap: int) -> None:
        """Scatter buildings around (x, z) with a grid of roads between them."""
        if perlin_noise((x * 0.45 + 1000, z * 0.45 + 1000)) < 0.25:
            return
        max_d = max_r << 1
        offsets = range(-max_r, max_r + 1, gap)
        for i in offsets:
            for j in offsets:
                self.generate_building(
                    x + i,
                    self.heights.height(x + i, z + j),
                    z + j,
                    self.options.town_model,
                    math.cos(math.pi * (abs(i) + abs(j)) / max_d),
                )
        for i in range(-max_r, max_r, gap):
            road_x = x + i + (gap >> 1)
            self.generate_straight_road((road_x, z - max_r), (road_x, z + max_r), 1)
        for i in range(-max_r, max_r, gap):
            road_z = z + i + (gap >> 1)
            self.generate_straight_road((x - max_r, road_z), (x + max_r, road_z), 1)