import pytest

from voxelworld.block import BlockKind
from voxelworld.terrain import (
    TERRAIN_SIZE,
    LevelSystem,
    TerrainHeights,
    cave_block,
    skyblock,
    terrain_base_height,
    vein_block,
)


def test_terrain_base_height_deterministic():
    values = [terrain_base_height(x, z) for x in range(0, 40, 7) for z in range(0, 40, 9)]
    again = [terrain_base_height(x, z) for x in range(0, 40, 7) for z in range(0, 40, 9)]
    assert values == again
    assert all(isinstance(v, int) and -200 < v < 300 for v in values)


def test_heights_start_at_zero():
    heights = TerrainHeights()
    assert heights.height(10, 10) == 0
    assert heights.heights.shape == (TERRAIN_SIZE, TERRAIN_SIZE)


def test_generate_stores_and_is_idempotent():
    heights = TerrainHeights()
    first = heights.generate(20, 30)
    assert heights.height(20, 30) == first
    assert heights.generate(20, 30) == first
    other = TerrainHeights()
    assert other.generate(20, 30) == first


def test_generate_keeps_existing_positive_height():
    heights = TerrainHeights()
    heights.heights[5, 6] = 7
    assert heights.generate(5, 6) == 7
    assert heights.height(5, 6) == 7


@pytest.mark.parametrize("x, z", [(-1, 0), (0, -1), (TERRAIN_SIZE, 0), (0, TERRAIN_SIZE)])
def test_out_of_range_columns_raise(x, z):
    heights = TerrainHeights()
    with pytest.raises(IndexError):
        heights.height(x, z)
    with pytest.raises(IndexError):
        heights.generate(x, z)


def test_cave_block_kinds():
    kinds = {cave_block(x, y, z) for x in range(6) for y in range(1, 6) for z in range(6)}
    assert kinds <= {BlockKind.AIR, BlockKind.NULL}
    assert cave_block(3, 4, 5) == cave_block(3, 4, 5)


def test_vein_block_kinds():
    kinds = {vein_block(x, y, z) for x in range(6) for y in range(1, 6) for z in range(6)}
    assert kinds <= {BlockKind.IRON_ORE, BlockKind.NULL}


def test_skyblock_kinds():
    kinds = {skyblock(x, y, z) for x in range(0, 40, 5) for y in range(80, 120, 5) for z in range(0, 40, 5)}
    assert kinds <= {BlockKind.DIRT, BlockKind.NULL}


def test_lattice_points_have_zero_noise():
    # Perlin noise vanishes on integer lattice points, so neither island nor ore appears there.
    assert skyblock(0, 0, 0) == BlockKind.NULL
    assert vein_block(0, 0, 0) == BlockKind.NULL


def test_sky_color_initial():
    level = LevelSystem()
    assert level.sky_color == [1.0, 1.0, 1.0, 0.0]
    color = level.update_sky_color(0.0)
    assert color[0] == pytest.approx(0.5, abs=1e-6)
    assert color[3] == 0.0


@pytest.mark.parametrize("seconds", [0.0, 1.5, 100.0, 12345.6])
def test_sky_color_invariants(seconds):
    level = LevelSystem()
    r, g, b, _ = level.update_sky_color(seconds)
    assert r + g == pytest.approx(1.15)
    assert g - b == pytest.approx(0.1)
    assert 0.0 <= r <= 1.0
    assert level.sky_color[0] == r


def test_sky_color_changes_over_time():
    level = LevelSystem()
    early = list(level.update_sky_color(0.0))
    late = list(level.update_sky_color(500.0))
    assert early[0] != pytest.approx(late[0])