# voxelworld

A library for building and simulating a procedurally generated block world.
It works out what the world contains and which block faces should be drawn.
It does not draw anything itself.

## Modules

- `voxelworld.noise`: hash-based noise. It has 2D and 3D Perlin noise
  (`perlin_noise`, `perlin_noise3d`), Worley cell noise (`worley_noise`),
  fractal Brownian motion (`fbm`) and the helpers they are built from.
- `voxelworld.spline`: quartic shaping curves for terrain (`poly4`,
  `continent`, `erosion`, `peak_valley`).
- `voxelworld.block`:
  - `BlockKind`, the block kinds. Each value is a tile index in a 16×16
    texture atlas.
  - `Block`, which has six faces in front, right, up, down, left, back order.
    Spider webs, roses and yellow flowers are transparent.
  - `ColorBlockMap`, which maps ARGB colours to block kinds. An unknown colour
    gets either a random kind or clay.
  - `Player`, which records the block kind the player holds.
- `voxelworld.mesh`:
  - `Vertex`, `Mesh` and `RenderObject`.
  - `tile_mesh`, which builds a unit square textured with one atlas tile.
  - A small OBJ reader. `load_obj` triangulates polygons as fans.
    `Mesh.load_from_obj` turns an OBJ file into triangle vertices.
- `voxelworld.world`: a `World` of `Chunk`s, each 8×8×8 blocks, keyed by chunk
  coordinates.
  - `World.create_block` keeps an existing solid block unless asked to replace
    it.
  - `World.is_air_block` treats positions without a chunk as solid.
- `voxelworld.terrain`:
  - `terrain_base_height` gives the height of the stone base.
  - `TerrainHeights` computes surface heights column by column and caches them.
  - `cave_block`, `vein_block` and `skyblock` are 3D noise carvers.
  - `LevelSystem.update_sky_color` cycles the sky colour over the elapsed
    time.
- `voxelworld.generator`: `WorldGenerator` fills chunks in layers: stone,
  dirt, grass, then the enabled carvers, then bedrock at y = 0. It can also:
  - import a building model with `import_model`. This needs an OBJ file and a
    256×1 PNG palette whose colours map to block kinds.
  - voxelize that model with `generate_building`.
  - lay roads along an axis with `generate_straight_road`.
  - scatter a town of buildings and roads with `generate_town`.

  `GenerationOptions` switches each feature on or off. By default only caves
  are generated.
- `voxelworld.camera`: `Camera` is a first-person camera with angles in
  degrees. It supports:
  - walking or flying with `move_by` and a `MoveDirection`.
  - `jump` and `stay`.
  - mouse look with `cursor_rotation`, with pitch clamped to ±89°.
  - `zoom`.
  - `view_projection`, which returns view and projection matrices as numpy
    arrays.
  - `point_at`, which finds the block the camera aims at within five steps.
- `voxelworld.physics`: `PhysicsSystem.simulate` moves the camera's
  `PhysicsEntity`. It applies semi-implicit gravity and stops movement along
  any axis that runs into a solid block. When the player enters another chunk
  it calls an optional callback.
- `voxelworld.render`: `RenderSystem` keeps `renderables`, a flat list of
  `RenderObject`s with one entry per visible face. It works as follows:
  - Faces that touch a solid neighbour are left out.
  - Breaking a block uncovers the neighbour faces behind it.
  - Chunks are generated and rendered within a radius of the player.
  - When too many chunks are rendered, far ones are dropped. When there are
    too many faces, the whole list is rebuilt.
  - A `Material` holds the pipeline handles you register with
    `create_material`.
- `voxelworld.controller`:
  - `InputTracker` turns the set of currently pressed keys into press and
    release edges.
  - `Controller.update` applies one frame of input:
    - Tab toggles cursor lock.
    - Holding the left mouse button breaks blocks.
    - A right click places the held block.
    - Space jumps.
    - W, A, S and D move.
    - G toggles physics.
  - `on_cursor` and `on_scroll` handle mouse look and zoom while the cursor is
    locked.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Generate one chunk and look at a block:

```python
from voxelworld.block import BlockKind
from voxelworld.generator import WorldGenerator

generator = WorldGenerator()
generator.generate_chunk(0, 0, 0)
block = generator.world.get_block((3, 0, 3))
assert block.kind == BlockKind.BEDROCK
```

Build the visible faces around the player and run one frame of input and
physics:

```python
from voxelworld.controller import Controller, Key
from voxelworld.render import RenderSystem

render = RenderSystem()
render.create_material("textured", pipeline=None, layout=None)
render.init_scene((5.0, 60.0, 5.0))  # generates and renders nearby chunks

controller = Controller(render=render)
controller.update({Key.W})
controller.physics.simulate(1.0)
print(len(render.renderables), controller.camera.entity.pos)
```

## What it does not do

There is no window, no GPU code and no command to start a game. The package
does not read the keyboard or mouse itself. You pass the set of pressed keys
and the cursor positions to `Controller`. It does not draw the faces it
collects either. You take `RenderSystem.renderables` and the matrices from
`Camera.view_projection` and draw them with your own graphics layer. The
`pipeline`, `pipeline_layout` and `texture_set` fields of `Material` are
opaque values that it only stores.