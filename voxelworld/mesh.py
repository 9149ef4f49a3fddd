"""Vertices, meshes, render objects and a small Wavefront OBJ loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

LIGHT_SCALE = 1 / 16.0

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
PathLike = Union[str, Path]


@dataclass
class Vertex:
    """A mesh vertex."""

    position: Vec3 = (0.0, 0.0, 0.0)
    normal: Vec3 = (0.0, 0.0, 0.0)
    color: Vec3 = (0.0, 0.0, 0.0)
    uv: Vec2 = (0.0, 0.0)


@dataclass(frozen=True)
class ObjIndex:
    """Zero-based indices of one face corner; -1 where the file gives none."""

    vertex_index: int
    normal_index: int = -1
    texcoord_index: int = -1


@dataclass
class ObjShape:
    """A named group of triangulated faces."""

    name: str = ""
    indices: list[ObjIndex] = field(default_factory=list)
    num_face_vertices: list[int] = field(default_factory=list)


@dataclass
class ObjModel:
    """Flat attribute arrays and shapes of an OBJ file."""

    vertices: list[float] = field(default_factory=list)
    normals: list[float] = field(default_factory=list)
    texcoords: list[float] = field(default_factory=list)
    shapes: list[ObjShape] = field(default_factory=list)


def _resolve(token: str, count: int, label: str, line_no: int) -> int:
    if not token:
        return -1
    value = int(token)
    if value == 0:
        raise ValueError(f"line {line_no}: {label} index 0 is not valid")
    index = value - 1 if value > 0 else count + value
    if not 0 <= index < count:
        raise ValueError(f"line {line_no}: {label} index {value} out of range")
    return index


def load_obj(path: PathLike) -> ObjModel:
    """Read an OBJ file, triangulating polygons as fans."""
    model = ObjModel()
    shape = ObjShape()

    with open(path, encoding="utf-8") as handle:
        for line_no, raw in enumerate(handle, start=1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            keyword, *args = line.split()
            try:
                if keyword == "v":
                    model.vertices.extend(float(a) for a in args[:3])
                    if len(args) < 3:
                        raise ValueError("vertex needs three coordinates")
                elif keyword == "vn":
                    if len(args) < 3:
                        raise ValueError("normal needs three coordinates")
                    model.normals.extend(float(a) for a in args[:3])
                elif keyword == "vt":
                    if not args:
                        raise ValueError("texture coordinate needs a value")
                    u = float(args[0])
                    v = float(args[1]) if len(args) > 1 else 0.0
                    model.texcoords.extend((u, v))
                elif keyword in ("o", "g"):
                    if shape.indices:
                        model.shapes.append(shape)
                    shape = ObjShape(name=" ".join(args))
                elif keyword == "f":
                    corners = [
                        _parse_corner(token, model, line_no) for token in args
                    ]
                    if len(corners) < 3:
                        raise ValueError("face needs at least three vertices")
                    for k in range(1, len(corners) - 1):
                        shape.indices.extend((corners[0], corners[k], corners[k + 1]))
                        shape.num_face_vertices.append(3)
            except ValueError as exc:
                if str(exc).startswith("line "):
                    raise
                raise ValueError(f"line {line_no}: {exc}") from exc

    if shape.indices:
        model.shapes.append(shape)
    return model


def _parse_corner(token: str, model: ObjModel, line_no: int) -> ObjIndex:
    parts = token.split("/")
    vertex = parts[0]
    texcoord = parts[1] if len(parts) > 1 else ""
    normal = parts[2] if len(parts) > 2 else ""
    if not vertex:
        raise ValueError(f"line {line_no}: face corner without vertex index")
    return ObjIndex(
        vertex_index=_resolve(vertex, len(model.vertices) // 3, "vertex", line_no),
        normal_index=_resolve(normal, len(model.normals) // 3, "normal", line_no),
        texcoord_index=_resolve(texcoord, len(model.texcoords) // 2, "texcoord", line_no),
    )


@dataclass
class Mesh:
    """A list of triangle vertices."""

    vertices: list[Vertex] = field(default_factory=list)

    def load_from_obj(self, path: PathLike) -> None:
        """Append the triangles of an OBJ file; every corner needs a normal and a uv."""
        model = load_obj(path)
        for shape in model.shapes:
            for idx in shape.indices:
                if idx.normal_index < 0 or idx.texcoord_index < 0:
                    raise ValueError(f"{path}: face corner lacks a normal or texture coordinate")
                v = 3 * idx.vertex_index
                n = 3 * idx.normal_index
                t = 2 * idx.texcoord_index
                normal = tuple(model.normals[n : n + 3])
                self.vertices.append(
                    Vertex(
                        position=tuple(model.vertices[v : v + 3]),
                        normal=normal,
                        color=normal,
                        uv=(model.texcoords[t], 1 - model.texcoords[t + 1]),
                    )
                )


_QUAD_POSITIONS: tuple[Vec3, ...] = (
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0),
    (1.0, 1.0, 0.0),
    (1.0, 1.0, 0.0),
    (0.0, 0.0, 0.0),
    (1.0, 0.0, 0.0),
)


def tile_mesh(ux: int, vy: int, texture_size: int) -> Mesh:
    """Unit square of two triangles textured with atlas tile (ux, vy)."""
    d = 1 / texture_size
    return Mesh(
        [
            Vertex(position=pos, uv=((1 - pos[0] + ux) * d, (1 - pos[1] + vy) * d))
            for pos in _QUAD_POSITIONS
        ]
    )


@dataclass(eq=False)
class RenderObject:
    """A drawable face: mesh, material, model transform, light and normal."""

    mesh: Optional[Mesh] = None
    material: Optional[Any] = None
    model_transform: np.ndarray = field(default_factory=lambda: np.identity(4))
    object_light: tuple[float, float, float, float] = (0.0, 0.0, 0.0, LIGHT_SCALE)
    normal: Vec3 = (0.0, 0.0, 0.0)