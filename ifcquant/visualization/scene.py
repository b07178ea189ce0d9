"""Scene model — placeholder meshes, materials, camera for 3D preview.

Shapes and colors depend only on the entity type, so :class:`ShapeFactory`
builds each one once and hands out the same immutable object afterwards.
Placement comes from the level heuristic, not from file geometry.
"""

from __future__ import annotations

import json
import math
import random
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from ifcquant.models.model import BuildingModel

# Box sizes in metres (x, y, z), z up
TYPE_BOXES: dict[str, tuple[float, float, float]] = {
    "IFCWALL": (0.2, 4.0, 3.0),
    "IFCDOOR": (0.1, 0.8, 2.1),
    "IFCWINDOW": (0.05, 1.2, 1.5),
    "IFCSPACE": (4.0, 4.0, 0.1),
    "IFCBEAM": (4.0, 0.3, 0.3),
}

# Cylinders: (radius, height)
TYPE_CYLINDERS: dict[str, tuple[float, float]] = {
    "IFCCOLUMN": (0.2, 3.0),
}

DEFAULT_BOX = (1.0, 1.0, 1.0)

TYPE_COLORS: dict[str, str] = {
    "IFCWALL": "#8B4513",       # saddlebrown
    "IFCDOOR": "#654321",       # dark brown
    "IFCWINDOW": "#87CEEB",     # skyblue
    "IFCSPACE": "#90EE90",      # lightgreen
    "IFCCOLUMN": "#808080",     # gray
    "IFCBEAM": "#8B4513",       # saddlebrown
}

DEFAULT_COLOR = "#888888"

TRANSPARENT_TYPES = {"IFCWINDOW": 0.6}

# Deterministic layout: grid spacing (m) and columns per level
_GRID_SPACING = 5.0
_GRID_COLUMNS = 8

# Random layout spans [-_SCATTER / 2, _SCATTER / 2) on x and y
_SCATTER = 20.0


@dataclass(frozen=True)
class GeometryData:
    """Shared vertex/face buffers for one entity type."""

    vertices: tuple[tuple[float, float, float], ...]
    faces: tuple[tuple[int, int, int], ...]


@dataclass(frozen=True)
class MaterialData:
    color: str = DEFAULT_COLOR
    opacity: float = 1.0

    @property
    def transparent(self) -> bool:
        return self.opacity < 1.0


@lru_cache(maxsize=None)
def _geometry_for(ifc_type: str) -> GeometryData:
    if ifc_type in TYPE_CYLINDERS:
        radius, height = TYPE_CYLINDERS[ifc_type]
        return _build_cylinder(radius, height)
    return _build_box(TYPE_BOXES.get(ifc_type, DEFAULT_BOX))


@lru_cache(maxsize=None)
def _material_for(ifc_type: str) -> MaterialData:
    return MaterialData(
        color=TYPE_COLORS.get(ifc_type, DEFAULT_COLOR),
        opacity=TRANSPARENT_TYPES.get(ifc_type, 1.0),
    )


class ShapeFactory:
    """Geometry/material lookup keyed by entity type.

    Results are cached per type at module level, so every factory hands out
    the same objects.
    """

    def geometry(self, ifc_type: str) -> GeometryData:
        return _geometry_for(ifc_type)

    def material(self, ifc_type: str) -> MaterialData:
        return _material_for(ifc_type)


_DEFAULT_FACTORY = ShapeFactory()


@dataclass
class MeshData:
    """One placed element: shared geometry plus its own transform."""

    element_id: str
    name: str
    geometry: GeometryData
    material: MaterialData
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: float = 0.0
    """Rotation about the z axis, radians."""

    @property
    def transform(self) -> list[float]:
        """Row-major 4x4 matrix: rotate about z, then translate."""
        c = math.cos(self.rotation)
        s = math.sin(self.rotation)
        x, y, z = self.position
        return [
            c, -s, 0, x,
            s, c, 0, y,
            0, 0, 1, z,
            0, 0, 0, 1,
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_id": self.element_id,
            "name": self.name,
            "vertices": [list(v) for v in self.geometry.vertices],
            "faces": [list(f) for f in self.geometry.faces],
            "color": self.material.color,
            "opacity": self.material.opacity,
            "transform": self.transform,
        }


@dataclass
class Camera:
    """Camera settings for the scene."""

    position: tuple[float, float, float] = (10.0, 10.0, 10.0)
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: tuple[float, float, float] = (0.0, 0.0, 1.0)
    fov: float = 45.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position),
            "target": list(self.target),
            "up": list(self.up),
            "fov": self.fov,
        }


@dataclass
class Scene:
    """3D scene containing meshes and camera configuration."""

    meshes: list[MeshData] = field(default_factory=list)
    camera: Camera = field(default_factory=Camera)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meshes": [m.to_dict() for m in self.meshes],
            "camera": self.camera.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def build_scene(
    model: BuildingModel,
    rng: random.Random | None = None,
    factory: ShapeFactory | None = None,
) -> Scene:
    """Place one mesh per element of *model*.

    Height comes from the element's level elevation.  With *rng* the x/y
    position and rotation are scattered; without it elements sit on a grid
    per level so the layout is reproducible.
    """
    factory = factory or _DEFAULT_FACTORY
    elevations = {lvl.name: lvl.elevation / 1000.0 for lvl in model.levels}
    slots: dict[str | None, int] = {}

    meshes: list[MeshData] = []
    for element in model.elements:
        z = elevations.get(element.level or "", 0.0)
        if rng is not None:
            x = (rng.random() - 0.5) * _SCATTER
            y = (rng.random() - 0.5) * _SCATTER
            rotation = rng.random() * 2 * math.pi
        else:
            slot = slots.get(element.level, 0)
            slots[element.level] = slot + 1
            x = (slot % _GRID_COLUMNS) * _GRID_SPACING
            y = (slot // _GRID_COLUMNS) * _GRID_SPACING
            rotation = 0.0

        meshes.append(MeshData(
            element_id=element.id,
            name=element.name,
            geometry=factory.geometry(element.type),
            material=factory.material(element.type),
            position=(round(x, 4), round(y, 4), z),
            rotation=rotation,
        ))

    return Scene(meshes=meshes, camera=_compute_isometric_camera(meshes))


# Box corner i has x = i & 1, y = (i >> 1) & 1, z = (i >> 2) & 1 (0 = min, 1 = max).
# Each side is a quad wound counter-clockwise seen from outside.
_BOX_SIDES = (
    (0, 2, 3, 1),  # bottom
    (4, 5, 7, 6),  # top
    (0, 1, 5, 4),  # -y
    (2, 6, 7, 3),  # +y
    (0, 4, 6, 2),  # -x
    (1, 3, 7, 5),  # +x
)


def _build_box(size: tuple[float, float, float]) -> GeometryData:
    """Box of *size* centred on the z axis, standing on z = 0."""
    sx, sy, sz = size
    vertices = tuple(
        (x, y, z)
        for z in (0.0, sz)
        for y in (-sy / 2, sy / 2)
        for x in (-sx / 2, sx / 2)
    )
    faces = tuple(
        tri
        for a, b, c, d in _BOX_SIDES
        for tri in ((a, b, c), (a, c, d))
    )
    return GeometryData(vertices=vertices, faces=faces)


def _build_cylinder(radius: float, height: float, segments: int = 16) -> GeometryData:
    """Cylinder around the z axis from 0 to *height*."""
    vertices: list[tuple[float, float, float]] = []
    faces: list[tuple[int, int, int]] = []

    for z in (0.0, height):
        for i in range(segments):
            angle = 2 * math.pi * i / segments
            vertices.append((round(radius * math.cos(angle), 6), round(radius * math.sin(angle), 6), z))

    bottom_center = len(vertices)
    vertices.append((0.0, 0.0, 0.0))
    top_center = len(vertices)
    vertices.append((0.0, 0.0, height))

    for i in range(segments):
        next_i = (i + 1) % segments
        # Side
        faces.append((i, next_i, next_i + segments))
        faces.append((i, next_i + segments, i + segments))
        # Caps
        faces.append((bottom_center, next_i, i))
        faces.append((top_center, i + segments, next_i + segments))

    return GeometryData(vertices=tuple(vertices), faces=tuple(faces))


def _compute_isometric_camera(meshes: list[MeshData]) -> Camera:
    """Compute an isometric camera position framing all mesh origins."""
    if not meshes:
        return Camera()

    xs = [m.position[0] for m in meshes]
    ys = [m.position[1] for m in meshes]
    zs = [m.position[2] for m in meshes]

    cx = (min(xs) + max(xs)) / 2
    cy = (min(ys) + max(ys)) / 2
    cz = (min(zs) + max(zs)) / 2

    dx = max(xs) - min(xs)
    dy = max(ys) - min(ys)
    dz = max(zs) - min(zs)
    diagonal = math.sqrt(dx * dx + dy * dy + dz * dz)
    distance = max(diagonal * 1.5, 10.0)

    offset = distance / math.sqrt(3)

    return Camera(
        position=(
            round(cx + offset, 4),
            round(cy + offset, 4),
            round(cz + offset, 4),
        ),
        target=(round(cx, 4), round(cy, 4), round(cz, 4)),
    )
