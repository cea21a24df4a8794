"""Flatten geometry nodes into unshared triangle and line vertex streams."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional

import numpy as np

from csg2gltf.color import resolve_or_default
from csg2gltf.errors import EmptyTriangulationError, UnsupportedGeometryError
from csg2gltf.geometry import (
    GeometryGroup,
    GeometryNode,
    ShapeGeometry,
    SolidGeometry,
    ingest,
)
from csg2gltf.geometry_utils import triangle_normal

logger = logging.getLogger(__name__)


class Topology(IntEnum):
    """glTF primitive modes used by the encoder."""

    LINES = 1
    TRIANGLES = 4


@dataclass
class MeshUnit:
    """One drawable piece with flat, unshared ``float32`` vertex streams.

    ``positions`` holds three floats per vertex in draw order.  ``normals``
    and ``colors``, when present, hold one XYZ/RGB triple per vertex.
    """

    name: str
    positions: np.ndarray
    normals: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None
    mode: Topology = Topology.TRIANGLES

    @property
    def vertex_count(self) -> int:
        return len(self.positions) // 3


def _stream(values: List[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float32)


def triangulate_solid(solid: SolidGeometry, name: str) -> MeshUnit:
    """Fan-triangulate every polygon of ``solid`` with flat normals."""

    if not solid.polygons:
        raise EmptyTriangulationError('expected polygon data in geometry {!r}'.format(name))

    positions: List[float] = []
    normals: List[float] = []
    colors: List[float] = []
    default_color = resolve_or_default(solid.color)
    xform = solid.transform

    skipped = 0
    for polygon in solid.polygons:
        if len(polygon) < 3:
            skipped += 1
            continue
        verts = [xform.apply(v.position) for v in polygon]
        vcolors = [resolve_or_default(v.color, default=default_color) for v in polygon]

        a = verts[0]
        for i in range(1, len(verts) - 1):
            b = verts[i]
            c = verts[i + 1]
            normal = triangle_normal(a, b, c)
            positions.extend((*a, *b, *c))
            normals.extend(normal * 3)
            colors.extend((*vcolors[0], *vcolors[i], *vcolors[i + 1]))

    if not positions:
        raise EmptyTriangulationError(
            'unable to build triangle mesh for {!r}: no polygon has 3 or more vertices'.format(name))
    if skipped:
        logger.debug('%s: skipped %d polygon(s) with fewer than 3 vertices', name, skipped)

    return MeshUnit(name, _stream(positions), _stream(normals), _stream(colors),
                    Topology.TRIANGLES)


def segment_shape(shape: ShapeGeometry, name: str) -> MeshUnit:
    """Turn each side of ``shape`` into one line segment, first point to last."""

    if not shape.sides:
        raise EmptyTriangulationError('expected side data in 2D geometry {!r}'.format(name))

    positions: List[float] = []
    colors: List[float] = []
    color = resolve_or_default(shape.color)
    xform = shape.transform

    for side in shape.sides:
        if len(side) < 2:
            continue
        start = xform.apply(side[0])
        end = xform.apply(side[-1])
        positions.extend((*start, *end))
        colors.extend(color * 2)

    if not positions:
        raise EmptyTriangulationError(
            'unable to build line geometry for {!r}: no side has 2 or more points'.format(name))

    return MeshUnit(name, _stream(positions), None, _stream(colors), Topology.LINES)


def _walk(node: GeometryNode, name: str, out: List[MeshUnit]) -> None:
    if isinstance(node, GeometryGroup):
        for index, child in enumerate(node.children):
            _walk(child, '{}_{}'.format(name, index), out)
    elif isinstance(node, SolidGeometry):
        out.append(triangulate_solid(node, name))
    elif isinstance(node, ShapeGeometry):
        out.append(segment_shape(node, name))
    else:
        raise UnsupportedGeometryError('unsupported geometry node: {!r}'.format(type(node)))


def triangulate(geometry: Any, base_name: str) -> List[MeshUnit]:
    """Return the mesh units for ``geometry``.

    ``geometry`` is a raw geometry object, a (nested) list of them, or an
    already ingested node.  Group members are named ``base_name`` suffixed
    with their zero-based index, recursively (``base_0``, ``base_1_0``, ...).
    """

    units: List[MeshUnit] = []
    _walk(ingest(geometry), base_name, units)
    logger.debug('triangulated %r into %d mesh unit(s)', base_name, len(units))
    return units


__all__ = ['Topology', 'MeshUnit', 'triangulate', 'triangulate_solid', 'segment_shape']
