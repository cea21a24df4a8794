"""Typed view of the geometry objects handed over by a modeling engine.

Modeling engines hand back loosely shaped objects: 3D solids carry a list of
``polygons`` (each with ``vertices``), 2D shapes carry a list of ``sides``
(each an ordered point list), and either may carry a ``color`` and a flat
16-entry ``transforms`` matrix.  Results may also be nested lists of such
objects.  :func:`ingest` resolves that shape once into one of three node
types so the rest of the pipeline never has to sniff structure:

* :class:`SolidGeometry` for polygon-bearing objects,
* :class:`ShapeGeometry` for side-bearing objects,
* :class:`GeometryGroup` for lists of either.

Both mappings (e.g. decoded JSON) and plain attribute-bearing objects are
accepted.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

from csg2gltf.errors import UnsupportedGeometryError
from csg2gltf.geometry_utils import Vec3
from csg2gltf.xform import Matrix, transform_from

ORIGIN: Vec3 = (0.0, 0.0, 0.0)

_MISSING = object()


def _field(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _is_sequence(value: Any) -> bool:
    if value is None or isinstance(value, (str, bytes, Mapping)):
        return False
    return hasattr(value, '__len__') and hasattr(value, '__getitem__')


def _coord(value: Any) -> float:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0.0
    return num if math.isfinite(num) else 0.0


def coords3(value: Any) -> Optional[Vec3]:
    """Return the first three coordinates of ``value``, or ``None``."""

    if not _is_sequence(value) or len(value) < 3:
        return None
    return (_coord(value[0]), _coord(value[1]), _coord(value[2]))


def point_from(value: Any) -> Vec3:
    """Coerce a side point (2 or 3 coordinates) into XYZ, padding with 0."""

    if not _is_sequence(value):
        return ORIGIN
    comps = [_coord(value[i]) if i < len(value) else 0.0 for i in range(3)]
    return (comps[0], comps[1], comps[2])


@dataclass(frozen=True)
class Vertex:
    position: Vec3
    color: Any = None


def vertex_from(raw: Any) -> Vertex:
    """Build a :class:`Vertex` from a bare triple or a ``pos``/``position`` record."""

    if raw is None:
        return Vertex(ORIGIN)
    position = coords3(raw)
    if position is not None:
        return Vertex(position)
    for name in ('pos', 'position'):
        position = coords3(_field(raw, name))
        if position is not None:
            break
    else:
        position = ORIGIN
    return Vertex(position, _field(raw, 'color'))


@dataclass
class SolidGeometry:
    polygons: List[List[Vertex]] = field(default_factory=list)
    color: Any = None
    transform: Matrix = field(default_factory=Matrix)


@dataclass
class ShapeGeometry:
    sides: List[List[Vec3]] = field(default_factory=list)
    color: Any = None
    transform: Matrix = field(default_factory=Matrix)


@dataclass
class GeometryGroup:
    children: List['GeometryNode'] = field(default_factory=list)


GeometryNode = Union[SolidGeometry, ShapeGeometry, GeometryGroup]


def _polygon_vertices(polygon: Any) -> List[Vertex]:
    verts = _field(polygon, 'vertices', _MISSING) if not _is_sequence(polygon) else polygon
    if verts is _MISSING or not _is_sequence(verts):
        return []
    return [vertex_from(v) for v in verts]


def _side_points(side: Any) -> List[Vec3]:
    if not _is_sequence(side):
        return []
    return [point_from(p) for p in side]


def _transform_field(obj: Any) -> Matrix:
    value = _field(obj, 'transforms')
    if value is None:
        value = _field(obj, 'transform')
    return transform_from(value)


def ingest(obj: Any) -> GeometryNode:
    """Resolve ``obj`` into a geometry node.

    Raises :class:`UnsupportedGeometryError` when ``obj`` is neither a
    polygon-bearing object, a side-bearing object, nor a list of them.
    """

    if isinstance(obj, (SolidGeometry, ShapeGeometry, GeometryGroup)):
        return obj
    if isinstance(obj, (list, tuple)):
        return GeometryGroup([ingest(child) for child in obj])
    if obj is None or isinstance(obj, (str, bytes, int, float, bool)):
        raise UnsupportedGeometryError(
            'evaluation did not return a supported geometry '
            '(expected geom2 or geom3), got {!r}'.format(obj))

    polygons = _field(obj, 'polygons')
    if polygons is not None:
        if not _is_sequence(polygons):
            raise UnsupportedGeometryError('polygons must be a list, got {!r}'.format(type(polygons)))
        return SolidGeometry(
            polygons=[_polygon_vertices(p) for p in polygons],
            color=_field(obj, 'color'),
            transform=_transform_field(obj),
        )

    sides = _field(obj, 'sides')
    if sides is not None:
        if not _is_sequence(sides):
            raise UnsupportedGeometryError('sides must be a list, got {!r}'.format(type(sides)))
        return ShapeGeometry(
            sides=[_side_points(s) for s in sides],
            color=_field(obj, 'color'),
            transform=_transform_field(obj),
        )

    raise UnsupportedGeometryError(
        'evaluation did not return a supported geometry '
        '(expected geom2 or geom3), got {}'.format(type(obj).__name__))


__all__ = [
    'Vertex',
    'SolidGeometry',
    'ShapeGeometry',
    'GeometryGroup',
    'GeometryNode',
    'coords3',
    'point_from',
    'vertex_from',
    'ingest',
]
