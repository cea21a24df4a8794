"""Encode boundary-representation solids and 2D shapes as glTF 2.0.

Typical use::

    from csg2gltf import convert_geometry

    result = convert_geometry(solid, format='gltf', mesh_name='part')
"""

from csg2gltf.color import resolve as resolve_color
from csg2gltf.convert import ConversionResult, convert_geometry, convert_plan, convert_plan_async
from csg2gltf.errors import (
    EmptyTriangulationError,
    GltfExportError,
    NoGeometryError,
    UnsupportedGeometryError,
)
from csg2gltf.mesh import MeshUnit, Topology, triangulate
from csg2gltf.options import ConversionOptions, load_options

__version__ = '0.1.0'

__all__ = [
    'ConversionOptions',
    'ConversionResult',
    'EmptyTriangulationError',
    'GltfExportError',
    'MeshUnit',
    'NoGeometryError',
    'Topology',
    'UnsupportedGeometryError',
    'convert_geometry',
    'convert_plan',
    'convert_plan_async',
    'load_options',
    'resolve_color',
    'triangulate',
]
