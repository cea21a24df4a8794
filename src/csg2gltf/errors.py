"""Exceptions raised while converting geometry to glTF."""


class GltfExportError(ValueError):
    """Base class for conversion failures."""


class UnsupportedGeometryError(GltfExportError):
    """Input is neither a polygon-bearing nor a side-bearing geometry."""


class EmptyTriangulationError(GltfExportError):
    """A geometry object yielded no triangles or line segments."""


class NoGeometryError(GltfExportError):
    """Nothing was produced to convert."""


__all__ = [
    'GltfExportError',
    'UnsupportedGeometryError',
    'EmptyTriangulationError',
    'NoGeometryError',
]
