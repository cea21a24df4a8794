"""glTF 2.0 buffer packing and GLB / glTF JSON serialization.

All vertex data for a conversion lives in one binary buffer.  Each vertex
stream becomes a 4-byte aligned bufferView with a float ``VEC3`` accessor;
position accessors carry ``min``/``max`` bounds.  Every mesh unit gets one
mesh with a single primitive and one node, and a single scene lists all
nodes in creation order.
"""

from __future__ import annotations

import base64
import copy
import json
import logging
import struct
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from csg2gltf.errors import NoGeometryError
from csg2gltf.mesh import MeshUnit

logger = logging.getLogger(__name__)

GENERATOR = 'csg2gltf'

GLB_MAGIC = 0x46546C67  # 'glTF'
GLB_VERSION = 2
CHUNK_JSON = 0x4E4F534A  # 'JSON'
CHUNK_BIN = 0x004E4942  # 'BIN\0'
_HEADER = struct.Struct('<III')
_CHUNK_HEADER = struct.Struct('<II')

COMPONENT_FLOAT = 5126
TYPE_VEC3 = 'VEC3'
TARGET_ARRAY_BUFFER = 34962

FORMAT_GLB = 'glb'
FORMAT_GLTF = 'gltf'
MIME_TYPES = {
    FORMAT_GLB: 'model/gltf-binary',
    FORMAT_GLTF: 'model/gltf+json',
}

DATA_URI_PREFIX = 'data:application/octet-stream;base64,'


def align(value: int, multiple: int = 4) -> int:
    remainder = value % multiple
    return value if remainder == 0 else value + multiple - remainder


def bounds(positions: np.ndarray) -> Tuple[List[float], List[float]]:
    """Per-axis ``(min, max)`` of a flat XYZ stream.

    Bounds are seeded with +/- infinity, so an empty stream yields the
    sentinels unchanged.
    """

    xyz = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    lo = xyz.min(axis=0, initial=np.inf)
    hi = xyz.max(axis=0, initial=-np.inf)
    return [float(v) for v in lo], [float(v) for v in hi]


class GltfBuilder:
    """Accumulates the binary buffer and JSON index lists for one pack."""

    def __init__(self):
        self.data = bytearray()
        self.buffer_views: List[Dict[str, Any]] = []
        self.accessors: List[Dict[str, Any]] = []
        self.meshes: List[Dict[str, Any]] = []
        self.nodes: List[Dict[str, Any]] = []

    def add_buffer_view(self, values: np.ndarray, target: Optional[int] = None) -> int:
        """Append ``values`` as a new aligned segment; return its bufferView index."""

        offset = align(len(self.data))
        self.data.extend(b'\x00' * (offset - len(self.data)))
        payload = np.ascontiguousarray(values, dtype='<f4').tobytes()
        self.data.extend(payload)
        view: Dict[str, Any] = {'buffer': 0, 'byteOffset': offset, 'byteLength': len(payload)}
        if target is not None:
            view['target'] = target
        self.buffer_views.append(view)
        return len(self.buffer_views) - 1

    def add_accessor(self, values: np.ndarray, *, with_bounds: bool = False) -> int:
        """Add a float ``VEC3`` accessor over a new bufferView holding ``values``."""

        view = self.add_buffer_view(values, TARGET_ARRAY_BUFFER)
        accessor: Dict[str, Any] = {
            'bufferView': view,
            'componentType': COMPONENT_FLOAT,
            'count': len(values) // 3,
            'type': TYPE_VEC3,
        }
        if with_bounds:
            accessor['min'], accessor['max'] = bounds(values)
        self.accessors.append(accessor)
        return len(self.accessors) - 1

    def add_unit(self, unit: MeshUnit) -> int:
        """Pack one mesh unit and add its mesh and node; return the node index."""

        attributes = {'POSITION': self.add_accessor(unit.positions, with_bounds=True)}
        if unit.normals is not None:
            attributes['NORMAL'] = self.add_accessor(unit.normals)
        if unit.colors is not None:
            attributes['COLOR_0'] = self.add_accessor(unit.colors)

        self.meshes.append({
            'name': unit.name,
            'primitives': [{'attributes': attributes, 'mode': int(unit.mode)}],
        })
        mesh = len(self.meshes) - 1
        self.nodes.append({'name': unit.name, 'mesh': mesh})
        return len(self.nodes) - 1

    def finish(self) -> Tuple[Dict[str, Any], bytes]:
        self.data.extend(b'\x00' * (align(len(self.data)) - len(self.data)))
        doc = {
            'asset': {'version': '2.0', 'generator': GENERATOR},
            'buffers': [{'byteLength': len(self.data)}],
            'bufferViews': self.buffer_views,
            'accessors': self.accessors,
            'meshes': self.meshes,
            'nodes': self.nodes,
            'scenes': [{'name': 'Scene', 'nodes': list(range(len(self.nodes)))}],
            'scene': 0,
        }
        return doc, bytes(self.data)


def pack(units: Sequence[MeshUnit]) -> Tuple[Dict[str, Any], bytes]:
    """Lay out ``units`` into a glTF scene dict and its binary buffer."""

    if not units:
        raise NoGeometryError('no mesh units to pack')
    builder = GltfBuilder()
    for unit in units:
        builder.add_unit(unit)
    doc, binary = builder.finish()
    logger.debug('packed %d mesh unit(s) into %d buffer bytes', len(units), len(binary))
    return doc, binary


def dumps(doc: Dict[str, Any], pretty: bool = False) -> str:
    if pretty:
        return json.dumps(doc, indent=2)
    return json.dumps(doc, separators=(',', ':'))


def build_glb(doc: Dict[str, Any], binary: bytes) -> bytes:
    """Return the binary container for ``doc`` and ``binary``."""

    json_chunk = dumps(doc).encode('utf-8')
    json_chunk += b' ' * (align(len(json_chunk)) - len(json_chunk))
    bin_chunk = bytes(binary)
    bin_chunk += b'\x00' * (align(len(bin_chunk)) - len(bin_chunk))

    total = _HEADER.size + _CHUNK_HEADER.size * 2 + len(json_chunk) + len(bin_chunk)
    return b''.join((
        _HEADER.pack(GLB_MAGIC, GLB_VERSION, total),
        _CHUNK_HEADER.pack(len(json_chunk), CHUNK_JSON),
        json_chunk,
        _CHUNK_HEADER.pack(len(bin_chunk), CHUNK_BIN),
        bin_chunk,
    ))


def read_glb(data: bytes) -> Tuple[Dict[str, Any], bytes]:
    """Parse a binary container back into ``(scene dict, binary chunk)``."""

    data = bytes(data)
    if len(data) < _HEADER.size + _CHUNK_HEADER.size:
        raise ValueError('invalid GLB: data too small')
    magic, version, total = _HEADER.unpack_from(data, 0)
    if magic != GLB_MAGIC:
        raise ValueError('invalid GLB: bad magic {:#010x}'.format(magic))
    if version != GLB_VERSION:
        raise ValueError('unsupported GLB version {}'.format(version))
    if total != len(data):
        raise ValueError('invalid GLB: header length {} != data length {}'.format(total, len(data)))

    offset = _HEADER.size
    doc = None
    binary = b''
    while offset < total:
        if offset + _CHUNK_HEADER.size > total:
            raise ValueError('invalid GLB: truncated chunk header')
        length, kind = _CHUNK_HEADER.unpack_from(data, offset)
        offset += _CHUNK_HEADER.size
        chunk = data[offset:offset + length]
        if len(chunk) != length:
            raise ValueError('invalid GLB: truncated chunk')
        offset += length
        if kind == CHUNK_JSON:
            doc = json.loads(chunk.decode('utf-8'))
        elif kind == CHUNK_BIN:
            binary = chunk
    if doc is None:
        raise ValueError('invalid GLB: missing JSON chunk')
    return doc, binary


@dataclass
class ConversionResult:
    """Encoded output of one conversion."""

    data: Union[bytes, str]
    format: str
    mime_type: str
    byte_length: int


def serialize(doc: Dict[str, Any], binary: bytes, fmt: str = FORMAT_GLB,
              pretty: bool = False) -> ConversionResult:
    """Encode a packed scene as GLB bytes or a self-contained glTF string."""

    if fmt == FORMAT_GLB:
        glb = build_glb(doc, binary)
        result = ConversionResult(glb, FORMAT_GLB, MIME_TYPES[FORMAT_GLB], len(glb))
    elif fmt == FORMAT_GLTF:
        standalone = copy.deepcopy(doc)
        standalone['buffers'][0]['uri'] = DATA_URI_PREFIX + base64.b64encode(binary).decode('ascii')
        text = dumps(standalone, pretty)
        result = ConversionResult(text, FORMAT_GLTF, MIME_TYPES[FORMAT_GLTF],
                                  len(text.encode('utf-8')))
    else:
        raise ValueError('unknown output format: {!r}'.format(fmt))
    logger.debug('serialized %s: %d bytes', result.format, result.byte_length)
    return result


def write_gltf(result: ConversionResult, path_or_file) -> None:
    """Write ``result`` to a filesystem path or an open stream.

    GLB output is written as bytes; glTF JSON as UTF-8 text.  Streams must
    match (binary for GLB, text for glTF).
    """

    binary = result.format == FORMAT_GLB
    close_when_done = False
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
    else:
        if binary:
            stream = open(path_or_file, 'wb')
        else:
            stream = open(path_or_file, 'w', encoding='utf-8')
        close_when_done = True

    try:
        stream.write(result.data)
    finally:
        if close_when_done:
            stream.close()


__all__ = [
    'GltfBuilder',
    'ConversionResult',
    'align',
    'bounds',
    'pack',
    'build_glb',
    'read_glb',
    'serialize',
    'write_gltf',
    'FORMAT_GLB',
    'FORMAT_GLTF',
    'MIME_TYPES',
]
