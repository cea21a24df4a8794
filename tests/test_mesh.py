import numpy as np
import pytest

from csg2gltf.errors import EmptyTriangulationError, UnsupportedGeometryError
from csg2gltf.mesh import MeshUnit, Topology, triangulate
from csg2gltf.xform import Translation


def _cube(size=1.0, offset=(0.0, 0.0, 0.0), **extra):
    """Axis aligned cube as six outward-facing quads."""
    ox, oy, oz = offset
    s = size
    corners = [(ox + x * s, oy + y * s, oz + z * s)
               for z in (0, 1) for y in (0, 1) for x in (0, 1)]
    faces = [
        (0, 2, 3, 1),  # -z
        (4, 5, 7, 6),  # +z
        (0, 1, 5, 4),  # -y
        (2, 6, 7, 3),  # +y
        (0, 4, 6, 2),  # -x
        (1, 3, 7, 5),  # +x
    ]
    polygons = [{'vertices': [{'pos': list(corners[i])} for i in face]} for face in faces]
    geom = {'polygons': polygons}
    geom.update(extra)
    return geom


def test_cube_scenario():
    units = triangulate(_cube(), 'cube')
    assert len(units) == 1
    unit = units[0]
    assert isinstance(unit, MeshUnit)
    assert unit.name == 'cube'
    assert unit.mode == Topology.TRIANGLES
    assert unit.vertex_count == 36
    assert unit.positions.dtype == np.float32
    assert len(unit.positions) == 36 * 3
    assert len(unit.positions) % 9 == 0
    assert len(unit.normals) == len(unit.positions)
    assert np.all(unit.colors == 1.0)
    assert len(unit.colors) == len(unit.positions)


def test_cube_normals_are_unit_and_outward():
    unit = triangulate(_cube(), 'cube')[0]
    normals = unit.normals.reshape(-1, 3)
    assert np.allclose(np.linalg.norm(normals, axis=1), 1.0)
    centers = unit.positions.reshape(-1, 3, 3).mean(axis=1)
    tri_normals = normals[::3]
    # every face normal points away from the cube center
    assert np.all(np.einsum('ij,ij->i', centers - 0.5, tri_normals) > 0)


def test_fan_order():
    quad = {'polygons': [[[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]]]}
    unit = triangulate(quad, 'q')[0]
    tris = unit.positions.reshape(-1, 3, 3).tolist()
    assert tris == [
        [[0, 0, 0], [1, 0, 0], [1, 1, 0]],
        [[0, 0, 0], [1, 1, 0], [0, 1, 0]],
    ]
    assert unit.normals.reshape(-1, 3).tolist() == [[0, 0, 1]] * 6


def test_flat_normals_not_averaged():
    # two triangles of a bent quad keep their own normals
    bent = {'polygons': [[[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 1]]]}
    normals = triangulate(bent, 'b')[0].normals.reshape(-1, 3)
    assert np.allclose(normals[0:3], normals[0])
    assert np.allclose(normals[3:6], normals[3])
    assert not np.allclose(normals[0], normals[3])


def test_degenerate_triangle_gets_default_normal():
    line = {'polygons': [[[0, 0, 0], [1, 1, 1], [2, 2, 2]]]}
    unit = triangulate(line, 'd')[0]
    assert unit.normals.reshape(-1, 3).tolist() == [[0, 0, 1]] * 3


def test_transform_applied_before_normals():
    tri = {'polygons': [[[0, 0, 0], [1, 0, 0], [0, 1, 0]]],
           'transforms': Translation([10, 0, 0]).to_list()}
    unit = triangulate(tri, 't')[0]
    assert unit.positions.reshape(-1, 3)[:, 0].tolist() == [10, 11, 10]
    # mirror in x flips the winding and therefore the normal
    mirror = {'polygons': [[[0, 0, 0], [1, 0, 0], [0, 1, 0]]],
              'transforms': [-1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1]}
    assert triangulate(mirror, 'm')[0].normals[:3].tolist() == [0, 0, -1]


def test_vertex_colors_override_shape_color():
    tri = {
        'color': [0, 0, 255],
        'polygons': [{'vertices': [
            {'pos': [0, 0, 0], 'color': '#ff0000'},
            {'pos': [1, 0, 0]},
            {'pos': [0, 1, 0], 'color': 'garbage'},
        ]}],
    }
    colors = triangulate(tri, 'c')[0].colors.reshape(-1, 3).tolist()
    assert colors == [[1, 0, 0], [0, 0, 1], [0, 0, 1]]


def test_short_polygons_skipped():
    geom = {'polygons': [[[0, 0, 0], [1, 0, 0]], [], [[0, 0, 0], [1, 0, 0], [0, 1, 0]]]}
    unit = triangulate(geom, 's')[0]
    assert unit.vertex_count == 3


@pytest.mark.parametrize('geom', [
    {'polygons': []},
    {'polygons': [[[0, 0, 0], [1, 0, 0]], [[1, 1, 1]]]},
    {'sides': []},
    {'sides': [[[0, 0]], []]},
])
def test_empty_triangulation(geom):
    with pytest.raises(EmptyTriangulationError):
        triangulate(geom, 'e')


def test_side_uses_first_and_last_point_only():
    shape = {'sides': [[[0, 0], [1, 0], [1, 1], [0, 1]]], 'color': '#00ff00'}
    unit = triangulate(shape, 'outline')[0]
    assert unit.mode == Topology.LINES
    assert unit.normals is None
    assert unit.vertex_count == 2
    assert unit.positions.tolist() == [0, 0, 0, 0, 1, 0]
    assert unit.colors.tolist() == [0, 1, 0, 0, 1, 0]


def test_shape_segments_and_transform():
    square = {
        'sides': [[[0, 0], [1, 0]], [[1, 0], [1, 1]], [[1, 1], [0, 1]], [[0, 1], [0, 0]]],
        'transforms': Translation([0, 0, 5]).to_list(),
    }
    unit = triangulate(square, 'sq')[0]
    assert len(unit.positions) % 6 == 0
    assert unit.vertex_count == 8
    assert set(unit.positions.reshape(-1, 3)[:, 2].tolist()) == {5.0}
    assert np.all(unit.colors == 1.0)


def test_group_names():
    units = triangulate([_cube(), _cube(offset=(3, 0, 0))], 'name')
    assert [u.name for u in units] == ['name_0', 'name_1']


def test_nested_group_names():
    shape = {'sides': [[[0, 0], [1, 0]]]}
    units = triangulate([_cube(), [shape, _cube()]], 'm')
    assert [u.name for u in units] == ['m_0', 'm_1_0', 'm_1_1']
    assert [u.mode for u in units] == [Topology.TRIANGLES, Topology.LINES, Topology.TRIANGLES]


def test_empty_group():
    assert triangulate([], 'x') == []


def test_unsupported_geometry():
    with pytest.raises(UnsupportedGeometryError):
        triangulate({'volume': 1000.0}, 'x')
