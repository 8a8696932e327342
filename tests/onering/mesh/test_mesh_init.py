"""Unit tests for Mesh construction, validation and incidence queries."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from onering.incidence import IncidenceQuery
from onering.mesh import Mesh


def test_mesh_initialization(simple_triangle_mesh):
    mesh = simple_triangle_mesh

    assert mesh.verts.shape == (3, 3), "Expected 3 vertices"
    assert mesh.n_faces == 1, "Expected 1 face"
    assert mesh.faces == [(0, 1, 2)]

    # Check point-to-face mapping
    assert len(mesh.point_to_faces) == 3
    for faces in mesh.point_to_faces.values():
        assert faces == [0]


def test_mesh_satisfies_incidence_protocol(simple_triangle_mesh):
    assert isinstance(simple_triangle_mesh, IncidenceQuery)


def test_mixed_face_sizes():
    verts = np.array(
        [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0], [2, 0, 0]], dtype=float
    )
    m = Mesh(verts=verts, faces=[[0, 1, 2, 3], [1, 4, 2], [3, 0]])
    assert m.face_points(0) == (0, 1, 2, 3)
    assert m.point_faces(0) == [0, 2]
    assert m.point_faces(1) == [0, 1]
    assert m.point_faces(4) == [1]


def test_repeated_point_in_loop_listed_once():
    verts = np.zeros((3, 3))
    m = Mesh(verts=verts, faces=[[0, 1, 0, 2]])
    assert m.point_faces(0) == [0]


def test_point_faces_unknown_point_is_empty(simple_triangle_mesh):
    assert simple_triangle_mesh.point_faces(99) == []
    # Lookups must not grow the incidence map.
    assert 99 not in simple_triangle_mesh.point_to_faces


def test_point_faces_returns_copy(simple_triangle_mesh):
    faces = simple_triangle_mesh.point_faces(0)
    faces.append(5)
    assert simple_triangle_mesh.point_faces(0) == [0]


def test_no_input_raises():
    with pytest.raises(ValueError):
        Mesh()


def test_filename_with_verts_raises(tmp_path):
    with pytest.raises(ValueError):
        Mesh(filename=str(tmp_path / "unused.obj"), verts=np.zeros((3, 3)))
    with pytest.raises(ValueError):
        Mesh(filename=str(tmp_path / "unused.obj"), faces=[[0, 1, 2]])


def test_bad_vert_shape_raises():
    with pytest.raises(ValueError):
        Mesh(verts=np.zeros((4, 2)), faces=[[0, 1, 2]])


def test_out_of_range_face_raises():
    with pytest.raises(ValueError):
        Mesh(verts=np.zeros((3, 3)), faces=[[0, 1, 3]])
    with pytest.raises(ValueError):
        Mesh(verts=np.zeros((3, 3)), faces=[[0, -1, 2]])


def test_short_face_raises():
    with pytest.raises(ValueError):
        Mesh(verts=np.zeros((3, 3)), faces=[[0]])


def test_point_attributes(simple_triangle_mesh):
    m = simple_triangle_mesh
    assert not m.has_point_attrib("N")
    values = np.arange(9, dtype=float).reshape(3, 3)
    m.set_point_attrib("N", values)
    values[0, 0] = 100.0  # stored copy is independent
    assert m.has_point_attrib("N")
    assert_allclose(m.point_attrib("N", 0), [0.0, 1.0, 2.0])
    m.remove_point_attrib("N")
    assert not m.has_point_attrib("N")
    m.remove_point_attrib("N")


def test_query_results_do_not_alias_storage(simple_triangle_mesh):
    m = simple_triangle_mesh
    m.set_point_attrib("N", np.tile([0.0, 0.0, 1.0], (3, 1)))
    pos = m.point_position(1)
    pos += 10.0
    n = m.point_attrib("N", 1)
    n *= 0.0
    assert_allclose(m.point_position(1), m.verts[1])
    assert_allclose(m.verts[1], pos - 10.0)
    assert_allclose(m.point_attrib("N", 1), [0.0, 0.0, 1.0])


def test_point_attribute_bad_shape(simple_triangle_mesh):
    with pytest.raises(ValueError):
        simple_triangle_mesh.set_point_attrib("N", np.zeros((2, 3)))


def test_point_attribs_constructor_argument():
    m = Mesh(
        verts=np.eye(3),
        faces=[[0, 1, 2]],
        point_attribs={"N": np.ones((3, 3))},
    )
    assert_allclose(m.point_attrib("N", 2), [1.0, 1.0, 1.0])


def test_face_normal_triangle(simple_triangle_mesh):
    assert_allclose(simple_triangle_mesh.face_normal(0, 0.5, 0.5), [0.0, 0.0, 1.0])


def test_face_normal_planar_quad(quad_grid):
    for f in range(quad_grid.n_faces):
        assert_allclose(quad_grid.face_normal(f, 0.5, 0.5), [0.0, 0.0, 1.0])


def test_face_normal_bilinear_quad_depends_on_uv():
    # Corner 2 lifted: the patch is twisted, normals differ across it.
    verts = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 1], [0, 1, 0]], dtype=float)
    m = Mesh(verts=verts, faces=[[0, 1, 2, 3]])
    n00 = m.face_normal(0, 0.0, 0.0)
    n11 = m.face_normal(0, 1.0, 1.0)
    assert_allclose(n00, [0.0, 0.0, 1.0], atol=1e-12)
    assert np.linalg.norm(n11) == pytest.approx(1.0)
    assert not np.allclose(n00, n11)


def test_face_normal_pentagon_newell():
    angles = np.linspace(0.0, 2.0 * np.pi, 5, endpoint=False)
    verts = np.column_stack([np.cos(angles), np.sin(angles), np.zeros(5)])
    m = Mesh(verts=verts, faces=[[0, 1, 2, 3, 4]])
    assert_allclose(m.face_normal(0, 0.5, 0.5), [0.0, 0.0, 1.0], atol=1e-12)


def test_face_normal_degenerate_is_zero():
    verts = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype=float)
    m = Mesh(verts=verts, faces=[[0, 1, 2], [0, 1]])
    assert_allclose(m.face_normal(0, 0.5, 0.5), np.zeros(3))
    assert_allclose(m.face_normal(1, 0.5, 0.5), np.zeros(3))


def test_nearest_point(quad_grid):
    idx, dist = quad_grid.nearest_point([1.1, 0.9, 0.0])
    assert idx == 4
    assert dist == pytest.approx(np.hypot(0.1, 0.1))


def test_neighbor_shortcuts_delegate(octahedron):
    assert octahedron.one_ring(4) == [0, 2, 1, 3, 0]
    assert sorted(octahedron.connected_points(4)) == [0, 1, 2, 3]
    assert_allclose(
        octahedron.point_normal(4), [0.0, 0.0, 1.0 / np.sqrt(3.0)], atol=1e-12
    )
