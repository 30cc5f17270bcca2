import math

import numpy as np
import pytest

from coordinatediagrams.controller.mesh_builder import (
    ElementMeshBuilder, build_element_mesh, grid_triangles, iter_face_patches
)
from coordinatediagrams.errors import InvalidResolution
from coordinatediagrams.model.element import ElementSpec, Range
from coordinatediagrams.model.mappings import CoordinateSystem


def _cartesian_box(n_delta=(1.0, 1.0, 1.0)):
    return ElementSpec.volume(
        CoordinateSystem.CARTESIAN, Range(1.0, n_delta[0]), Range(3.0, n_delta[1]), Range(2.0, n_delta[2])
    )


def _cylindrical_volume():
    return ElementSpec.volume(
        CoordinateSystem.CYLINDRICAL, Range(2.0, 0.5), Range(math.radians(30), math.radians(30)), Range(1.0, 0.5)
    )


@pytest.mark.parametrize("n", [1, 4, 20])
def test_volume_counts(n):
    mesh = ElementMeshBuilder().build(_cylindrical_volume(), n)
    assert mesh.n_vertices == 6 * (n + 1) ** 2
    assert mesh.n_triangles == 12 * n ** 2
    assert mesh.normals.shape == mesh.vertices.shape


def test_default_resolutions():
    volume = ElementMeshBuilder().build(_cylindrical_volume())
    assert volume.n_vertices == 6 * 21 ** 2
    assert volume.n_triangles == 12 * 20 ** 2

    surface = ElementSpec.surface(
        CoordinateSystem.SPHERICAL, 0, 3.0, Range(math.radians(45), math.radians(45)), Range(0.5, 1.0)
    )
    mesh = build_element_mesh(surface)
    assert mesh.n_vertices == 61 ** 2
    assert mesh.n_triangles == 2 * 60 ** 2


def test_cartesian_box_corners():
    mesh = build_element_mesh(_cartesian_box(), 8)
    np.testing.assert_allclose(mesh.vertices.min(axis=0), [1.0, 3.0, 2.0])
    np.testing.assert_allclose(mesh.vertices.max(axis=0), [2.0, 4.0, 3.0])

    corners = {(x, y, z) for x in (1.0, 2.0) for y in (3.0, 4.0) for z in (2.0, 3.0)}
    present = {tuple(p) for p in np.round(mesh.vertices, 12)}
    assert corners <= present


def test_face_order_and_row_major_layout():
    n = 4
    block = (n + 1) ** 2
    mesh = build_element_mesh(_cartesian_box(), n)
    v = mesh.vertices

    # constant z first (low, high), then constant y, then constant x
    np.testing.assert_allclose(v[:block, 2], 2.0)
    np.testing.assert_allclose(v[block:2 * block, 2], 3.0)
    np.testing.assert_allclose(v[2 * block:3 * block, 1], 3.0)
    np.testing.assert_allclose(v[3 * block:4 * block, 1], 4.0)
    np.testing.assert_allclose(v[4 * block:5 * block, 0], 1.0)
    np.testing.assert_allclose(v[5 * block:, 0], 2.0)

    # columns follow the higher free axis
    np.testing.assert_allclose(v[1], [1.0, 3.25, 2.0])
    np.testing.assert_allclose(v[n + 1], [1.25, 3.0, 2.0])


def test_grid_triangle_winding():
    tris = grid_triangles(2, offset=10)
    assert tris.shape == (8, 3)
    np.testing.assert_array_equal(tris[0], [10, 11, 14])
    np.testing.assert_array_equal(tris[1], [10, 14, 13])


def test_flat_face_normals_are_unit_axis_vectors():
    n = 3
    block = (n + 1) ** 2
    mesh = build_element_mesh(_cartesian_box(), n)
    np.testing.assert_allclose(np.abs(mesh.normals[:block, 2]), 1.0)
    np.testing.assert_allclose(mesh.normals[:block, :2], 0.0, atol=1e-12)
    lengths = np.linalg.norm(mesh.normals, axis=1)
    np.testing.assert_allclose(lengths, 1.0)


def test_zero_delta_volume_matches_surface():
    n = 5
    flat = build_element_mesh(_cartesian_box((1.0, 1.0, 0.0)), n)
    assert flat.n_vertices == (n + 1) ** 2
    assert flat.n_triangles == 2 * n ** 2

    surface = ElementSpec.surface(CoordinateSystem.CARTESIAN, 2, 2.0, Range(1.0, 1.0), Range(3.0, 1.0))
    np.testing.assert_allclose(flat.vertices, build_element_mesh(surface, n).vertices)


def test_surface_with_zero_differential_is_empty():
    spec = ElementSpec.surface(CoordinateSystem.CYLINDRICAL, 0, 2.0, Range(0.5, 0.0), Range(1.0, 1.0))
    mesh = build_element_mesh(spec, 4)
    assert mesh.n_vertices == 0
    assert mesh.n_triangles == 0


def test_collapsed_face_at_origin_is_tolerated():
    # the inner face of a spherical shell starting at r = 0 collapses to a point
    n = 4
    block = (n + 1) ** 2
    spec = ElementSpec.volume(CoordinateSystem.SPHERICAL, Range(0.0, 1.0), Range(0.5, 0.5), Range(0.0, 1.0))
    mesh = build_element_mesh(spec, n)
    assert mesh.n_vertices == 6 * block

    inner = slice(4 * block, 5 * block)
    np.testing.assert_allclose(mesh.vertices[inner], 0.0)
    np.testing.assert_array_equal(mesh.normals[inner], 0.0)


def test_pole_surface_builds():
    spec = ElementSpec.surface(CoordinateSystem.SPHERICAL, 0, 2.0, Range(0.0, 0.5), Range(0.0, 1.0))
    mesh = build_element_mesh(spec, 6)
    assert mesh.n_vertices == 49
    assert mesh.n_triangles == 72


def test_surface_patches():
    spec = ElementSpec.surface(CoordinateSystem.CYLINDRICAL, 2, 1.0, Range(1.5, 1.0), Range(0.5, 1.0))
    patches = list(iter_face_patches(spec))
    assert len(patches) == 1
    assert patches[0].fixed_axis == 2
    assert (patches[0].row_axis, patches[0].col_axis) == (0, 1)


@pytest.mark.parametrize("bad", [0, -3, 2.5])
def test_invalid_resolution(bad):
    with pytest.raises(InvalidResolution):
        ElementMeshBuilder(bad)


def test_dispose_releases_buffers():
    mesh = build_element_mesh(_cartesian_box(), 2)
    mesh.dispose()
    assert mesh.disposed
    assert mesh.n_vertices == 0
    mesh.dispose()
    assert mesh.disposed
