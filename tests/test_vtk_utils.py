import numpy as np
import pytest

from coordinatediagrams.controller.edge_curves import extract_edge_curves
from coordinatediagrams.controller.mesh_builder import build_element_mesh
from coordinatediagrams.model.element import EdgeCurveSet, ElementMesh, ElementSpec, Range
from coordinatediagrams.model.mappings import CoordinateSystem
from coordinatediagrams.view.widgets.vtk_utils import VtkUtils


def test_mesh_to_polydata():
    spec = ElementSpec.volume(CoordinateSystem.CARTESIAN, Range(0.0, 1.0), Range(0.0, 1.0), Range(0.0, 1.0))
    mesh = build_element_mesh(spec, 2)
    pd = VtkUtils.mesh_to_polydata(mesh)
    assert pd.n_points == mesh.n_vertices
    assert pd.n_cells == mesh.n_triangles
    np.testing.assert_allclose(pd.point_data.active_normals, mesh.normals)


def test_empty_and_disposed_meshes():
    assert VtkUtils.mesh_to_polydata(ElementMesh.empty()).n_points == 0
    mesh = ElementMesh.empty()
    mesh.dispose()
    with pytest.raises(ValueError):
        VtkUtils.mesh_to_polydata(mesh)


def test_polylines_pack_into_one_dataset():
    lines = [np.zeros((4, 3)), np.ones((3, 3)), np.zeros((1, 3))]
    pd = VtkUtils.polylines_to_polydata(lines)
    assert pd.n_points == 7
    assert pd.n_cells == 2


def test_curves_to_polydata():
    curves = EdgeCurveSet([np.linspace([0, 0, 0], [1, 0, 0], 5), np.linspace([0, 0, 0], [0, 1, 0], 5)])
    pd = VtkUtils().curves_to_polydata(curves)
    assert pd.n_cells == 2


def test_degenerate_arrow_is_empty():
    assert VtkUtils.arrow([0, 0, 0], [0, 0, 0], 1.0).n_points == 0
    assert VtkUtils.arrow([0, 0, 0], [1, 0, 0], 1.0).n_points > 0


def test_release():
    pd = VtkUtils.polyline_to_polydata(np.zeros((3, 3)))
    VtkUtils.release(pd)
    assert pd.n_points == 0


def test_outline_has_no_vertex_cells():
    spec = ElementSpec.volume(CoordinateSystem.CARTESIAN, Range(0.0, 1.0), Range(0.0, 1.0), Range(0.0, 1.0))
    pd = VtkUtils().curves_to_polydata(extract_edge_curves(spec))
    assert pd.n_lines == 12
    assert pd.n_verts == 0

    arc = VtkUtils.polyline_to_polydata(np.linspace([0, 0, 0], [1, 1, 0], 8))
    assert arc.n_lines == 1
    assert arc.n_verts == 0
