import math

import numpy as np
import pytest

from coordinatediagrams.controller.edge_curves import EdgeCurveExtractor, catmull_rom, extract_edge_curves
from coordinatediagrams.controller.mesh_builder import build_element_mesh
from coordinatediagrams.model.element import ElementSpec, Range
from coordinatediagrams.model.mappings import CoordinateSystem


def _spherical_volume():
    return ElementSpec.volume(
        CoordinateSystem.SPHERICAL, Range(2.0, 0.5), Range(math.radians(45), math.radians(30)),
        Range(math.radians(30), math.radians(30))
    )


def test_volume_has_twelve_curves():
    curves = extract_edge_curves(_spherical_volume())
    assert len(curves) == 12
    assert all(c.shape == (32, 3) for c in curves)


def test_surface_has_four_curves():
    spec = ElementSpec.surface(CoordinateSystem.CYLINDRICAL, 0, 2.0, Range(0.5, 1.0), Range(1.0, 1.0))
    curves = EdgeCurveExtractor(n_points=20).extract(spec)
    assert len(curves) == 4
    assert all(c.shape == (20, 3) for c in curves)


@pytest.mark.parametrize("spec", [
    _spherical_volume(),
    ElementSpec.volume(CoordinateSystem.CYLINDRICAL, Range(2.0, 0.5), Range(0.5, 0.5), Range(1.0, 0.5)),
    ElementSpec.surface(CoordinateSystem.SPHERICAL, 0, 3.0, Range(0.8, 0.8), Range(0.5, 1.0)),
])
def test_endpoints_are_mesh_corners(spec):
    mesh = build_element_mesh(spec, 6)
    ends = extract_edge_curves(spec).endpoints()
    distances = np.linalg.norm(ends[:, None, :] - mesh.vertices[None, :, :], axis=2).min(axis=1)
    assert np.all(distances < 1e-9)


def test_curve_order():
    spec = ElementSpec.volume(CoordinateSystem.CARTESIAN, Range(1.0, 1.0), Range(3.0, 1.0), Range(2.0, 1.0))
    edges = EdgeCurveExtractor().edges(spec)
    assert [swept for swept, _ in edges] == [0] * 4 + [1] * 4 + [2] * 4
    assert [fixed for _, fixed in edges[:4]] == [
        {1: 3.0, 2: 2.0}, {1: 3.0, 2: 3.0}, {1: 4.0, 2: 2.0}, {1: 4.0, 2: 3.0}
    ]


def test_zero_delta_volume_yields_surface_outline():
    spec = ElementSpec.volume(CoordinateSystem.CARTESIAN, Range(1.0, 1.0), Range(3.0, 1.0), Range(2.0, 0.0))
    assert len(extract_edge_curves(spec)) == 4


def test_straight_edges_stay_straight():
    spec = ElementSpec.volume(CoordinateSystem.CARTESIAN, Range(1.0, 1.0), Range(3.0, 1.0), Range(2.0, 1.0))
    for curve in extract_edge_curves(spec):
        direction = curve[-1] - curve[0]
        offsets = np.cross(curve - curve[0], direction)
        np.testing.assert_allclose(offsets, 0.0, atol=1e-9)


def test_arc_stays_on_circle():
    angles = np.linspace(0.0, math.radians(60), 21)
    arc = np.c_[2.0 * np.cos(angles), 2.0 * np.sin(angles), np.zeros_like(angles)]
    out = catmull_rom(arc, 32)
    np.testing.assert_allclose(np.linalg.norm(out[:, :2], axis=1), 2.0, atol=1e-2)
    np.testing.assert_allclose(out[0], arc[0])
    np.testing.assert_allclose(out[-1], arc[-1])


def test_catmull_rom_two_points():
    out = catmull_rom(np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]), 5)
    np.testing.assert_allclose(out[:, 0], np.linspace(0.0, 1.0, 5), atol=1e-12)


def test_catmull_rom_needs_two_points():
    with pytest.raises(ValueError):
        catmull_rom(np.zeros((1, 3)), 10)


def test_disposed_curves_cannot_be_iterated():
    curves = extract_edge_curves(_spherical_volume())
    curves.dispose()
    assert curves.disposed
    assert len(curves) == 0
    with pytest.raises(RuntimeError):
        list(curves)
