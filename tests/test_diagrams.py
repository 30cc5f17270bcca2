import math

import pytest

from coordinatediagrams.errors import UnknownDiagram
from coordinatediagrams.model.diagrams import DiagramKind, create_diagram, list_keys
from coordinatediagrams.model.element import ElementKind, Range
from coordinatediagrams.model.mappings import CoordinateSystem


def test_catalog():
    assert set(list_keys()) == {
        "cartesian-point", "cartesian-volume",
        "cylindrical-point", "cylindrical-volume", "cylindrical-surface-r", "cylindrical-surface-z",
        "spherical-point", "spherical-volume", "spherical-surface-r",
    }


def test_unknown_diagram():
    with pytest.raises(UnknownDiagram):
        create_diagram("polar-point")


@pytest.mark.parametrize("key", list_keys())
def test_every_diagram_builds_a_store(key):
    diagram = create_diagram(key)
    store = diagram.create_store()
    for name in diagram.position_names:
        assert name in store.values()
    spec = diagram.element_spec(store)
    assert (spec is None) == (diagram.KIND == DiagramKind.POINT)


def test_cartesian_volume_spec():
    diagram = create_diagram("cartesian-volume")
    spec = diagram.element_spec(diagram.create_store())
    assert spec.kind == ElementKind.VOLUME
    assert spec.system == CoordinateSystem.CARTESIAN
    assert spec.ranges == (Range(1.0, 1.0), Range(3.0, 1.0), Range(2.0, 1.0))


def test_cylindrical_surface_z_spec():
    diagram = create_diagram("cylindrical-surface-z")
    spec = diagram.element_spec(diagram.create_store())
    assert spec.kind == ElementKind.SURFACE
    assert spec.fixed_axis == 2
    assert spec.ranges[2] == Range(1.0, 0.0)
    assert spec.ranges[0] == Range(1.5, 1.0)
    assert spec.ranges[1].start == pytest.approx(math.radians(30.0))
    assert spec.ranges[1].delta == pytest.approx(math.radians(60.0))


def test_position_in_engine_units():
    diagram = create_diagram("spherical-point")
    r, theta, phi = diagram.position(diagram.create_store())
    assert r == 4.0
    assert theta == pytest.approx(math.radians(50.0))
    assert phi == pytest.approx(math.radians(50.0))


def test_only_spherical_elements_are_constrained():
    assert create_diagram("spherical-volume").constraints()
    assert create_diagram("spherical-surface-r").constraints()
    assert not create_diagram("spherical-point").constraints()
    assert not create_diagram("cylindrical-volume").constraints()
