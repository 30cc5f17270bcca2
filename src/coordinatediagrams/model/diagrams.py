"""
Diagram Catalog
===============
Declares every diagram the application can show: its coordinate system,
what it draws (a point, a volume element or a surface element) and the
numeric controls it exposes.

Diagrams register themselves with `@register_diagram` under their KEY; the
main window lists them with `list_keys()` and instantiates them with
`create_diagram()`.
"""
from __future__ import annotations

from enum import StrEnum
from typing import ClassVar, Optional

from coordinatediagrams.errors import UnknownDiagram
from coordinatediagrams.model.element import ElementKind, ElementSpec, Range
from coordinatediagrams.model.mappings import CoordinateSystem
from coordinatediagrams.model.parameters import DomainConstraint, ParameterSpec, ParameterStore


class DiagramKind(StrEnum):
    POINT = "point"
    VOLUME = "volume"
    SURFACE = "surface"


POSITION_NAMES: dict[CoordinateSystem, tuple[str, str, str]] = {
    CoordinateSystem.CARTESIAN: ("x", "y", "z"),
    CoordinateSystem.CYLINDRICAL: ("r", "theta", "z"),
    CoordinateSystem.SPHERICAL: ("r", "theta", "phi"),
}


def differential_name(name: str) -> str:
    return f"d{name}"


# --- Reusable control declarations (bounds as used across all diagrams) ---

def _length(name: str, default: float, minimum: float = -5.0, maximum: float = 5.0) -> ParameterSpec:
    return ParameterSpec(name, name, minimum, maximum, 0.1, default)


def _angle(name: str, label: str, default: float, minimum: float, maximum: float) -> ParameterSpec:
    return ParameterSpec(name, label, minimum, maximum, 1.0, default, unit="°", is_angle=True)


def _radius(default: float) -> ParameterSpec:
    return ParameterSpec("r", "r", 0.1, 5.0, 0.1, default)


class DiagramDefinition:
    """
    Base class for diagram declarations.

    Subclasses set the class attributes and implement `parameter_specs`.
    """
    KEY: ClassVar[str] = "base"
    TITLE: ClassVar[str] = "Diagram"
    SYSTEM: ClassVar[CoordinateSystem] = CoordinateSystem.CARTESIAN
    KIND: ClassVar[DiagramKind] = DiagramKind.POINT
    FIXED_AXIS: ClassVar[Optional[int]] = None

    def parameter_specs(self) -> list[ParameterSpec]:
        raise NotImplementedError("`parameter_specs` must be implemented in subclass.")

    def constraints(self) -> list[DomainConstraint]:
        if self.SYSTEM != CoordinateSystem.SPHERICAL or self.KIND == DiagramKind.POINT:
            return []
        # the polar angle lives in [0°, 180°]
        return [DomainConstraint("theta", "dtheta", 180.0)]

    def create_store(self) -> ParameterStore:
        return ParameterStore(self.parameter_specs(), self.constraints())

    @property
    def position_names(self) -> tuple[str, str, str]:
        return POSITION_NAMES[self.SYSTEM]

    def position(self, store: ParameterStore) -> tuple[float, float, float]:
        """Position coordinates in engine units (radians for angles)."""
        values = store.engine_values()
        u, v, w = (values[name] for name in self.position_names)
        return u, v, w

    def element_spec(self, store: ParameterStore) -> Optional[ElementSpec]:
        """
        The element described by the current parameter values.

        Returns None for point diagrams.
        """
        if self.KIND == DiagramKind.POINT:
            return None

        values = store.engine_values()
        ranges = []
        for axis, name in enumerate(self.position_names):
            if axis == self.FIXED_AXIS:
                ranges.append(Range.fixed(values[name]))
            else:
                ranges.append(Range(values[name], values[differential_name(name)]))

        kind = ElementKind.SURFACE if self.KIND == DiagramKind.SURFACE else ElementKind.VOLUME
        return ElementSpec(system=self.SYSTEM, ranges=tuple(ranges), kind=kind,  # type: ignore[arg-type]
                           fixed_axis=self.FIXED_AXIS)


_REGISTRY: dict[str, type[DiagramDefinition]] = {}


def register_diagram(cls: type[DiagramDefinition]) -> type[DiagramDefinition]:
    """Class decorator to register a diagram by its KEY."""
    key = getattr(cls, "KEY", None)
    if not key or key == DiagramDefinition.KEY:
        raise ValueError(f"{cls.__name__} must define KEY")
    _REGISTRY[key] = cls
    return cls


def create_diagram(key: str) -> DiagramDefinition:
    cls = _REGISTRY.get(key)
    if not cls:
        raise UnknownDiagram(f"No diagram registered for key '{key}'")
    return cls()


def list_keys() -> list[str]:
    return list(_REGISTRY.keys())


# ------------------------------------------------------------------------------
# Cartesian
# ------------------------------------------------------------------------------

@register_diagram
class CartesianPoint(DiagramDefinition):
    KEY = "cartesian-point"
    TITLE = "Cartesian coordinates: point M"
    SYSTEM = CoordinateSystem.CARTESIAN
    KIND = DiagramKind.POINT

    def parameter_specs(self) -> list[ParameterSpec]:
        return [_length("x", 1.0), _length("y", 2.0), _length("z", 2.0)]


@register_diagram
class CartesianVolume(DiagramDefinition):
    KEY = "cartesian-volume"
    TITLE = "Cartesian coordinates: volume element"
    SYSTEM = CoordinateSystem.CARTESIAN
    KIND = DiagramKind.VOLUME

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _length("x", 1.0), _length("y", 3.0), _length("z", 2.0),
            _length("dx", 1.0, 0.1, 5.0), _length("dy", 1.0, 0.1, 5.0), _length("dz", 1.0, 0.1, 5.0),
        ]


# ------------------------------------------------------------------------------
# Cylindrical
# ------------------------------------------------------------------------------

@register_diagram
class CylindricalPoint(DiagramDefinition):
    KEY = "cylindrical-point"
    TITLE = "Cylindrical coordinates: point M"
    SYSTEM = CoordinateSystem.CYLINDRICAL
    KIND = DiagramKind.POINT

    def parameter_specs(self) -> list[ParameterSpec]:
        return [_radius(3.0), _angle("theta", "θ", 60.0, 0.0, 360.0), _length("z", 2.0)]


@register_diagram
class CylindricalVolume(DiagramDefinition):
    KEY = "cylindrical-volume"
    TITLE = "Cylindrical coordinates: volume element"
    SYSTEM = CoordinateSystem.CYLINDRICAL
    KIND = DiagramKind.VOLUME

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(2.0), _angle("theta", "θ", 30.0, 0.0, 360.0), _length("z", 1.0),
            _length("dr", 0.5, 0.1, 2.0), _angle("dtheta", "dθ", 30.0, 1.0, 360.0), _length("dz", 0.5, 0.1, 2.0),
        ]


@register_diagram
class CylindricalSurfaceR(DiagramDefinition):
    KEY = "cylindrical-surface-r"
    TITLE = "Cylindrical coordinates: surface element at constant r"
    SYSTEM = CoordinateSystem.CYLINDRICAL
    KIND = DiagramKind.SURFACE
    FIXED_AXIS = 0

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(2.0), _angle("theta", "θ", 30.0, 0.0, 360.0), _length("z", 1.0),
            _angle("dtheta", "dθ", 60.0, 1.0, 360.0), _length("dz", 1.0, 0.1, 3.0),
        ]


@register_diagram
class CylindricalSurfaceZ(DiagramDefinition):
    KEY = "cylindrical-surface-z"
    TITLE = "Cylindrical coordinates: surface element at constant z"
    SYSTEM = CoordinateSystem.CYLINDRICAL
    KIND = DiagramKind.SURFACE
    FIXED_AXIS = 2

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(1.5), _angle("theta", "θ", 30.0, 0.0, 360.0), _length("z", 1.0),
            _length("dr", 1.0, 0.1, 3.0), _angle("dtheta", "dθ", 60.0, 1.0, 360.0),
        ]


# ------------------------------------------------------------------------------
# Spherical
# ------------------------------------------------------------------------------

@register_diagram
class SphericalPoint(DiagramDefinition):
    KEY = "spherical-point"
    TITLE = "Spherical coordinates: point M"
    SYSTEM = CoordinateSystem.SPHERICAL
    KIND = DiagramKind.POINT

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(4.0),
            ParameterSpec("theta", "θ", 0.0, 180.0, 0.1, 50.0, unit="°", is_angle=True),
            ParameterSpec("phi", "φ", 0.0, 360.0, 0.1, 50.0, unit="°", is_angle=True),
        ]


@register_diagram
class SphericalVolume(DiagramDefinition):
    KEY = "spherical-volume"
    TITLE = "Spherical coordinates: volume element"
    SYSTEM = CoordinateSystem.SPHERICAL
    KIND = DiagramKind.VOLUME

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(2.0), _angle("theta", "θ", 45.0, 0.0, 180.0), _angle("phi", "φ", 30.0, 0.0, 360.0),
            _length("dr", 0.5, 0.1, 2.0), _angle("dtheta", "dθ", 30.0, 1.0, 180.0),
            _angle("dphi", "dφ", 30.0, 1.0, 360.0),
        ]


@register_diagram
class SphericalSurfaceR(DiagramDefinition):
    KEY = "spherical-surface-r"
    TITLE = "Spherical coordinates: surface element at constant r"
    SYSTEM = CoordinateSystem.SPHERICAL
    KIND = DiagramKind.SURFACE
    FIXED_AXIS = 0

    def parameter_specs(self) -> list[ParameterSpec]:
        return [
            _radius(3.0), _angle("theta", "θ", 45.0, 0.0, 180.0), _angle("phi", "φ", 30.0, 0.0, 360.0),
            _angle("dtheta", "dθ", 45.0, 1.0, 180.0), _angle("dphi", "dφ", 60.0, 1.0, 360.0),
        ]
