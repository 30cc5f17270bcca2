"""
Point and Normal Annotations
============================
Geometry of the decorations drawn next to the elements: the point M with its
local basis vectors, dashed projection lines, the θ angle arc of cylindrical
diagrams, and the normal arrow at the centre of a surface element.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import numpy as np

from coordinatediagrams import config
from coordinatediagrams.model.element import ElementKind, ElementSpec
from coordinatediagrams.model.mappings import BASIS_LABELS, CoordinateSystem, basis_vectors, to_cartesian_points

if TYPE_CHECKING:
    import numpy.typing as npt

ARC_SEGMENTS: int = 32
LABEL_OFFSET: float = 1.2


@dataclass
class Arrow:
    origin: npt.NDArray[np.float64]
    direction: npt.NDArray[np.float64]
    length: float
    label: str = ""


@dataclass
class Label:
    text: str
    position: npt.NDArray[np.float64]


@dataclass
class PointAnnotations:
    """Everything drawn for a point diagram, in Cartesian coordinates."""
    position: npt.NDArray[np.float64]
    arrows: list[Arrow] = field(default_factory=list)
    projection_lines: list[npt.NDArray[np.float64]] = field(default_factory=list)
    arcs: list[npt.NDArray[np.float64]] = field(default_factory=list)
    labels: list[Label] = field(default_factory=list)


def _segment(a, b) -> npt.NDArray[np.float64]:
    return np.array([a, b], dtype=np.float64)


def angle_arc(angle: float, radius: float, n_segments: int = ARC_SEGMENTS) -> npt.NDArray[np.float64]:
    """Arc in the xy-plane from the +x axis to `angle` (radians), (n + 1, 3)."""
    t = np.linspace(0.0, angle, n_segments + 1)
    return np.c_[radius * np.cos(t), radius * np.sin(t), np.zeros_like(t)]


def build_point_annotations(system: CoordinateSystem, u: float, v: float, w: float) -> PointAnnotations:
    """
    Annotations of point M at coordinates (u, v, w) of `system`.

    Args:
        system: Coordinate system of the diagram.
        u, v, w: Coordinates in engine units (radians for angles).
    """
    system = CoordinateSystem(system)
    position = to_cartesian_points(system, u, v, w).reshape(3)
    x, y, z = position
    basis = basis_vectors(system, u, v, w)

    annotations = PointAnnotations(position=position)
    annotations.labels.append(Label("M", position + np.array([0.0, -0.3, 0.4])))

    for vector, name in zip(basis, BASIS_LABELS[system]):
        annotations.arrows.append(Arrow(position.copy(), vector, config.BASIS_ARROW_LENGTH, name))
        annotations.labels.append(Label(name, position + LABEL_OFFSET * vector))

    match system:
        case CoordinateSystem.CARTESIAN:
            annotations.projection_lines += [
                _segment((x, y, 0.0), (x, 0.0, 0.0)),
                _segment((x, y, 0.0), (0.0, y, 0.0)),
                _segment((x, y, z), (x, y, 0.0)),
                _segment((x, y, z), (0.0, 0.0, z)),
            ]
        case CoordinateSystem.CYLINDRICAL:
            annotations.projection_lines += [
                _segment((x, y, 0.0), (0.0, 0.0, 0.0)),
                _segment((x, y, z), (x, y, 0.0)),
            ]
            radius = min(1.0, u * 0.5)
            annotations.arcs.append(angle_arc(v, radius))
            annotations.labels.append(Label("r", np.array([x / 2 + 0.2, y / 2 + 0.2, -0.3])))
            annotations.labels.append(Label("z", np.array([x + 0.3, y + 0.3, z / 2])))
            annotations.labels.append(
                Label("θ", np.array([1.4 * radius * np.cos(v / 2), 1.4 * radius * np.sin(v / 2), -0.2]))
            )
        case CoordinateSystem.SPHERICAL:
            annotations.projection_lines += [
                _segment((x, y, z), (0.0, 0.0, 0.0)),
                _segment((x, y, z), (x, y, 0.0)),
                _segment((x, y, 0.0), (0.0, 0.0, 0.0)),
            ]
            annotations.labels.append(Label("r", np.array([x / 2 + 0.1, y / 2 + 0.1, z / 2 - 0.3])))

    return annotations


def surface_normal(spec: ElementSpec, length: float = 1.0) -> Optional[Arrow]:
    """
    Normal arrow at the parametric centre of a surface element.

    The direction is the local basis vector of the fixed axis, e.g. e_r for a
    surface at constant r. Returns None for volume elements.
    """
    if spec.kind != ElementKind.SURFACE or spec.fixed_axis is None:
        return None
    centre = [rng.start + rng.delta / 2.0 for rng in spec.ranges]
    origin = to_cartesian_points(spec.system, *centre).reshape(3)
    direction = basis_vectors(spec.system, *centre)[spec.fixed_axis]
    return Arrow(origin, direction, length, "n")
