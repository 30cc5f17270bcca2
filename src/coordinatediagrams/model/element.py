"""
Differential Element Data
=========================
Plain data containers describing a differential element and the geometry
generated for it.

Classes:
    Range: One coordinate interval [start, start + delta].
    ElementKind: VOLUME (six faces) or SURFACE (one face).
    ElementSpec: Coordinate system + three ranges.
    ElementMesh: Triangulated element (vertices, faces, normals).
    EdgeCurveSet: The smoothed boundary curves of one element.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Iterator

import numpy as np

from coordinatediagrams.model.mappings import CoordinateSystem

if TYPE_CHECKING:
    import numpy.typing as npt


class ElementKind(StrEnum):
    VOLUME = "volume"
    SURFACE = "surface"


@dataclass(frozen=True)
class Range:
    """A coordinate interval given by its start and extent."""
    start: float
    delta: float = 0.0

    @property
    def end(self) -> float:
        return self.start + self.delta

    @property
    def bounds(self) -> tuple[float, float]:
        return self.start, self.end

    @property
    def is_degenerate(self) -> bool:
        return self.delta == 0.0

    def samples(self, n_segments: int) -> npt.NDArray[np.float64]:
        """n_segments + 1 evenly spaced values from start to end (both included)."""
        return self.start + self.delta * np.arange(n_segments + 1, dtype=np.float64) / n_segments

    @classmethod
    def fixed(cls, value: float) -> Range:
        return cls(start=value, delta=0.0)


@dataclass(frozen=True)
class ElementSpec:
    """
    Everything the generators need to know about an element.

    For a SURFACE element exactly one axis is fixed (`fixed_axis`); its range
    carries the fixed value with zero delta.
    """
    system: CoordinateSystem
    ranges: tuple[Range, Range, Range]
    kind: ElementKind = ElementKind.VOLUME
    fixed_axis: int | None = None

    def __post_init__(self) -> None:
        if len(self.ranges) != 3:
            raise ValueError(f"Expected three ranges, got {len(self.ranges)}.")
        if self.kind == ElementKind.SURFACE:
            if self.fixed_axis not in (0, 1, 2):
                raise ValueError("A surface element needs fixed_axis in (0, 1, 2).")
        elif self.fixed_axis is not None:
            raise ValueError("A volume element has no fixed axis.")

    @classmethod
    def volume(cls, system: CoordinateSystem, u: Range, v: Range, w: Range) -> ElementSpec:
        return cls(system=CoordinateSystem(system), ranges=(u, v, w), kind=ElementKind.VOLUME)

    @classmethod
    def surface(cls, system: CoordinateSystem, fixed_axis: int, fixed_value: float,
                first: Range, second: Range) -> ElementSpec:
        """
        Build a surface spec from the fixed axis and the two varying ranges
        (given in axis order).
        """
        varying = iter((first, second))
        ranges = tuple(
            Range.fixed(fixed_value) if axis == fixed_axis else next(varying)
            for axis in range(3)
        )
        return cls(system=CoordinateSystem(system), ranges=ranges,  # type: ignore[arg-type]
                   kind=ElementKind.SURFACE, fixed_axis=fixed_axis)

    @property
    def varying_axes(self) -> tuple[int, ...]:
        return tuple(axis for axis in range(3) if axis != self.fixed_axis)


class _Disposable:
    """Tracks whether the buffers of a generated object were released."""
    disposed: bool

    def _check_alive(self) -> None:
        if self.disposed:
            raise RuntimeError(f"{type(self).__name__} was already disposed.")


@dataclass(eq=False)
class ElementMesh(_Disposable):
    """
    Triangulated element.

    Attributes:
        vertices: (V, 3) Cartesian points.
        faces: (F, 3) vertex indices, consistent winding.
        normals: (V, 3) unit vertex normals (NaN rows tolerated at singularities).
    """
    vertices: npt.NDArray[np.float64]
    faces: npt.NDArray[np.int64]
    normals: npt.NDArray[np.float64]
    disposed: bool = field(default=False)

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_triangles(self) -> int:
        return int(self.faces.shape[0])

    def dispose(self) -> None:
        """Release the buffers. Safe to call twice."""
        self.vertices = np.empty((0, 3), dtype=np.float64)
        self.faces = np.empty((0, 3), dtype=np.int64)
        self.normals = np.empty((0, 3), dtype=np.float64)
        self.disposed = True

    @classmethod
    def empty(cls) -> ElementMesh:
        return cls(
            vertices=np.empty((0, 3), dtype=np.float64),
            faces=np.empty((0, 3), dtype=np.int64),
            normals=np.empty((0, 3), dtype=np.float64),
        )


@dataclass(eq=False)
class EdgeCurveSet(_Disposable):
    """Ordered boundary curves of one element, each an (n, 3) array."""
    curves: list[npt.NDArray[np.float64]] = field(default_factory=list)
    disposed: bool = field(default=False)

    def __len__(self) -> int:
        return len(self.curves)

    def __iter__(self) -> Iterator[npt.NDArray[np.float64]]:
        self._check_alive()
        return iter(self.curves)

    def endpoints(self) -> npt.NDArray[np.float64]:
        """(2 * n_curves, 3) array with the first and last point of each curve."""
        self._check_alive()
        if not self.curves:
            return np.empty((0, 3), dtype=np.float64)
        return np.vstack([np.vstack([c[0], c[-1]]) for c in self.curves])

    def dispose(self) -> None:
        self.curves = []
        self.disposed = True
