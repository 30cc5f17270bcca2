"""
Edge Curve Extractor
====================
Derives the outline of a differential element: one curve per element edge,
traced through the same coordinate mapping used for the mesh.

An edge sweeps one coordinate across its range while the other two sit at
their extreme values. In Cartesian space those edges can be arcs (θ, φ) or
straight segments (r, z); both go through a centripetal Catmull-Rom spline so
arcs render smooth at any raw sample count.

Curve order:
    swept axis 0, then 1, then 2; for each swept axis the extreme combinations
    of the remaining axes in (low, low), (low, high), (high, low), (high, high)
    order. A surface element has one fixed value, so it yields 4 curves; a
    volume yields 12.
"""
from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Optional

import numpy as np

from coordinatediagrams import config
from coordinatediagrams.errors import InvalidResolution
from coordinatediagrams.model.element import EdgeCurveSet, ElementSpec
from coordinatediagrams.model.mappings import to_cartesian_points

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# Segments shorter than this are treated as unit length when computing knots
_MIN_KNOT: float = 1e-4


def catmull_rom(
    points: npt.NDArray[np.float64],
    n_points: int,
    alpha: float = 0.5
) -> npt.NDArray[np.float64]:
    """
    Resample a polyline with a Catmull-Rom spline through all its points.

    The spline parameter is uniform per input segment; the outer tangents use
    control points reflected through the end points. The first and last output
    points are exactly the first and last input points.

    Args:
        points: (M, 3) control points, M >= 2.
        n_points: Number of output points (>= 2).
        alpha: Knot exponent; 0.5 gives the centripetal variant.

    Returns:
        (n_points, 3) array.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    m = pts.shape[0]
    if m < 2:
        raise ValueError(f"Need at least two control points, got {m}.")
    if n_points < 2:
        raise InvalidResolution(f"A curve needs at least two output points, got {n_points}.")

    # pad with reflected end points: [p(-1), p0, ..., p(m-1), p(m)]
    padded = np.vstack([2.0 * pts[0] - pts[1], pts, 2.0 * pts[-1] - pts[-2]])

    t = np.linspace(0.0, 1.0, n_points) * (m - 1)
    seg = np.minimum(np.floor(t).astype(np.int64), m - 2)
    weight = (t - seg)[:, None]

    p0 = padded[seg]
    p1 = padded[seg + 1]
    p2 = padded[seg + 2]
    p3 = padded[seg + 3]

    def knot(a: npt.NDArray[np.float64], b: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.power(np.sum((b - a) ** 2, axis=1), alpha / 2.0)[:, None]

    dt0 = knot(p0, p1)
    dt1 = knot(p1, p2)
    dt2 = knot(p2, p3)
    dt1 = np.where(dt1 < _MIN_KNOT, 1.0, dt1)
    dt0 = np.where(dt0 < _MIN_KNOT, dt1, dt0)
    dt2 = np.where(dt2 < _MIN_KNOT, dt1, dt2)

    m1 = ((p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1) * dt1
    m2 = ((p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2) * dt1

    c0 = p1
    c1 = m1
    c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * m1 - m2
    c3 = 2.0 * p1 - 2.0 * p2 + m1 + m2

    out = c0 + weight * (c1 + weight * (c2 + weight * c3))
    # pin the ends, the cubic evaluation may be off by rounding
    out[0] = pts[0]
    out[-1] = pts[-1]
    return out


class EdgeCurveExtractor:
    """
    Builds the `EdgeCurveSet` of an element.

    Args:
        samples: Raw segments sampled along each edge before smoothing.
        n_points: Points per output curve.
    """
    def __init__(self, samples: Optional[int] = None, n_points: Optional[int] = None) -> None:
        self.samples: int = config.EDGE_SAMPLES if samples is None else int(samples)
        self.n_points: int = config.EDGE_POINTS if n_points is None else int(n_points)
        if self.samples < 1:
            raise InvalidResolution(f"Edge samples must be >= 1, got {self.samples}.")
        if self.n_points < 2:
            raise InvalidResolution(f"Edge curves need >= 2 points, got {self.n_points}.")

    def raw_edge(self, spec: ElementSpec, swept_axis: int, fixed: dict[int, float]) -> npt.NDArray[np.float64]:
        """Sample one edge through the mapping without smoothing, (samples + 1, 3)."""
        values = spec.ranges[swept_axis].samples(self.samples)
        coords: list[npt.NDArray[np.float64]] = [np.empty(0)] * 3
        coords[swept_axis] = values
        for axis, value in fixed.items():
            coords[axis] = np.full_like(values, value)
        return to_cartesian_points(spec.system, *coords)

    def edges(self, spec: ElementSpec) -> list[tuple[int, dict[int, float]]]:
        """Enumerate (swept axis, fixed values of the other axes) for every edge."""
        swept_axes = spec.varying_axes
        result: list[tuple[int, dict[int, float]]] = []

        for swept in swept_axes:
            if spec.ranges[swept].is_degenerate:
                logger.debug("Skipping edges along zero-length axis %d.", swept)
                continue
            others = [axis for axis in range(3) if axis != swept]
            choices = []
            for axis in others:
                rng = spec.ranges[axis]
                # a zero-length axis keeps a single position, the duplicate curve is dropped on purpose
                if axis == spec.fixed_axis or rng.is_degenerate:
                    choices.append((rng.start,))
                else:
                    choices.append(rng.bounds)
            for combo in itertools.product(*choices):
                result.append((swept, dict(zip(others, combo))))

        return result

    def extract(self, spec: ElementSpec) -> EdgeCurveSet:
        curves = [
            catmull_rom(self.raw_edge(spec, swept, fixed), self.n_points)
            for swept, fixed in self.edges(spec)
        ]
        logger.debug("Extracted %d edge curves (%d points each).", len(curves), self.n_points)
        return EdgeCurveSet(curves=curves)


def extract_edge_curves(spec: ElementSpec) -> EdgeCurveSet:
    """Convenience wrapper around `EdgeCurveExtractor().extract`."""
    return EdgeCurveExtractor().extract(spec)
