"""
Coordinate Mappings
===================
Maps coordinate-system specific triples to Cartesian points.

The set of systems is closed: a mapping is selected by a `CoordinateSystem`
tag, never by passing an arbitrary function. All functions are pure and accept
scalars or NumPy arrays (broadcast against each other).

Conventions (angles in radians):
    Cartesian:   (x, y, z)  -> (x, y, z)
    Cylindrical: (r, θ, z)  -> (r cosθ, r sinθ, z)
    Spherical:   (r, θ, φ)  -> (r sinθ cosφ, r sinθ sinφ, r cosθ)
                 θ is the polar angle measured from +z, φ the azimuth.
"""
from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Tuple

import numpy as np

from coordinatediagrams.errors import UnknownCoordinateSystem

if TYPE_CHECKING:
    import numpy.typing as npt

    ArrayLike = npt.ArrayLike
    Triple = Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]


class CoordinateSystem(StrEnum):
    CARTESIAN = "cartesian"
    CYLINDRICAL = "cylindrical"
    SPHERICAL = "spherical"


AXIS_LABELS: dict[CoordinateSystem, tuple[str, str, str]] = {
    CoordinateSystem.CARTESIAN: ("x", "y", "z"),
    CoordinateSystem.CYLINDRICAL: ("r", "θ", "z"),
    CoordinateSystem.SPHERICAL: ("r", "θ", "φ"),
}

BASIS_LABELS: dict[CoordinateSystem, tuple[str, str, str]] = {
    CoordinateSystem.CARTESIAN: ("e_x", "e_y", "e_z"),
    CoordinateSystem.CYLINDRICAL: ("e_r", "e_θ", "e_z"),
    CoordinateSystem.SPHERICAL: ("e_r", "e_θ", "e_φ"),
}


def _coerce(system: CoordinateSystem | str) -> CoordinateSystem:
    try:
        return CoordinateSystem(system)
    except ValueError:
        raise UnknownCoordinateSystem(f"Unsupported coordinate system: {system!r}") from None


def axis_labels(system: CoordinateSystem | str) -> tuple[str, str, str]:
    """Names of the three coordinates, e.g. ('r', 'θ', 'z')."""
    return AXIS_LABELS[_coerce(system)]


def to_cartesian(system: CoordinateSystem | str, u: ArrayLike, v: ArrayLike, w: ArrayLike) -> Triple:
    """
    Map coordinates of `system` to Cartesian (x, y, z).

    Args:
        system: One of the CoordinateSystem tags.
        u, v, w: Coordinates (scalars or arrays of matching shape).

    Returns:
        Tuple of three float arrays (x, y, z).

    Raises:
        UnknownCoordinateSystem: If `system` is not one of the three tags.
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    w = np.asarray(w, dtype=np.float64)

    match _coerce(system):
        case CoordinateSystem.CARTESIAN:
            x, y, z = u, v, w
        case CoordinateSystem.CYLINDRICAL:
            x = u * np.cos(v)
            y = u * np.sin(v)
            z = w
        case CoordinateSystem.SPHERICAL:
            sin_theta = np.sin(v)
            x = u * sin_theta * np.cos(w)
            y = u * sin_theta * np.sin(w)
            z = u * np.cos(v)

    # broadcast so a constant axis still yields one value per sample
    x, y, z = np.broadcast_arrays(x, y, z)
    return x.astype(np.float64), y.astype(np.float64), z.astype(np.float64)


def to_cartesian_points(system: CoordinateSystem | str, u: ArrayLike, v: ArrayLike, w: ArrayLike) -> npt.NDArray[np.float64]:
    """Same as `to_cartesian` but stacked into an (..., 3) array."""
    x, y, z = to_cartesian(system, u, v, w)
    return np.stack([x, y, z], axis=-1)


def from_cartesian(system: CoordinateSystem | str, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> Triple:
    """
    Inverse of `to_cartesian`.

    Azimuths are returned in (-π, π]. At the origin the spherical polar angle
    is reported as 0 instead of NaN.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    z = np.asarray(z, dtype=np.float64)

    match _coerce(system):
        case CoordinateSystem.CARTESIAN:
            u, v, w = x, y, z
        case CoordinateSystem.CYLINDRICAL:
            u = np.hypot(x, y)
            v = np.arctan2(y, x)
            w = z
        case CoordinateSystem.SPHERICAL:
            u = np.sqrt(x**2 + y**2 + z**2)
            with np.errstate(invalid="ignore", divide="ignore"):
                cos_theta = np.where(u > 0.0, z / np.where(u > 0.0, u, 1.0), 1.0)
            v = np.arccos(np.clip(cos_theta, -1.0, 1.0))
            w = np.arctan2(y, x)

    u, v, w = np.broadcast_arrays(u, v, w)
    return u.astype(np.float64), v.astype(np.float64), w.astype(np.float64)


def basis_vectors(system: CoordinateSystem | str, u: float, v: float, w: float) -> npt.NDArray[np.float64]:
    """
    Local orthonormal basis at a point.

    Returns:
        (3, 3) array, one unit vector per row, ordered like the coordinates
        (e_x, e_y, e_z), (e_r, e_θ, e_z) or (e_r, e_θ, e_φ).
    """
    match _coerce(system):
        case CoordinateSystem.CARTESIAN:
            return np.eye(3, dtype=np.float64)
        case CoordinateSystem.CYLINDRICAL:
            c, s = np.cos(v), np.sin(v)
            return np.array([
                [c, s, 0.0],
                [-s, c, 0.0],
                [0.0, 0.0, 1.0],
            ], dtype=np.float64)
        case CoordinateSystem.SPHERICAL:
            ct, st = np.cos(v), np.sin(v)
            cp, sp = np.cos(w), np.sin(w)
            return np.array([
                [st * cp, st * sp, ct],
                [ct * cp, ct * sp, -st],
                [-sp, cp, 0.0],
            ], dtype=np.float64)
