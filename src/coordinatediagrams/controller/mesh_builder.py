"""
Element Mesh Builder
====================
Tessellates a differential element by sampling a coordinate mapping over a
regular grid on each of its boundary faces.

Why is this file needed?
------------------------
Curvilinear elements (a wedge of a cylinder shell, a patch of a sphere) have
curved faces that no primitive shape describes. Each face is a 2D parameter
patch: we sample it, push the samples through the mapping and triangulate the
grid with a fixed diagonal, so neighbouring cells always share their edges.

Layout of the buffers:
    * faces are emitted one after another, each with (N+1)**2 vertices in
      row-major order (rows follow the lower free axis, columns the higher one),
    * every grid cell (a, b, c, d) yields triangles a-b-c and a-c-d.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, NamedTuple, Optional

import numpy as np

from coordinatediagrams import config
from coordinatediagrams.errors import InvalidResolution
from coordinatediagrams.model.element import ElementKind, ElementMesh, ElementSpec
from coordinatediagrams.model.mappings import to_cartesian_points

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class FacePatch(NamedTuple):
    """One boundary face: the fixed axis/value and the two free axes."""
    fixed_axis: int
    fixed_value: float
    row_axis: int
    col_axis: int


def default_resolution(kind: ElementKind) -> int:
    return config.SURFACE_RESOLUTION if kind == ElementKind.SURFACE else config.VOLUME_RESOLUTION


def check_resolution(n_segments: int) -> int:
    if int(n_segments) != n_segments or n_segments < 1:
        raise InvalidResolution(f"Resolution must be a positive integer, got {n_segments!r}.")
    return int(n_segments)


def iter_face_patches(spec: ElementSpec) -> Iterator[FacePatch]:
    """
    Yield the non-degenerate boundary faces of `spec`.

    A face whose free axis has zero extent collapses to a line or point and is
    skipped. When the fixed axis of a volume face pair has zero extent, both
    faces of the pair coincide and only one of them is yielded.
    """
    ranges = spec.ranges

    if spec.kind == ElementKind.SURFACE:
        row_axis, col_axis = spec.varying_axes
        if ranges[row_axis].is_degenerate or ranges[col_axis].is_degenerate:
            logger.debug("Surface element has a zero differential, no face emitted.")
            return
        yield FacePatch(spec.fixed_axis, ranges[spec.fixed_axis].start, row_axis, col_axis)
        return

    for fixed_axis in (2, 1, 0):
        row_axis, col_axis = (axis for axis in range(3) if axis != fixed_axis)
        if ranges[row_axis].is_degenerate or ranges[col_axis].is_degenerate:
            logger.debug("Skipping collapsed face pair at constant axis %d.", fixed_axis)
            continue
        fixed = ranges[fixed_axis]
        # zero delta: both faces coincide, emit one of them on purpose
        values = (fixed.start,) if fixed.is_degenerate else fixed.bounds
        for value in values:
            yield FacePatch(fixed_axis, value, row_axis, col_axis)


def sample_face(spec: ElementSpec, patch: FacePatch, n_segments: int) -> npt.NDArray[np.float64]:
    """Map the (N+1) x (N+1) grid of one face to Cartesian points, row-major (M, 3)."""
    rows = spec.ranges[patch.row_axis].samples(n_segments)
    cols = spec.ranges[patch.col_axis].samples(n_segments)
    row_grid, col_grid = np.meshgrid(rows, cols, indexing="ij")

    coords: list[npt.NDArray[np.float64] | float] = [0.0, 0.0, 0.0]
    coords[patch.fixed_axis] = np.full_like(row_grid, patch.fixed_value)
    coords[patch.row_axis] = row_grid
    coords[patch.col_axis] = col_grid

    points = to_cartesian_points(spec.system, *coords)
    return points.reshape(-1, 3)


def grid_triangles(n_segments: int, offset: int = 0) -> npt.NDArray[np.int64]:
    """
    Triangle indices of an (N+1) x (N+1) row-major vertex grid.

    Args:
        n_segments: Number of cells per side (N).
        offset: Index of the first vertex of the grid in the shared buffer.

    Returns:
        (2 * N**2, 3) array; cell (i, j) yields [a, b, c] then [a, c, d].
    """
    stride = n_segments + 1
    i, j = np.meshgrid(np.arange(n_segments), np.arange(n_segments), indexing="ij")
    a = (i * stride + j).ravel() + offset
    b = a + 1
    c = a + stride + 1
    d = a + stride

    first = np.stack([a, b, c], axis=-1)
    second = np.stack([a, c, d], axis=-1)
    return np.stack([first, second], axis=1).reshape(-1, 3).astype(np.int64)


def compute_vertex_normals(
    vertices: npt.NDArray[np.float64],
    faces: npt.NDArray[np.int64]
) -> npt.NDArray[np.float64]:
    """
    Average the unit normals of the triangles around each vertex.

    Zero-area triangles contribute nothing. A vertex whose summed normal is
    zero or non-finite keeps that value unnormalised; collapsed geometry at
    mapping singularities is tolerated instead of filtered.
    """
    normals = np.zeros_like(vertices, dtype=np.float64)
    if faces.size == 0:
        return normals

    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)

    with np.errstate(invalid="ignore", divide="ignore"):
        lengths = np.linalg.norm(face_normals, axis=1, keepdims=True)
        unit = np.where(lengths > 0.0, face_normals / lengths, 0.0)

    for corner in range(3):
        np.add.at(normals, faces[:, corner], unit)

    with np.errstate(invalid="ignore", divide="ignore"):
        lengths = np.linalg.norm(normals, axis=1, keepdims=True)
        ok = np.isfinite(lengths) & (lengths > 0.0)
        normals = np.where(ok, normals / np.where(ok, lengths, 1.0), normals)

    return normals


class ElementMeshBuilder:
    """
    Builds `ElementMesh` instances for volume and surface elements.

    Args:
        resolution: Segments per axis. None picks the kind specific default
                    from `config` (60 for surfaces, 20 for volumes).
    """
    def __init__(self, resolution: Optional[int] = None) -> None:
        self.resolution: Optional[int] = None if resolution is None else check_resolution(resolution)

    def resolution_for(self, spec: ElementSpec) -> int:
        return self.resolution if self.resolution is not None else default_resolution(spec.kind)

    def build(self, spec: ElementSpec, resolution: Optional[int] = None) -> ElementMesh:
        n = check_resolution(resolution) if resolution is not None else self.resolution_for(spec)

        vertex_blocks: list[npt.NDArray[np.float64]] = []
        face_blocks: list[npt.NDArray[np.int64]] = []
        offset = 0

        for patch in iter_face_patches(spec):
            points = sample_face(spec, patch, n)
            vertex_blocks.append(points)
            face_blocks.append(grid_triangles(n, offset))
            offset += points.shape[0]

        if not vertex_blocks:
            logger.debug("Element %s produced no faces.", spec)
            return ElementMesh.empty()

        vertices = np.vstack(vertex_blocks)
        faces = np.vstack(face_blocks)
        normals = compute_vertex_normals(vertices, faces)

        logger.debug(
            "Built %s mesh: %d faces, %d vertices, %d triangles (N=%d).",
            spec.kind, len(vertex_blocks), vertices.shape[0], faces.shape[0], n
        )
        return ElementMesh(vertices=vertices, faces=faces, normals=normals)


def build_element_mesh(spec: ElementSpec, resolution: Optional[int] = None) -> ElementMesh:
    """Convenience wrapper around `ElementMeshBuilder().build`."""
    return ElementMeshBuilder().build(spec, resolution)
