"""
VTK and Geometry Utilities
Helper functions converting engine geometry into PyVista datasets.
"""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import numpy.typing as npt
import pyvista as pv

from coordinatediagrams.model.element import EdgeCurveSet, ElementMesh

logger = logging.getLogger(__name__)


class VtkUtils:
    @staticmethod
    def mesh_to_polydata(mesh: ElementMesh) -> pv.PolyData:
        """
        Convert an ElementMesh to a triangulated PolyData with point normals.

        Raises:
            ValueError: If the mesh has already been disposed.
        """
        if mesh.disposed:
            raise ValueError("Cannot convert a disposed ElementMesh.")
        if mesh.n_triangles == 0:
            return pv.PolyData()

        # face cell: [3, a, b, c]
        cells = np.hstack([np.full((mesh.n_triangles, 1), 3, dtype=np.int64), mesh.faces]).ravel()
        pd = pv.PolyData(mesh.vertices.copy(), cells)
        pd.point_data.active_normals = mesh.normals
        return pd

    @staticmethod
    def polyline_to_polydata(points: npt.NDArray[np.float64]) -> pv.PolyData:
        """Convert a (N, 3) array of points to a PolyData line."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        n = pts.shape[0]
        # lines given up front, otherwise PolyData adds one vertex cell per point
        return pv.PolyData(pts, lines=np.hstack([[n], np.arange(n, dtype=np.int_)]))

    @staticmethod
    def polylines_to_polydata(lines: Sequence[npt.NDArray[np.float64]]) -> pv.PolyData:
        """
        Pack several polylines into one PolyData, one line cell per polyline.

        Args:
            lines: List of (N_i, 3) arrays.
        """
        pts_list: list[npt.NDArray[np.float64]] = []
        cells_list: list[npt.NDArray[np.int_]] = []
        offset = 0

        for line in lines:
            pts = np.asarray(line, dtype=np.float64).reshape(-1, 3)
            n = pts.shape[0]
            if n < 2:
                continue
            pts_list.append(pts)
            # polyline cell: [n, id0, id1, ..., id(n-1)]
            cells_list.append(np.hstack([[n], np.arange(offset, offset + n, dtype=np.int_)]))
            offset += n

        if not pts_list:
            return pv.PolyData()

        return pv.PolyData(np.vstack(pts_list), lines=np.concatenate(cells_list).astype(np.int_))

    def curves_to_polydata(self, curves: EdgeCurveSet) -> pv.PolyData:
        """Convert the outline of an element to line PolyData."""
        return self.polylines_to_polydata(list(curves))

    @staticmethod
    def arrow(
        origin: npt.ArrayLike,
        direction: npt.ArrayLike,
        length: float,
        shaft_radius: float = 0.02,
        tip_radius: float = 0.06,
    ) -> pv.PolyData:
        """Arrow glyph starting at `origin`, pointing along `direction`."""
        direction = np.asarray(direction, dtype=np.float64)
        norm = float(np.linalg.norm(direction))
        if norm == 0.0 or not np.isfinite(norm) or length <= 0.0:
            logger.debug("Skipping arrow with degenerate direction %s.", direction)
            return pv.PolyData()
        # pv.Arrow radii are relative to the scale
        return pv.Arrow(
            start=np.asarray(origin, dtype=np.float64),
            direction=direction / norm,
            tip_length=0.2,
            tip_radius=tip_radius / length,
            shaft_radius=shaft_radius / length,
            scale=length,
        )

    @staticmethod
    def release(dataset: pv.DataSet) -> None:
        """Drop the point and cell buffers of `dataset`."""
        dataset.clear_data()
        dataset.Initialize()
