"""
Scene Lifecycle Manager
=======================
Owns everything drawn in one 3D view: the plotter configuration, the render
tick, the orbit control and the actors of every layer.

Why is this file needed?
------------------------
1. Lifecycle: A scene goes UNINITIALIZED -> RUNNING -> DISPOSED. Disposal
   cancels the render tick, detaches the camera control and the resize
   observer, releases every dataset and closes the plotter. Nothing runs
   afterwards.
2. Layers: Each layer key ("axes", "element", "edges", ...) maps to exactly one
   set of actors. Replacing a layer removes and releases the previous actors
   first.
3. Projection: The orthographic frustum keeps a fixed aspect ratio, whatever
   the size of the widget.

Classes:
    SceneState: Lifecycle states.
    ProjectionBounds: Visible frustum in camera coordinates.
    SceneLifecycleManager: The manager itself, one per view.
"""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, NamedTuple, Optional

import numpy as np
import pyvista as pv

from coordinatediagrams import config
from coordinatediagrams.controller.point_builder import Arrow, PointAnnotations
from coordinatediagrams.model.element import EdgeCurveSet, ElementMesh
from coordinatediagrams.view.widgets.orbit_control import OrbitControl
from coordinatediagrams.view.widgets.render_loop import RenderLoop
from coordinatediagrams.view.widgets.vtk_utils import VtkUtils

logger = logging.getLogger(__name__)


class SceneState(Enum):
    UNINITIALIZED = auto()
    RUNNING = auto()
    DISPOSED = auto()


class ProjectionBounds(NamedTuple):
    left: float
    right: float
    top: float
    bottom: float


def projection_bounds(
    width: int,
    height: int,
    aspect: float = config.ASPECT_RATIO,
    frustum: float = config.FRUSTUM_SIZE,
) -> ProjectionBounds:
    """
    Orthographic bounds of a `frustum`-sized view with fixed `aspect`.

    The fixed-aspect box is fitted inside the widget; the extra room along the
    longer side is added symmetrically.
    """
    half_width = frustum * aspect / 2.0
    top = frustum * config.FRUSTUM_TOP_SHARE
    bottom = -frustum * config.FRUSTUM_BOTTOM_SHARE

    widget_aspect = width / height
    if widget_aspect >= aspect:
        half_width *= widget_aspect / aspect
    else:
        extra = (aspect / widget_aspect - 1.0) * (top - bottom) / 2.0
        top += extra
        bottom -= extra
    return ProjectionBounds(-half_width, half_width, top, bottom)


class SceneLifecycleManager:
    """
    Args:
        plotter: PyVista plotter (usually a pyvistaqt.QtInteractor).
        interval_ms: Render tick interval.
        damping: Orbit control damping factor.
        start: Start the render loop right away.
    """
    def __init__(
        self,
        plotter: Any,
        interval_ms: int = config.FRAME_INTERVAL_MS,
        damping: float = config.ORBIT_DAMPING,
        start: bool = True,
    ) -> None:
        self.state: SceneState = SceneState.UNINITIALIZED
        self.plotter = plotter
        self.bounds: Optional[ProjectionBounds] = None
        self._vtk_utils = VtkUtils()
        # layer key -> [(actor, dataset)]
        self._layers: dict[str, list[tuple[Any, pv.DataSet]]] = {}

        self._configure_plotter()
        self.orbit = OrbitControl(plotter, damping=damping)
        self.orbit.attach()
        self._resize_observer: Optional[int] = plotter.iren.add_observer(
            "ConfigureEvent", lambda *_: self.on_resize(*self.plotter.window_size)
        )
        self.loop = RenderLoop(self.tick, interval_ms)

        self._draw_axes()
        self.on_resize(*plotter.window_size)

        self.state = SceneState.RUNNING
        if start:
            self.loop.start()
        logger.info("Scene running.")

    # ------------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state == SceneState.RUNNING

    def tick(self) -> None:
        """One frame: advance the orbit control, then render."""
        if not self.is_running:
            return
        self.orbit.update()
        self.plotter.render()

    def on_resize(self, width: int, height: int) -> Optional[ProjectionBounds]:
        """Recompute the orthographic frustum for a widget of the given size."""
        if not self._check_running("on_resize"):
            return None
        if width <= 0 or height <= 0:
            return self.bounds

        bounds = projection_bounds(width, height)
        half_height = (bounds.top - bounds.bottom) / 2.0
        center = (bounds.top + bounds.bottom) / 2.0
        camera = self.plotter.camera
        camera.parallel_scale = half_height
        # shift the view so the focal point sits below the middle
        camera.SetWindowCenter(0.0, center / half_height)
        self.bounds = bounds
        return bounds

    def dispose(self) -> None:
        """Stop everything and release every resource of the scene."""
        if self.state == SceneState.DISPOSED:
            logger.warning("Scene already disposed, dispose() ignored.")
            return

        self.loop.cancel()
        self.orbit.detach()
        if self._resize_observer is not None:
            self.plotter.iren.remove_observer(self._resize_observer)
            self._resize_observer = None

        for key in list(self._layers):
            self._clear_layer(key)

        self.plotter.close()
        self.state = SceneState.DISPOSED
        logger.info("Scene disposed.")

    # ------------------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------------------

    @property
    def layer_keys(self) -> list[str]:
        return list(self._layers)

    def layer_actors(self, key: str) -> list[Any]:
        return [actor for actor, _ in self._layers.get(key, [])]

    @property
    def actor_count(self) -> int:
        return sum(len(items) for items in self._layers.values())

    def install_element(self, mesh: ElementMesh, curves: EdgeCurveSet, normal: Optional[Arrow] = None) -> None:
        """Show `mesh` with its outline, replacing the current element."""
        if not self._check_running("install_element"):
            return
        if mesh.disposed or curves.disposed:
            raise ValueError("Cannot install disposed geometry.")

        self.remove_element()

        surface = self._vtk_utils.mesh_to_polydata(mesh)
        self._add_layer_mesh(
            "element", surface,
            color=config.ELEMENT_COLOR, opacity=config.ELEMENT_OPACITY,
            smooth_shading=True, show_edges=False,
        )
        outline = self._vtk_utils.curves_to_polydata(curves)
        self._add_layer_mesh("edges", outline, color=config.EDGE_COLOR, line_width=config.EDGE_WIDTH)

        if normal is not None:
            self._add_arrow("normal", normal, config.EDGE_COLOR)
            tip = normal.origin + 1.2 * normal.length * normal.direction
            self._add_labels("normal", [tip], [normal.label])

    def remove_element(self) -> None:
        if not self._check_running("remove_element"):
            return
        for key in ("element", "edges", "normal"):
            self._clear_layer(key)

    def set_annotations(self, annotations: Optional[PointAnnotations]) -> None:
        """Show the decorations of a point diagram; None clears them."""
        if not self._check_running("set_annotations"):
            return
        self._clear_layer("annotations")
        if annotations is None:
            return

        key = "annotations"
        self._add_layer_mesh(key, pv.Sphere(radius=config.POINT_RADIUS, center=annotations.position), color="red")
        for arrow in annotations.arrows:
            self._add_arrow(key, arrow, "red")

        lines = self._vtk_utils.polylines_to_polydata(annotations.projection_lines)
        if lines.n_points:
            self._add_layer_mesh(key, lines, color=config.PROJECTION_COLOR, line_width=1.0)

        for arc in annotations.arcs:
            self._add_layer_mesh(key, self._vtk_utils.polyline_to_polydata(arc), color="black", line_width=1.5)
            if len(arc) >= 2:
                # small cone showing the direction of the angle
                tangent = arc[-1] - arc[-2]
                if np.linalg.norm(tangent) > 0.0:
                    cone = pv.Cone(center=arc[-1], direction=tangent, height=0.15, radius=0.05)
                    self._add_layer_mesh(key, cone, color="black")

        if annotations.labels:
            self._add_labels(
                key,
                [label.position for label in annotations.labels],
                [label.text for label in annotations.labels],
            )

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    def _check_running(self, operation: str) -> bool:
        if self.state == SceneState.DISPOSED:
            logger.warning("%s() called on a disposed scene, ignored.", operation)
            return False
        return True

    def _configure_plotter(self) -> None:
        self.plotter.set_background(config.BACKGROUND_COLOR)
        self.plotter.enable_parallel_projection()
        camera = self.plotter.camera
        camera.position = config.CAMERA_POSITION
        camera.focal_point = (0.0, 0.0, 0.0)
        camera.up = config.CAMERA_UP

    def _draw_axes(self) -> None:
        tips = []
        for axis in range(3):
            direction = np.zeros(3)
            direction[axis] = 1.0
            self._add_arrow("axes", Arrow(np.zeros(3), direction, config.AXIS_LENGTH), config.AXIS_COLOR)
            tips.append(direction * config.AXIS_LENGTH * 1.05)
        self._add_labels("axes", tips, ["x", "y", "z"])

    def _add_layer_mesh(self, key: str, dataset: pv.DataSet, **kwargs: Any) -> None:
        if dataset.n_points == 0:
            logger.debug("Empty dataset skipped in layer '%s'.", key)
            return
        actor = self.plotter.add_mesh(dataset, reset_camera=False, **kwargs)
        self._layers.setdefault(key, []).append((actor, dataset))

    def _add_arrow(self, key: str, arrow: Arrow, color: str) -> None:
        self._add_layer_mesh(key, self._vtk_utils.arrow(arrow.origin, arrow.direction, arrow.length), color=color)

    def _add_labels(self, key: str, positions: list, texts: list[str]) -> None:
        points = pv.PolyData(np.asarray(positions, dtype=np.float64).reshape(-1, 3))
        actor = self.plotter.add_point_labels(
            points,
            texts,
            font_size=14,
            text_color="black",
            shape=None,
            show_points=False,
            always_visible=True,
            reset_camera=False,
        )
        self._layers.setdefault(key, []).append((actor, points))

    def _clear_layer(self, key: str) -> None:
        for actor, dataset in self._layers.pop(key, []):
            self.plotter.remove_actor(actor, reset_camera=False, render=False)
            self._vtk_utils.release(dataset)
