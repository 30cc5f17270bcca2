"""
Orbit Control
=============
Damped camera orbit around the origin.

Mouse drag and wheel events only accumulate pending rotation and zoom. Each
`update()` (one per render tick) applies the `damping` share of what is
pending and keeps the rest, so the camera glides to a stop after the mouse is
released.
"""
from __future__ import annotations

import logging
import math
from typing import Any

from vtkmodules.vtkInteractionStyle import vtkInteractorStyleUser

from coordinatediagrams import config

logger = logging.getLogger(__name__)

# below this the remaining motion is invisible
_REST_EPS: float = 1e-4


class OrbitControl:
    """
    Args:
        plotter: PyVista plotter (or QtInteractor) whose camera is driven.
        damping: Share of the pending motion applied per update, in (0, 1].
        rotate_speed: Degrees of rotation per pixel dragged.
        zoom_step: Zoom factor per wheel notch.
    """
    def __init__(
        self,
        plotter: Any,
        damping: float = config.ORBIT_DAMPING,
        rotate_speed: float = config.ORBIT_ROTATE_SPEED,
        zoom_step: float = config.ORBIT_ZOOM_STEP,
    ) -> None:
        if not 0.0 < damping <= 1.0:
            raise ValueError(f"damping must be in (0, 1], got {damping}")
        self.plotter = plotter
        self.damping = damping
        self.rotate_speed = rotate_speed
        self.zoom_step = zoom_step

        self.pending_azimuth: float = 0.0
        self.pending_elevation: float = 0.0
        self.pending_zoom: float = 0.0  # log of the zoom factor

        self.attached: bool = False
        self._dragging: bool = False
        self._last_pos: tuple[int, int] = (0, 0)
        self._observer_ids: list[int] = []
        self._previous_style: Any = None
        self._style = vtkInteractorStyleUser()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def attach(self) -> None:
        """Take over mouse handling of the plotter's interactor."""
        if self.attached:
            return
        iren = self.plotter.iren
        # the default trackball style would move the camera on its own
        self._previous_style = iren.interactor.GetInteractorStyle()
        iren.interactor.SetInteractorStyle(self._style)

        handlers = {
            "LeftButtonPressEvent": self._on_press,
            "LeftButtonReleaseEvent": self._on_release,
            "MouseMoveEvent": self._on_move,
            "MouseWheelForwardEvent": lambda *_: self.zoom(1),
            "MouseWheelBackwardEvent": lambda *_: self.zoom(-1),
        }
        self._observer_ids = [iren.add_observer(event, handler) for event, handler in handlers.items()]
        self.attached = True
        logger.debug("Orbit control attached.")

    def detach(self) -> None:
        """Remove the observers and restore the previous interactor style."""
        if not self.attached:
            return
        iren = self.plotter.iren
        for obs_id in self._observer_ids:
            iren.remove_observer(obs_id)
        self._observer_ids = []
        if self._previous_style is not None:
            iren.interactor.SetInteractorStyle(self._previous_style)
        self._previous_style = None
        self._dragging = False
        self.stop()
        self.attached = False
        logger.debug("Orbit control detached.")

    def rotate(self, d_azimuth: float, d_elevation: float) -> None:
        """Queue a rotation, in degrees."""
        self.pending_azimuth += d_azimuth
        self.pending_elevation += d_elevation

    def zoom(self, notches: float) -> None:
        """Queue a zoom; positive notches zoom in."""
        self.pending_zoom += notches * math.log(self.zoom_step)

    def stop(self) -> None:
        self.pending_azimuth = self.pending_elevation = self.pending_zoom = 0.0

    @property
    def is_moving(self) -> bool:
        return any(abs(p) > _REST_EPS for p in (self.pending_azimuth, self.pending_elevation, self.pending_zoom))

    def update(self) -> bool:
        """
        Apply one damped step of the pending motion to the camera.

        Returns:
            True if the camera moved.
        """
        if not self.is_moving:
            self.stop()
            return False

        d_az = self.pending_azimuth * self.damping
        d_el = self.pending_elevation * self.damping
        d_zoom = self.pending_zoom * self.damping
        self.pending_azimuth -= d_az
        self.pending_elevation -= d_el
        self.pending_zoom -= d_zoom

        camera = self.plotter.camera
        if d_az:
            camera.Azimuth(d_az)
        if d_el:
            camera.Elevation(d_el)
            camera.OrthogonalizeViewUp()
        if d_zoom:
            camera.Zoom(math.exp(d_zoom))
        self.plotter.renderer.ResetCameraClippingRange()
        return True

    # ------------------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------------------

    def _on_press(self, *_: Any) -> None:
        self._dragging = True
        self._last_pos = tuple(self.plotter.iren.get_event_position())

    def _on_release(self, *_: Any) -> None:
        self._dragging = False

    def _on_move(self, *_: Any) -> None:
        if not self._dragging:
            return
        x, y = self.plotter.iren.get_event_position()
        dx = x - self._last_pos[0]
        dy = y - self._last_pos[1]
        self._last_pos = (x, y)
        self.rotate(-dx * self.rotate_speed, -dy * self.rotate_speed)
