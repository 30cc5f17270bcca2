"""
Configuration & Global Constants
================================
This module serves as the central registry for rendering and tessellation
constants shared by every diagram.

Why is this file needed?
------------------------
1. Consistency: Resolutions, colours and camera settings are tuned together.
   Keeping them in one place stops the diagrams from drifting apart.
2. Budget: Tessellation density decides the vertex count of every rebuild.
   Volumes have six faces, so they get a lower resolution than surfaces.

Exports:
    SURFACE_RESOLUTION (int): Segments per axis for single-face elements.
    VOLUME_RESOLUTION (int): Segments per axis for six-face elements.
    EDGE_SAMPLES (int): Raw samples taken along each edge before smoothing.
    EDGE_POINTS (int): Points per smoothed edge curve.
"""
from typing import Tuple

# --- Tessellation ---
SURFACE_RESOLUTION: int = 60
VOLUME_RESOLUTION: int = 20
EDGE_SAMPLES: int = 20
EDGE_POINTS: int = 32

# --- Render loop ---
FRAME_INTERVAL_MS: int = 16

# --- Camera ---
ASPECT_RATIO: float = 4.0 / 3.0
FRUSTUM_SIZE: float = 10.0
# The view is shifted upwards: 65 % of the frustum above the focal point.
FRUSTUM_TOP_SHARE: float = 1.3 / 2.0
FRUSTUM_BOTTOM_SHARE: float = 0.7 / 2.0
CAMERA_POSITION: Tuple[float, float, float] = (8.0, 2.0, 2.0)
CAMERA_UP: Tuple[float, float, float] = (0.0, 0.0, 1.0)

# --- Orbit control ---
ORBIT_DAMPING: float = 0.2
ORBIT_ROTATE_SPEED: float = 0.5  # degrees per pixel
ORBIT_ZOOM_STEP: float = 1.1

# --- Appearance ---
BACKGROUND_COLOR: str = "white"
ELEMENT_COLOR: str = "#667EEA"
ELEMENT_OPACITY: float = 0.8
EDGE_COLOR: str = "black"
EDGE_WIDTH: float = 2.0
AXIS_LENGTH: float = 5.0
AXIS_COLOR: str = "black"
POINT_RADIUS: float = 0.1
BASIS_ARROW_LENGTH: float = 0.8
PROJECTION_COLOR: str = "#666666"
