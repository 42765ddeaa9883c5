"""Camera module for view ray generation.

Components:
    projection: Camera dataclass (position + 3x3 rotation), viewport upload
        and canvas-to-viewport mapping for primary rays

Canvas coordinates are centred on the image with y pointing up:
    cx in [-width/2, width/2): left to right
    cy in (-height/2, height/2]: bottom to top

Primary ray generation runs inside the render kernel, one ray per pixel.
"""

from .projection import (
    IDENTITY_ROTATION,
    Camera,
    canvas_to_viewport,
    get_camera_info,
    get_view_ray,
    is_camera_initialized,
    reset_camera,
    rotation_y,
    setup_camera,
)

__all__ = [
    "Camera",
    "IDENTITY_ROTATION",
    "rotation_y",
    "setup_camera",
    "reset_camera",
    "is_camera_initialized",
    "canvas_to_viewport",
    "get_view_ray",
    "get_camera_info",
]
