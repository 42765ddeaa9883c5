"""Render kernel: one primary ray per pixel into an RGBA framebuffer.

Every pixel is an independent job, so the render is a single parallel map
over (row, col). Each loop iteration computes its own color and writes only
its own framebuffer cell, so no two iterations ever touch the same pixel.

Canvas and image coordinates relate as follows (y flips):

    col = width / 2 + cx     cx in [-width / 2, width / 2)
    row = height / 2 - cy    cy in (-height / 2, height / 2]

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.core.config import RenderConfig
    >>> from src.celtrace.core.renderer import render_scene
    >>> from src.celtrace.scene.default_scene import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> framebuffer = render_scene(scene, camera, RenderConfig(width=64, height=64))
    >>> framebuffer.shape
    (64, 64, 4)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.celtrace.camera.projection import (
    Camera,
    get_view_ray,
    is_camera_initialized,
    setup_camera,
)
from src.celtrace.core.config import RenderConfig
from src.celtrace.core.tracer import trace_ray_impl
from src.celtrace.core.vector import normalize_color, vec3
from src.celtrace.scene.intersection import get_loaded_scene, load_scene
from src.celtrace.scene.model import Scene

logger = logging.getLogger(__name__)

# Primary rays ignore anything between the camera and the viewport plane
PRIMARY_T_MIN = 1.0

# Alpha written for every rendered pixel
OPAQUE = 255


@ti.func
def pixel_to_canvas(row: ti.i32, col: ti.i32, width: ti.i32, height: ti.i32):
    """Map a framebuffer (row, col) back to the centred canvas coordinate."""
    return col - width // 2, height // 2 - row


@ti.kernel
def _render_kernel(
    framebuffer: ti.types.ndarray(dtype=ti.u8, ndim=3),
    background: vec3,
    depth: ti.i32,
    threshold: ti.f64,
):
    """Trace every pixel of ``framebuffer`` in parallel.

    Args:
        framebuffer: (height, width, 4) uint8 RGBA target.
        background: Color for rays that escape the scene.
        depth: Reflection budget per primary ray.
        threshold: Cel-shading threshold T.
    """
    height = framebuffer.shape[0]
    width = framebuffer.shape[1]
    for row, col in ti.ndrange(height, width):
        cx, cy = pixel_to_canvas(row, col, width, height)
        origin, direction = get_view_ray(
            ti.cast(cx, ti.f64),
            ti.cast(cy, ti.f64),
            ti.cast(width, ti.f64),
            ti.cast(height, ti.f64),
        )

        color = trace_ray_impl(
            background, origin, direction, PRIMARY_T_MIN, tm.inf, depth, threshold
        )
        pixel = normalize_color(color, 255.0)

        for c in ti.static(range(3)):
            framebuffer[row, col, c] = ti.cast(ti.cast(pixel[c], ti.i32), ti.u8)
        framebuffer[row, col, 3] = ti.cast(OPAQUE, ti.u8)


def new_framebuffer(width: int, height: int) -> npt.NDArray[np.uint8]:
    """Allocate an all-zero (transparent black) RGBA framebuffer.

    Returns:
        Array of shape (height, width, 4) with dtype uint8.
    """
    return np.zeros((height, width, 4), dtype=np.uint8)


def render_into(framebuffer: npt.NDArray[np.uint8], config: RenderConfig) -> None:
    """Render the loaded scene from the configured camera into ``framebuffer``.

    The framebuffer's shape, not ``config.width``/``config.height``, decides
    the canvas size.

    Args:
        framebuffer: (height, width, 4) uint8 array, overwritten in place.
        config: Recursion depth, threshold and background.

    Raises:
        RuntimeError: If no scene is loaded or the camera is not set up.
        ValueError: If the framebuffer has the wrong shape or dtype.
    """
    if get_loaded_scene() is None:
        raise RuntimeError("No scene loaded. Call load_scene() first.")
    if not is_camera_initialized():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 4 or framebuffer.dtype != np.uint8:
        raise ValueError(
            f"Framebuffer must be a (height, width, 4) uint8 array, got "
            f"{framebuffer.shape} {framebuffer.dtype}"
        )

    _render_kernel(
        framebuffer,
        vec3(*config.background),
        config.recursion_depth,
        config.intensity_threshold,
    )


def render_scene(scene: Scene, camera: Camera, config: RenderConfig) -> npt.NDArray[np.uint8]:
    """Render ``scene`` as seen from ``camera``.

    Args:
        scene: Scene to render.
        camera: Camera position and orientation.
        config: Canvas size, recursion depth, threshold and background.

    Returns:
        RGBA framebuffer of shape (config.height, config.width, 4), uint8,
        with every pixel fully opaque.
    """
    load_scene(scene)
    setup_camera(camera, scene)

    framebuffer = new_framebuffer(config.width, config.height)
    render_into(framebuffer, config)
    ti.sync()

    logger.debug("Rendered %dx%d framebuffer", config.width, config.height)
    return framebuffer
