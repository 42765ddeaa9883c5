"""End-to-end cel-shaded render: ray trace, then outline.

The pipeline runs two barriers in order: the render kernel must finish the
whole framebuffer before edge detection reads it, and edge detection then
runs its own grayscale and Sobel stages.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.core.config import RenderConfig
    >>> from src.celtrace.core.pipeline import render_cel_shaded
    >>> from src.celtrace.scene.default_scene import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> result = render_cel_shaded(scene, camera, RenderConfig(width=128, height=128))
    >>> result.final.shape
    (128, 128, 4)
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.celtrace.camera.projection import Camera
from src.celtrace.core.config import RenderConfig
from src.celtrace.core.renderer import render_scene
from src.celtrace.postprocess.edges import flatten_rgba, run_edge_detection
from src.celtrace.scene.model import Scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CelShadedRender:
    """Every artifact produced by one pipeline run.

    Attributes:
        render: (H, W, 4) RGBA framebuffer straight from the ray tracer.
        gray: (H, W) grayscale image.
        edges: (H, W) edge map, 255 meaning no edge.
        final: (H, W, 4) render with the edge map as alpha.
        flat: (H, W, 3) final image composited over black.
        render_seconds: Wall time spent ray tracing.
        postprocess_seconds: Wall time spent on edge detection.
    """

    render: npt.NDArray[np.uint8]
    gray: npt.NDArray[np.uint8]
    edges: npt.NDArray[np.uint8]
    final: npt.NDArray[np.uint8]
    flat: npt.NDArray[np.uint8]
    render_seconds: float
    postprocess_seconds: float

    @property
    def width(self) -> int:
        return int(self.render.shape[1])

    @property
    def height(self) -> int:
        return int(self.render.shape[0])

    @property
    def total_seconds(self) -> float:
        return self.render_seconds + self.postprocess_seconds


def render_cel_shaded(scene: Scene, camera: Camera, config: RenderConfig) -> CelShadedRender:
    """Render ``scene`` and overlay Sobel outlines.

    Args:
        scene: Scene to render.
        camera: Camera position and orientation.
        config: Canvas size, recursion depth, threshold and background.

    Returns:
        CelShadedRender with all intermediate and final images.
    """
    logger.info(
        "Rendering %dx%d (depth=%d, threshold=%.3f, %d spheres, %d lights)",
        config.width,
        config.height,
        config.recursion_depth,
        config.intensity_threshold,
        len(scene.spheres),
        len(scene.lights),
    )

    start = time.perf_counter()
    framebuffer = render_scene(scene, camera, config)
    render_seconds = time.perf_counter() - start
    logger.info("Ray tracing finished in %.3fs", render_seconds)

    start = time.perf_counter()
    edges = run_edge_detection(framebuffer)
    flat = flatten_rgba(edges.final)
    postprocess_seconds = time.perf_counter() - start
    logger.info("Edge detection finished in %.3fs", postprocess_seconds)

    return CelShadedRender(
        render=framebuffer,
        gray=edges.gray,
        edges=edges.edges,
        final=edges.final,
        flat=flat,
        render_seconds=render_seconds,
        postprocess_seconds=postprocess_seconds,
    )
