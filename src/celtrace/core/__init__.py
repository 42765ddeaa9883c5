"""Core rendering module.

This module contains the numeric building blocks of the renderer:

Components:
    vector: Vector/color algebra shared by every kernel
    config: RenderConfig describing canvas size, recursion budget and shading
    tracer: Depth-bounded reflective ray tracing
    renderer: Per-pixel render kernel writing the RGBA framebuffer
    pipeline: Render + edge-detection orchestration with timing logs

Only the vector algebra and configuration are imported here. The tracer,
renderer and pipeline depend on modules that declare Taichi fields, so import
them directly (after ti.init) from src.celtrace.core.tracer,
src.celtrace.core.renderer or src.celtrace.core.pipeline.
"""

from .config import DEFAULT_BACKGROUND, INTENSITY_THRESHOLD, RenderConfig
from .vector import (
    add,
    add_color,
    divide,
    dot,
    intensify_color,
    length,
    mat3,
    multiply,
    multiply_matrix_vector,
    normalize_color,
    reflect_ray,
    subtract,
    vec3,
)

__all__ = [
    # Configuration
    "RenderConfig",
    "INTENSITY_THRESHOLD",
    "DEFAULT_BACKGROUND",
    # Vector algebra
    "vec3",
    "mat3",
    "add",
    "subtract",
    "multiply",
    "divide",
    "dot",
    "length",
    "multiply_matrix_vector",
    "reflect_ray",
    # Color algebra
    "intensify_color",
    "add_color",
    "normalize_color",
]
