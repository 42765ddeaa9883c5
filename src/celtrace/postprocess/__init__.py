"""Post-processing module for cel-shading outlines.

Components:
    edges: Grayscale conversion, Sobel convolution, edge map and alpha
        compositing of the edge map over the rendered framebuffer

All images are NumPy uint8 arrays laid out (height, width[, channels]) and
passed to Taichi kernels as ndarrays, so any canvas size is accepted.
"""

from .edges import (
    NO_EDGE,
    RESPONSE_CLAMP,
    SOBEL_X,
    SOBEL_Y,
    EdgeDetectionResult,
    composite_edges,
    convolve,
    convolve_impl,
    detect_edges,
    flatten_rgba,
    run_edge_detection,
    sobel_magnitude,
    sobel_magnitude_impl,
    to_grayscale,
)

__all__ = [
    "EdgeDetectionResult",
    "run_edge_detection",
    "to_grayscale",
    "detect_edges",
    "composite_edges",
    "flatten_rgba",
    "convolve",
    "convolve_impl",
    "sobel_magnitude",
    "sobel_magnitude_impl",
    "SOBEL_X",
    "SOBEL_Y",
    "RESPONSE_CLAMP",
    "NO_EDGE",
]
