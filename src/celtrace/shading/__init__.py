"""Shading module for light accumulation and cel-shading.

Components:
    lighting: Ambient/point/directional light accumulation with shadow rays,
        diffuse and specular terms, and four-band intensity quantization

The Taichi functions (``*_impl``) are meant to be called from kernels; the
plain functions run a single query from Python and are mainly used by tests.
"""

from .lighting import (
    BAND_FLOOR,
    BAND_HIGH,
    BAND_LOW,
    BAND_MID,
    SHADOW_T_MIN,
    compute_lighting,
    compute_lighting_impl,
    light_direction_impl,
    quantize_intensity,
    quantize_intensity_impl,
)

__all__ = [
    "compute_lighting",
    "compute_lighting_impl",
    "quantize_intensity",
    "quantize_intensity_impl",
    "light_direction_impl",
    "SHADOW_T_MIN",
    "BAND_HIGH",
    "BAND_MID",
    "BAND_LOW",
    "BAND_FLOOR",
]
