"""Light accumulation with shadows and cel-shading quantization.

For a surface point, every light in the scene contributes:

    - Ambient lights: their intensity, unconditionally.
    - Point and directional lights: nothing if a shadow ray toward the light
      hits any sphere; otherwise a diffuse term (when the light is in front
      of the surface) and a specular term (when the material is shiny and
      the mirrored light vector faces the viewer).

The summed intensity is then snapped into one of four bands relative to a
threshold T, which gives the flat, hand-drawn look:

    intensity > 0.95T  ->  0.95T
    intensity > 0.50T  ->  0.50T
    intensity > 0.30T  ->  0.30T
    otherwise          ->  0.05T
"""

import taichi as ti
import taichi.math as tm

from src.celtrace.core.config import INTENSITY_THRESHOLD
from src.celtrace.core.vector import dot, length, reflect_ray, subtract, vec3
from src.celtrace.scene.intersection import (
    closest_intersection_impl,
    light_intensities,
    light_kinds,
    light_vectors,
    load_scene,
    num_lights,
)
from src.celtrace.scene.model import NO_SPECULAR, LightKind, Scene

# Shadow rays start slightly off the surface to avoid self-shadowing acne
SHADOW_T_MIN = 0.001

# Fractions of the threshold marking each cel band
BAND_HIGH = 0.95
BAND_MID = 0.50
BAND_LOW = 0.30
BAND_FLOOR = 0.05

# Light tags as plain ints for use inside kernels
_AMBIENT = int(LightKind.AMBIENT)
_POINT = int(LightKind.POINT)


@ti.func
def quantize_intensity_impl(intensity: ti.f64, threshold: ti.f64) -> ti.f64:
    """Snap a raw intensity into one of the four cel-shading bands."""
    result = threshold * BAND_FLOOR
    if intensity > threshold * BAND_HIGH:
        result = threshold * BAND_HIGH
    elif intensity > threshold * BAND_MID:
        result = threshold * BAND_MID
    elif intensity > threshold * BAND_LOW:
        result = threshold * BAND_LOW
    return result


@ti.func
def light_direction_impl(index: ti.i32, point: vec3):
    """Vector from ``point`` toward light ``index`` and its shadow-ray bound.

    Point lights are only occluded by geometry between the point and the
    light (t_max = 1, since the vector spans exactly that distance).
    Directional lights are occluded by anything along the ray.

    Returns:
        Tuple (light_vec, t_max).
    """
    light_vec = light_vectors[index]
    t_max = tm.inf
    if light_kinds[index] == _POINT:
        light_vec = subtract(light_vectors[index], point)
        t_max = 1.0
    return light_vec, t_max


@ti.func
def compute_lighting_impl(
    point: vec3,
    normal: vec3,
    view: vec3,
    specular: ti.f64,
    threshold: ti.f64,
) -> ti.f64:
    """Quantized light intensity at a surface point.

    Args:
        point: Surface point in world space.
        normal: Outward surface normal (unit length).
        view: Vector from the point toward the viewer.
        specular: Specular exponent, or NO_SPECULAR for matte surfaces.
        threshold: Cel-shading threshold T.

    Returns:
        The banded intensity (one of 0.95T, 0.5T, 0.3T, 0.05T).
    """
    intensity = 0.0

    for i in range(num_lights[None]):
        if light_kinds[i] == _AMBIENT:
            intensity += light_intensities[i]
        else:
            light_vec, t_max = light_direction_impl(i, point)

            shadow = closest_intersection_impl(point, light_vec, SHADOW_T_MIN, t_max)
            if shadow.hit == 0:
                # Diffuse
                n_dot_l = dot(normal, light_vec)
                if n_dot_l > 0.0:
                    intensity += light_intensities[i] * (
                        n_dot_l / (length(normal) * length(light_vec))
                    )

                # Specular
                if specular != NO_SPECULAR:
                    reflection = reflect_ray(light_vec, normal)
                    r_dot_v = dot(reflection, view)
                    if r_dot_v > 0.0:
                        intensity += light_intensities[i] * ti.pow(
                            r_dot_v / (length(reflection) * length(view)), specular
                        )

    return quantize_intensity_impl(intensity, threshold)


# =============================================================================
# Python-callable wrappers
# =============================================================================


@ti.kernel
def _quantize_kernel(intensity: ti.f64, threshold: ti.f64) -> ti.f64:
    return quantize_intensity_impl(intensity, threshold)


@ti.kernel
def _compute_lighting_kernel(
    point: vec3, normal: vec3, view: vec3, specular: ti.f64, threshold: ti.f64
) -> ti.f64:
    return compute_lighting_impl(point, normal, view, specular, threshold)


def quantize_intensity(intensity: float, threshold: float = INTENSITY_THRESHOLD) -> float:
    """Snap a raw intensity into its cel-shading band.

    Example:
        >>> round(quantize_intensity(10.0), 4)  # 0.95 * 1.2
        1.14
    """
    return float(_quantize_kernel(intensity, threshold))


def compute_lighting(
    scene: Scene,
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    view: tuple[float, float, float],
    specular: float,
    threshold: float = INTENSITY_THRESHOLD,
) -> float:
    """Quantized light intensity at ``point`` for the lights of ``scene``.

    Loads ``scene`` into the kernel-side storage if it is not already there.
    """
    load_scene(scene)
    return float(
        _compute_lighting_kernel(vec3(*point), vec3(*normal), vec3(*view), specular, threshold)
    )
