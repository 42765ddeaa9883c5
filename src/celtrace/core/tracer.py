"""Depth-bounded reflective ray tracing.

A ray that misses every sphere returns the background color. A ray that hits
a sphere takes the sphere's color scaled by the quantized light intensity at
the hit point. If the sphere is reflective and the recursion budget is not
exhausted, the ray is mirrored about the surface normal and traced again:

    color = local * (1 - r) + reflected * r

Taichi functions cannot recurse, so trace_ray_impl() walks the reflection
chain in a loop. Each hit spawns at most one reflected ray, so the recursion
is a single chain and the loop accumulates the same blend by carrying the
product of reflective coefficients seen so far.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.core.tracer import trace_ray
    >>> from src.celtrace.scene.model import Scene
    >>> trace_ray((255, 255, 255), Scene(), (0, 0, 0), (0, 0, 1), 1.0, float("inf"), 1)
    (255.0, 255.0, 255.0)
"""

import taichi as ti
import taichi.math as tm

from src.celtrace.core.config import INTENSITY_THRESHOLD
from src.celtrace.core.vector import (
    add,
    add_color,
    divide,
    intensify_color,
    length,
    multiply,
    reflect_ray,
    subtract,
    vec3,
)
from src.celtrace.scene.intersection import (
    closest_intersection_impl,
    load_scene,
    sphere_centers,
    sphere_colors,
    sphere_reflectives,
    sphere_speculars,
)
from src.celtrace.scene.model import Scene
from src.celtrace.shading.lighting import compute_lighting_impl

# Reflected rays start slightly off the surface to avoid hitting it again
REFLECTION_T_MIN = 0.001


@ti.func
def trace_ray_impl(
    background: vec3,
    origin: vec3,
    direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
    depth: ti.i32,
    threshold: ti.f64,
) -> vec3:
    """Color seen along a ray, including up to ``depth`` reflections.

    Args:
        background: Color for rays that hit nothing.
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        t_min: Smallest accepted hit distance for the first ray.
        t_max: Largest accepted hit distance for the first ray.
        depth: Remaining reflection budget; 0 disables reflection.
        threshold: Cel-shading threshold T.

    Returns:
        The unclamped color on the 0-255 scale.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Product of reflective coefficients along the chain so far
    weight = 1.0

    ray_origin = origin
    ray_direction = direction
    near = t_min
    far = t_max

    active = 1
    for bounce in range(depth + 1):
        if active == 1:
            record = closest_intersection_impl(ray_origin, ray_direction, near, far)

            if record.hit == 0:
                color = add_color(color, intensify_color(background, weight))
                active = 0
            else:
                idx = record.sphere_index
                point = add(ray_origin, multiply(ray_direction, record.t))
                normal = subtract(point, sphere_centers[idx])
                normal_length = length(normal)
                assert normal_length > 0.0, "Zero-length surface normal"
                normal = divide(normal, normal_length)

                view = multiply(ray_direction, -1.0)
                intensity = compute_lighting_impl(
                    point, normal, view, sphere_speculars[idx], threshold
                )
                local_color = intensify_color(sphere_colors[idx], intensity)

                reflective = sphere_reflectives[idx]
                if bounce == depth or reflective <= 0.0:
                    color = add_color(color, intensify_color(local_color, weight))
                    active = 0
                else:
                    color = add_color(
                        color, intensify_color(local_color, weight * (1.0 - reflective))
                    )
                    weight *= reflective

                    ray_origin = point
                    ray_direction = reflect_ray(view, normal)
                    near = REFLECTION_T_MIN
                    far = tm.inf

    return color


# =============================================================================
# Python-callable wrapper
# =============================================================================


@ti.kernel
def _trace_single_ray(
    background: vec3,
    origin: vec3,
    direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
    depth: ti.i32,
    threshold: ti.f64,
) -> vec3:
    return trace_ray_impl(background, origin, direction, t_min, t_max, depth, threshold)


def trace_ray(
    background: tuple[float, float, float],
    scene: Scene,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float,
    t_max: float,
    depth: int,
    threshold: float = INTENSITY_THRESHOLD,
) -> tuple[float, float, float]:
    """Trace a single ray through ``scene`` from Python.

    This is a Python-callable function for testing. For whole images, use
    src.celtrace.core.renderer.render_scene() which traces every pixel in
    parallel.

    Args:
        background: Color for rays that hit nothing.
        scene: Scene to trace against; uploaded if not already loaded.
        origin: Ray origin.
        direction: Ray direction.
        t_min: Smallest accepted hit distance.
        t_max: Largest accepted hit distance.
        depth: Reflection budget (>= 0).
        threshold: Cel-shading threshold T.

    Returns:
        Tuple of (R, G, B), unclamped.

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"Recursion depth must be >= 0, got {depth}")
    load_scene(scene)
    color = _trace_single_ray(
        vec3(*background), vec3(*origin), vec3(*direction), t_min, t_max, depth, threshold
    )
    return (float(color[0]), float(color[1]), float(color[2]))
