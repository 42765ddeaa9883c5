"""Scene storage and ray-scene intersection.

Spheres are uploaded from a host-side Scene into Taichi fields using a
Structure-of-Arrays layout. Intersection is a brute-force scan over every
sphere; the first sphere in scene order wins exact ties.

The kernel-side functions (``*_impl``) return sentinels that kernels can
carry around: an (inf, inf) root pair for a miss, and a HitRecord whose
sphere_index is -1. The Python-callable wrappers convert those sentinels into
``None`` so host code never compares against a placeholder sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.scene.intersection import closest_intersection
    >>> from src.celtrace.scene.model import Scene, Sphere
    >>> scene = Scene(spheres=[Sphere((0, 0, 3), 1, (255, 0, 0))])
    >>> sphere, t = closest_intersection(scene, (0, 0, 0), (0, 0, 1), 1.0, float("inf"))
    >>> t
    2.0
"""

import logging

import taichi as ti
import taichi.math as tm

from src.celtrace.core.vector import dot, subtract, vec3
from src.celtrace.scene.model import Scene, Sphere, light_kind, light_vector

logger = logging.getLogger(__name__)


@ti.dataclass
class HitRecord:
    """Closest hit along a ray.

    Attributes:
        hit: 1 if any sphere was hit within bounds, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        sphere_index: Index of the hit sphere in scene order, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f64
    sphere_index: ti.i32


# Maximum number of primitives/lights supported in the scene
MAX_SPHERES = 1024
MAX_LIGHTS = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_speculars = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_reflectives = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Light storage: kind tag, intensity and position-or-direction vector
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Host-side record of what is currently uploaded
_loaded_scene: Scene | None = None


def clear_scene() -> None:
    """Remove all spheres and lights from the kernel-side storage."""
    global _loaded_scene
    num_spheres[None] = 0
    num_lights[None] = 0
    _loaded_scene = None


def load_scene(scene: Scene) -> None:
    """Upload a scene's spheres and lights into Taichi fields.

    Uploading the scene that is already loaded is a no-op.

    Args:
        scene: The scene to make visible to kernels.

    Raises:
        RuntimeError: If the scene exceeds MAX_SPHERES or MAX_LIGHTS.
    """
    global _loaded_scene
    if _loaded_scene is scene:
        return
    if len(scene.spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    if len(scene.lights) > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    for idx, sphere in enumerate(scene.spheres):
        sphere_centers[idx] = list(sphere.center)
        sphere_radii[idx] = sphere.radius
        sphere_colors[idx] = list(sphere.color)
        sphere_speculars[idx] = sphere.specular
        sphere_reflectives[idx] = sphere.reflective
    num_spheres[None] = len(scene.spheres)

    for idx, light in enumerate(scene.lights):
        light_kinds[idx] = int(light_kind(light))
        light_intensities[idx] = light.intensity
        light_vectors[idx] = list(light_vector(light))
    num_lights[None] = len(scene.lights)

    _loaded_scene = scene
    logger.debug(
        "Loaded scene with %d spheres and %d lights", len(scene.spheres), len(scene.lights)
    )


def get_loaded_scene() -> Scene | None:
    """Return the scene currently uploaded, if any."""
    return _loaded_scene


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


# =============================================================================
# Kernel-side intersection
# =============================================================================


@ti.func
def intersect_ray_sphere_impl(origin: vec3, direction: vec3, center: vec3, radius: ti.f64):
    """Solve |origin + t * direction - center|^2 = radius^2 for t.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        center: Sphere center.
        radius: Sphere radius.

    Returns:
        Tuple (t1, t2) with t1 the '+' root and t2 the '-' root, or
        (inf, inf) when the discriminant is negative.
    """
    offset = subtract(origin, center)

    a = dot(direction, direction)
    b = 2.0 * dot(offset, direction)
    c = dot(offset, offset) - radius * radius

    discriminant = b * b - 4.0 * a * c

    t1 = tm.inf
    t2 = tm.inf
    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t1 = (-b + sqrt_d) / (2.0 * a)
        t2 = (-b - sqrt_d) / (2.0 * a)

    return t1, t2


@ti.func
def closest_intersection_impl(
    origin: vec3,
    direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Find the nearest sphere hit with t in [t_min, t_max].

    Both roots of every sphere are tested. A candidate replaces the current
    best only when strictly closer, so the earliest sphere in scene order
    keeps exact ties.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        t_min: Smallest accepted t (inclusive).
        t_max: Largest accepted t (inclusive).

    Returns:
        A HitRecord; sphere_index is -1 when nothing qualifies.
    """
    t_closest = tm.inf
    closest_index = -1

    for i in range(num_spheres[None]):
        t1, t2 = intersect_ray_sphere_impl(origin, direction, sphere_centers[i], sphere_radii[i])
        if t_min <= t1 <= t_max and t1 < t_closest:
            t_closest = t1
            closest_index = i
        if t_min <= t2 <= t_max and t2 < t_closest:
            t_closest = t2
            closest_index = i

    return HitRecord(
        hit=ti.select(closest_index >= 0, 1, 0),
        t=t_closest,
        sphere_index=closest_index,
    )


# =============================================================================
# Python-callable queries
# =============================================================================

_query_t = ti.field(dtype=ti.f64, shape=2)
_query_index = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _intersect_ray_sphere_kernel(origin: vec3, direction: vec3, center: vec3, radius: ti.f64):
    t1, t2 = intersect_ray_sphere_impl(origin, direction, center, radius)
    _query_t[0] = t1
    _query_t[1] = t2


@ti.kernel
def _closest_intersection_kernel(origin: vec3, direction: vec3, t_min: ti.f64, t_max: ti.f64):
    record = closest_intersection_impl(origin, direction, t_min, t_max)
    _query_t[0] = record.t
    _query_index[None] = record.sphere_index


def intersect_ray_sphere(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    sphere: Sphere,
) -> tuple[float, float] | None:
    """Intersect a ray with a single sphere.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        sphere: Sphere to test.

    Returns:
        The two roots (t1, t2), or None if the ray misses the sphere.
    """
    _intersect_ray_sphere_kernel(
        vec3(*origin), vec3(*direction), vec3(*sphere.center), sphere.radius
    )
    t1, t2 = float(_query_t[0]), float(_query_t[1])
    if t1 == tm.inf and t2 == tm.inf:
        return None
    return t1, t2


def closest_intersection(
    scene: Scene,
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float,
    t_max: float,
) -> tuple[Sphere, float] | None:
    """Find the closest sphere of ``scene`` hit within [t_min, t_max].

    Loads ``scene`` into the kernel-side storage if it is not already there.

    Returns:
        (sphere, t) for the closest hit, or None when nothing qualifies.
    """
    load_scene(scene)
    _closest_intersection_kernel(vec3(*origin), vec3(*direction), t_min, t_max)
    index = int(_query_index[None])
    if index < 0:
        return None
    return scene.spheres[index], float(_query_t[0])
