"""Scene module for scene description and ray-scene queries.

This module handles scene representation and intersection:

Components:
    model: Frozen Sphere/Light/Scene dataclasses validated at construction
    intersection: Taichi field storage, ray-sphere and closest-hit queries
    default_scene: Reference three-sphere scene with mixed lighting (import
        directly; it depends on the camera package)

Scene data is organized for kernel access:
    - Structure-of-Arrays layout for sphere and light attributes
    - Light variants flattened to (kind, intensity, vector) triples
    - Sphere order preserved so intersection ties resolve deterministically
"""

from .intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    HitRecord,
    clear_scene,
    closest_intersection,
    closest_intersection_impl,
    get_light_count,
    get_loaded_scene,
    get_sphere_count,
    intersect_ray_sphere,
    intersect_ray_sphere_impl,
    load_scene,
)
from .model import (
    NO_SPECULAR,
    AmbientLight,
    DirectionalLight,
    Light,
    LightKind,
    PointLight,
    Scene,
    Sphere,
    light_kind,
    light_vector,
)

__all__ = [
    # Model
    "Scene",
    "Sphere",
    "Light",
    "LightKind",
    "AmbientLight",
    "PointLight",
    "DirectionalLight",
    "NO_SPECULAR",
    "light_kind",
    "light_vector",
    # Intersection
    "HitRecord",
    "load_scene",
    "clear_scene",
    "get_loaded_scene",
    "get_sphere_count",
    "get_light_count",
    "intersect_ray_sphere",
    "intersect_ray_sphere_impl",
    "closest_intersection",
    "closest_intersection_impl",
    "MAX_SPHERES",
    "MAX_LIGHTS",
]
