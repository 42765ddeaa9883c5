"""Tests for scene upload and ray-sphere intersection.

Tests cover:
- Loading and clearing the kernel-side scene storage
- Quadratic roots for a single sphere (hit, miss, tangent)
- Closest hit selection with inclusive bounds and deterministic ties
"""

import math

import pytest
import taichi as ti


def _unit_sphere(z=3.0, color=(255, 0, 0)):
    from src.celtrace.scene.model import Sphere

    return Sphere(center=(0, 0, z), radius=1, color=color)


class TestSceneStorage:
    """Tests for uploading scenes into Taichi fields."""

    def test_load_scene_counts(self):
        """Test that sphere and light counts match the scene."""
        from src.celtrace.scene.intersection import get_light_count, get_sphere_count, load_scene
        from src.celtrace.scene.model import AmbientLight, PointLight, Scene

        scene = Scene(
            spheres=[_unit_sphere(), _unit_sphere(z=5.0)],
            lights=[AmbientLight(0.2), PointLight(0.6, (2, 1, 0))],
        )
        load_scene(scene)

        assert get_sphere_count() == 2
        assert get_light_count() == 2

    def test_load_scene_writes_fields(self):
        """Test that sphere and light attributes land in the fields."""
        from src.celtrace.scene.intersection import (
            light_intensities,
            light_kinds,
            light_vectors,
            load_scene,
            sphere_colors,
            sphere_radii,
            sphere_reflectives,
            sphere_speculars,
        )
        from src.celtrace.scene.model import DirectionalLight, LightKind, Scene, Sphere

        sphere = Sphere((2, 0, 4), 1.5, (0, 0, 255), specular=250, reflective=0.25)
        scene = Scene(spheres=[sphere], lights=[DirectionalLight(0.2, (1, 4, 4))])
        load_scene(scene)

        assert sphere_radii[0] == 1.5
        assert sphere_speculars[0] == 250.0
        assert sphere_reflectives[0] == 0.25
        assert sphere_colors.to_numpy()[0].tolist() == [0.0, 0.0, 255.0]
        assert light_kinds[0] == int(LightKind.DIRECTIONAL)
        assert light_intensities[0] == 0.2
        assert light_vectors.to_numpy()[0].tolist() == [1.0, 4.0, 4.0]

    def test_clear_scene(self):
        """Test that clearing removes everything."""
        from src.celtrace.scene.intersection import (
            clear_scene,
            get_loaded_scene,
            get_sphere_count,
            load_scene,
        )
        from src.celtrace.scene.model import Scene

        load_scene(Scene(spheres=[_unit_sphere()]))
        clear_scene()

        assert get_sphere_count() == 0
        assert get_loaded_scene() is None

    def test_reloading_same_scene_is_noop(self):
        """Test that the loaded scene is tracked by identity."""
        from src.celtrace.scene.intersection import get_loaded_scene, load_scene
        from src.celtrace.scene.model import Scene

        scene = Scene(spheres=[_unit_sphere()])
        load_scene(scene)
        load_scene(scene)
        assert get_loaded_scene() is scene

    def test_too_many_spheres(self):
        """Test that exceeding the sphere capacity raises."""
        from src.celtrace.scene.intersection import MAX_SPHERES, load_scene
        from src.celtrace.scene.model import Scene

        scene = Scene(spheres=[_unit_sphere()] * (MAX_SPHERES + 1))
        with pytest.raises(RuntimeError, match="spheres"):
            load_scene(scene)


class TestIntersectRaySphere:
    """Tests for the single-sphere quadratic solve."""

    def test_two_roots(self):
        """Test a head-on ray: '+' root first, '-' root second."""
        from src.celtrace.scene.intersection import intersect_ray_sphere

        roots = intersect_ray_sphere((0, 0, 0), (0, 0, 1), _unit_sphere())
        assert roots == pytest.approx((4.0, 2.0))

    def test_ray_from_sphere_centre(self):
        """Test that roots are symmetric about a centre-origin ray."""
        from src.celtrace.scene.intersection import intersect_ray_sphere
        from src.celtrace.scene.model import Sphere

        sphere = Sphere(center=(0, 0, 0), radius=2.5, color=(0, 0, 0))
        roots = intersect_ray_sphere((0, 0, 0), (0.6, 0.0, 0.8), sphere)
        assert roots == pytest.approx((2.5, -2.5))

    def test_miss_returns_none(self):
        """Test that a negative discriminant reports no intersection."""
        from src.celtrace.scene.intersection import intersect_ray_sphere

        assert intersect_ray_sphere((0, 0, 0), (0, 1, 0), _unit_sphere()) is None

    def test_tangent_ray_double_root(self):
        """Test that a grazing ray yields equal roots."""
        from src.celtrace.scene.intersection import intersect_ray_sphere

        t1, t2 = intersect_ray_sphere((1, 0, 0), (0, 0, 1), _unit_sphere())
        assert t1 == pytest.approx(3.0)
        assert t2 == pytest.approx(3.0)

    def test_unnormalized_direction(self):
        """Test that roots scale with the direction length."""
        from src.celtrace.scene.intersection import intersect_ray_sphere

        roots = intersect_ray_sphere((0, 0, 0), (0, 0, 2), _unit_sphere())
        assert roots == pytest.approx((2.0, 1.0))

    def test_kernel_side_miss_sentinel(self):
        """Test that the kernel function returns (inf, inf) on a miss."""
        from src.celtrace.core.vector import vec3
        from src.celtrace.scene.intersection import intersect_ray_sphere_impl

        roots = ti.field(dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            t1, t2 = intersect_ray_sphere_impl(
                vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), vec3(0.0, 0.0, 3.0), 1.0
            )
            roots[0] = t1
            roots[1] = t2

        test_kernel()
        assert math.isinf(roots[0])
        assert math.isinf(roots[1])


class TestClosestIntersection:
    """Tests for closest-hit search over the scene."""

    def test_empty_scene_misses(self):
        """Test that a scene with no spheres is never hit."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        assert closest_intersection(Scene(), (0, 0, 0), (0, 0, 1), 1.0, math.inf) is None

    def test_nearest_root_selected(self):
        """Test that the front surface is returned."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        sphere = _unit_sphere()
        hit = closest_intersection(Scene(spheres=[sphere]), (0, 0, 0), (0, 0, 1), 1.0, math.inf)
        assert hit is not None
        assert hit[0] is sphere
        assert hit[1] == pytest.approx(2.0)

    def test_nearest_sphere_selected(self):
        """Test that the closer of two spheres wins regardless of order."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        far = _unit_sphere(z=10.0)
        near = _unit_sphere(z=3.0)
        hit = closest_intersection(
            Scene(spheres=[far, near]), (0, 0, 0), (0, 0, 1), 1.0, math.inf
        )
        assert hit[0] is near

    def test_t_min_skips_front_surface(self):
        """Test that roots below t_min are ignored."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        hit = closest_intersection(
            Scene(spheres=[_unit_sphere()]), (0, 0, 0), (0, 0, 1), 3.0, math.inf
        )
        assert hit[1] == pytest.approx(4.0)

    def test_bounds_are_inclusive(self):
        """Test that a root exactly at t_min or t_max is accepted."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        scene = Scene(spheres=[_unit_sphere()])
        assert closest_intersection(scene, (0, 0, 0), (0, 0, 1), 2.0, math.inf)[1] == 2.0
        assert closest_intersection(scene, (0, 0, 0), (0, 0, 1), 0.0, 2.0)[1] == 2.0

    def test_t_max_excludes_far_hits(self):
        """Test that hits beyond t_max are not reported."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        scene = Scene(spheres=[_unit_sphere()])
        assert closest_intersection(scene, (0, 0, 0), (0, 0, 1), 1.0, 1.5) is None

    def test_tie_goes_to_first_sphere(self):
        """Test that coincident spheres resolve to scene order."""
        from src.celtrace.scene.intersection import closest_intersection
        from src.celtrace.scene.model import Scene

        first = _unit_sphere(color=(255, 0, 0))
        second = _unit_sphere(color=(0, 255, 0))
        hit = closest_intersection(
            Scene(spheres=[first, second]), (0, 0, 0), (0, 0, 1), 1.0, math.inf
        )
        assert hit[0] is first
