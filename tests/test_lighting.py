"""Tests for light accumulation and cel-shading quantization.

Tests cover:
- The four quantization bands and their strict boundaries
- Ambient, diffuse and specular contributions
- Shadow rays for point and directional lights
"""

import pytest

# Band values for the default threshold T = 1.2
HIGH = 0.95 * 1.2
MID = 0.50 * 1.2
LOW = 0.30 * 1.2
FLOOR = 0.05 * 1.2

ORIGIN = (0.0, 0.0, 0.0)
UP = (0.0, 1.0, 0.0)


class TestQuantizeIntensity:
    """Tests for the four-band quantizer."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (10.0, HIGH),
            (1.2, HIGH),
            (0.9, MID),
            (0.5, LOW),
            (0.2, FLOOR),
            (0.0, FLOOR),
            (-1.0, FLOOR),
        ],
    )
    def test_bands(self, raw, expected):
        """Test that raw intensities snap to the expected band."""
        from src.celtrace.shading.lighting import quantize_intensity

        assert quantize_intensity(raw) == pytest.approx(expected)

    def test_boundaries_are_strict(self):
        """Test that a value exactly on a band edge falls to the band below."""
        from src.celtrace.shading.lighting import quantize_intensity

        assert quantize_intensity(0.5, threshold=1.0) == pytest.approx(0.30)
        assert quantize_intensity(0.3, threshold=1.0) == pytest.approx(0.05)

    def test_custom_threshold(self):
        """Test that bands scale with the threshold."""
        from src.celtrace.shading.lighting import quantize_intensity

        assert quantize_intensity(5.0, threshold=2.0) == pytest.approx(1.9)
        assert quantize_intensity(1.5, threshold=2.0) == pytest.approx(1.0)


class TestAmbientLight:
    """Tests for ambient-only lighting."""

    @pytest.mark.parametrize(
        "intensity, expected",
        [(0.2, FLOOR), (0.5, LOW), (1.0, MID), (2.0, HIGH)],
    )
    def test_ambient_levels(self, intensity, expected):
        """Test that ambient intensity passes through the quantizer."""
        from src.celtrace.scene.model import AmbientLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(lights=[AmbientLight(intensity)])
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(expected)

    def test_no_lights(self):
        """Test that an unlit point still gets the floor band."""
        from src.celtrace.scene.model import Scene
        from src.celtrace.shading.lighting import compute_lighting

        assert compute_lighting(Scene(), ORIGIN, UP, UP, -1) == pytest.approx(FLOOR)


class TestDiffuseAndSpecular:
    """Tests for point and directional light contributions."""

    def test_point_light_overhead(self):
        """Test full diffuse from a light straight along the normal."""
        from src.celtrace.scene.model import AmbientLight, PointLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(lights=[AmbientLight(0.2), PointLight(1.0, (0, 2, 0))])
        # 0.2 + 1.0 > 0.95T
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(HIGH)

    def test_light_behind_surface_ignored(self):
        """Test that a light below the surface adds no diffuse."""
        from src.celtrace.scene.model import AmbientLight, PointLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(lights=[AmbientLight(0.2), PointLight(1.0, (0, -2, 0))])
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(FLOOR)

    def test_diffuse_uses_cosine(self):
        """Test that a 60 degree light contributes half its intensity."""
        from src.celtrace.scene.model import DirectionalLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        # cos(60) = 0.5, so 1.0 * 0.5 = 0.5 -> 0.3T band (0.5 <= 0.6)
        scene = Scene(lights=[DirectionalLight(1.0, (3**0.5, 1.0, 0.0))])
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(LOW)

    def test_specular_adds_highlight(self):
        """Test that a mirrored light facing the viewer adds a highlight."""
        from src.celtrace.scene.model import PointLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(lights=[PointLight(0.5, (0, 2, 0))])
        # Diffuse 0.5 alone sits in the 0.3T band
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(LOW)
        # Diffuse 0.5 + specular 0.5 * 1^10 = 1.0 reaches the 0.5T band
        assert compute_lighting(scene, ORIGIN, UP, UP, 10) == pytest.approx(MID)

    def test_specular_facing_away_from_viewer(self):
        """Test that no highlight is added when the reflection points away."""
        from src.celtrace.scene.model import PointLight, Scene
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(lights=[PointLight(0.5, (0, 2, 0))])
        assert compute_lighting(scene, ORIGIN, UP, (0, -1, 0), 10) == pytest.approx(LOW)


class TestShadows:
    """Tests for shadow rays."""

    def test_sphere_between_point_and_light(self):
        """Test that an occluder blocks a point light."""
        from src.celtrace.scene.model import AmbientLight, PointLight, Scene, Sphere
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(
            spheres=[Sphere((0, 1, 0), 0.25, (255, 255, 255))],
            lights=[AmbientLight(0.2), PointLight(1.0, (0, 2, 0))],
        )
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(FLOOR)

    def test_sphere_beyond_point_light_does_not_shadow(self):
        """Test that geometry past a point light casts no shadow."""
        from src.celtrace.scene.model import AmbientLight, PointLight, Scene, Sphere
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(
            spheres=[Sphere((0, 5, 0), 1, (255, 255, 255))],
            lights=[AmbientLight(0.2), PointLight(1.0, (0, 2, 0))],
        )
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(HIGH)

    def test_directional_light_shadowed_at_any_distance(self):
        """Test that a directional light is blocked by far geometry."""
        from src.celtrace.scene.model import AmbientLight, DirectionalLight, Scene, Sphere
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(
            spheres=[Sphere((0, 50, 0), 1, (255, 255, 255))],
            lights=[AmbientLight(0.2), DirectionalLight(1.0, (0, 1, 0))],
        )
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(FLOOR)

    def test_ambient_never_shadowed(self):
        """Test that ambient light ignores occluders."""
        from src.celtrace.scene.model import AmbientLight, Scene, Sphere
        from src.celtrace.shading.lighting import compute_lighting

        scene = Scene(
            spheres=[Sphere((0, 1, 0), 0.25, (255, 255, 255))],
            lights=[AmbientLight(1.0)],
        )
        assert compute_lighting(scene, ORIGIN, UP, UP, -1) == pytest.approx(MID)
