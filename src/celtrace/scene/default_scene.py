"""Reference scene: three spheres on a yellow ground under mixed lighting.

The scene consists of:
- Red sphere in front, very shiny (specular 250), matte
- Blue sphere to the right, shiny and slightly reflective (0.25)
- Green sphere to the left, broad highlight (specular 5)
- Huge yellow sphere acting as the ground plane
- Ambient (0.2), point (0.6) and directional (0.2) lights

The camera sits at the origin looking down +z with no rotation, and the
viewport is a unit square one unit in front of it.

Example:
    >>> from src.celtrace.scene.default_scene import create_default_scene
    >>> scene, camera = create_default_scene()
    >>> len(scene.spheres), len(scene.lights)
    (4, 3)
"""

from src.celtrace.camera.projection import Camera
from src.celtrace.scene.model import (
    AmbientLight,
    DirectionalLight,
    PointLight,
    Scene,
    Sphere,
)

# Ground sphere radius; large enough to read as a plane from the camera
GROUND_RADIUS = 5000.0


def create_default_spheres() -> list[Sphere]:
    """Spheres of the reference scene, in scene order."""
    return [
        Sphere(center=(0, -1, 3), radius=1, color=(255, 0, 0), specular=250, reflective=0),
        Sphere(center=(2, 0, 4), radius=1, color=(0, 0, 255), specular=250, reflective=0.25),
        Sphere(center=(-2, 0, 4), radius=1, color=(0, 255, 0), specular=5, reflective=0),
        Sphere(
            center=(0, -GROUND_RADIUS - 1, 0),
            radius=GROUND_RADIUS,
            color=(255, 255, 0),
            specular=500,
            reflective=0,
        ),
    ]


def create_default_lights() -> list:
    """Lights of the reference scene, in scene order."""
    return [
        AmbientLight(intensity=0.2),
        PointLight(intensity=0.6, position=(2, 1, 0)),
        DirectionalLight(intensity=0.2, direction=(1, 4, 4)),
    ]


def create_default_scene() -> tuple[Scene, Camera]:
    """Create the reference scene and its camera.

    Returns:
        Tuple of (scene, camera).
    """
    scene = Scene(
        spheres=create_default_spheres(),
        lights=create_default_lights(),
        viewport_width=1.0,
        viewport_height=1.0,
        projection_distance=1.0,
    )
    return scene, Camera()
