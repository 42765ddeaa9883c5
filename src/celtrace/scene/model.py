"""Immutable scene description: spheres, lights and viewport geometry.

Scenes are built once on the host, validated at construction and then
uploaded to Taichi fields by src.celtrace.scene.intersection.load_scene().

Lights form a closed set of three variants. Each exposes ``intensity``;
light_kind() maps a variant onto the LightKind tag used inside kernels.

Example:
    >>> scene = Scene(
    ...     spheres=[Sphere(center=(0, -1, 3), radius=1, color=(255, 0, 0), specular=250)],
    ...     lights=[AmbientLight(0.2), PointLight(0.6, position=(2, 1, 0))],
    ... )
    >>> len(scene.spheres)
    1
"""

import math
from dataclasses import dataclass
from enum import IntEnum

Vector3 = tuple[float, float, float]
Color = tuple[float, float, float]

# Specular exponent meaning "matte": the specular term is skipped entirely
NO_SPECULAR = -1.0


def _as_vector(value, name: str) -> Vector3:
    """Coerce a 3-sequence to a float tuple, raising ValueError otherwise."""
    if len(value) != 3:
        raise ValueError(f"{name} must have exactly 3 components, got {value!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


@dataclass(frozen=True)
class Sphere:
    """A sphere with flat color and Phong-style material parameters.

    Attributes:
        center: Center of the sphere in world space.
        radius: Sphere radius, strictly positive.
        color: Base color on the 0-255 scale.
        specular: Specular exponent (shininess). NO_SPECULAR (-1) disables
            the specular term.
        reflective: Mirror coefficient in [0, 1]. 0 is fully matte,
            1 is a perfect mirror.
    """

    center: Vector3
    radius: float
    color: Color
    specular: float = NO_SPECULAR
    reflective: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vector(self.center, "Sphere center"))
        object.__setattr__(self, "color", _as_vector(self.color, "Sphere color"))
        if not self.radius > 0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        if not 0.0 <= self.reflective <= 1.0:
            raise ValueError(f"Sphere reflective must be in [0, 1], got {self.reflective}")


class LightKind(IntEnum):
    """Tag identifying a light variant inside Taichi kernels."""

    AMBIENT = 0
    POINT = 1
    DIRECTIONAL = 2


@dataclass(frozen=True)
class AmbientLight:
    """Uniform light added to every lit point, never shadowed."""

    intensity: float


@dataclass(frozen=True)
class PointLight:
    """Light emitted from a position in world space."""

    intensity: float
    position: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector(self.position, "Light position"))


@dataclass(frozen=True)
class DirectionalLight:
    """Light arriving from infinitely far away.

    Attributes:
        intensity: Light intensity.
        direction: Vector pointing from the scene toward the light. Need not
            be unit length but must be nonzero.
    """

    intensity: float
    direction: Vector3

    def __post_init__(self) -> None:
        direction = _as_vector(self.direction, "Light direction")
        if math.hypot(*direction) == 0.0:
            raise ValueError("Directional light direction must be nonzero")
        object.__setattr__(self, "direction", direction)


Light = AmbientLight | PointLight | DirectionalLight


def light_kind(light: Light) -> LightKind:
    """Return the kernel-side tag for a light variant.

    Raises:
        TypeError: If ``light`` is not one of the three light variants.
    """
    match light:
        case AmbientLight():
            return LightKind.AMBIENT
        case PointLight():
            return LightKind.POINT
        case DirectionalLight():
            return LightKind.DIRECTIONAL
    raise TypeError(f"Unsupported light type: {type(light).__name__}")


def light_vector(light: Light) -> Vector3:
    """Return the vector stored with a light (position or direction).

    Ambient lights carry no geometry and map to the zero vector.
    """
    match light:
        case PointLight(position=position):
            return position
        case DirectionalLight(direction=direction):
            return direction
        case AmbientLight():
            return (0.0, 0.0, 0.0)
    raise TypeError(f"Unsupported light type: {type(light).__name__}")


@dataclass(frozen=True)
class Scene:
    """Spheres and lights plus the viewport the canvas is projected onto.

    Attributes:
        spheres: Spheres in scene order. Order breaks exact intersection ties.
        lights: Lights in scene order.
        viewport_width: Width of the viewport rectangle in camera space.
        viewport_height: Height of the viewport rectangle in camera space.
        projection_distance: Distance from the camera to the viewport plane.
    """

    spheres: tuple[Sphere, ...] = ()
    lights: tuple[Light, ...] = ()
    viewport_width: float = 1.0
    viewport_height: float = 1.0
    projection_distance: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "spheres", tuple(self.spheres))
        object.__setattr__(self, "lights", tuple(self.lights))
        for light in self.lights:
            light_kind(light)
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError(
                f"Viewport must be positive, got {self.viewport_width}x{self.viewport_height}"
            )
        if self.projection_distance <= 0:
            raise ValueError(
                f"Projection distance must be positive, got {self.projection_distance}"
            )
