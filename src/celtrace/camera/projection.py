"""Camera model and canvas-to-viewport projection.

The camera sits at ``position`` and looks down its local +z axis. A canvas
pixel (cx, cy), measured from the canvas centre with y pointing up, maps to
the viewport point

    (cx * Vw / Cw, cy * Vh / Ch, d)

where Vw x Vh is the viewport size, Cw x Ch the canvas size and d the
projection distance. That point is then rotated by the camera's 3x3
orientation matrix to give the world-space ray direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.camera.projection import Camera, setup_camera
    >>> from src.celtrace.scene.model import Scene
    >>> setup_camera(Camera(), Scene())
"""

import math
from dataclasses import dataclass

import taichi as ti

from src.celtrace.core.vector import multiply_matrix_vector, vec3
from src.celtrace.scene.model import Scene, Vector3

Matrix3 = tuple[Vector3, Vector3, Vector3]

IDENTITY_ROTATION: Matrix3 = (
    (1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, 0.0, 1.0),
)


@dataclass(frozen=True)
class Camera:
    """Camera position and orientation.

    Attributes:
        position: Camera position in world space; every primary ray starts here.
        rotation: Row-major 3x3 matrix rotating view-space directions into
            world space.
    """

    position: Vector3 = (0.0, 0.0, 0.0)
    rotation: Matrix3 = IDENTITY_ROTATION

    def __post_init__(self) -> None:
        if len(self.position) != 3:
            raise ValueError(f"Camera position must have 3 components, got {self.position!r}")
        if len(self.rotation) != 3 or any(len(row) != 3 for row in self.rotation):
            raise ValueError("Camera rotation must be a 3x3 matrix")
        object.__setattr__(self, "position", tuple(float(c) for c in self.position))
        object.__setattr__(
            self, "rotation", tuple(tuple(float(c) for c in row) for row in self.rotation)
        )


def rotation_y(degrees: float) -> Matrix3:
    """Rotation about the vertical axis, for turning the camera left/right.

    Args:
        degrees: Yaw angle; positive values turn the view toward +x.

    Returns:
        Row-major 3x3 rotation matrix.
    """
    theta = math.radians(degrees)
    c, s = math.cos(theta), math.sin(theta)
    return (
        (c, 0.0, s),
        (0.0, 1.0, 0.0),
        (-s, 0.0, c),
    )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_rotation = ti.Matrix.field(3, 3, dtype=ti.f64, shape=())

# Viewport width, height and projection distance
_viewport = ti.Vector.field(3, dtype=ti.f64, shape=())

_camera_initialized = ti.field(dtype=ti.i32, shape=())


def setup_camera(camera: Camera, scene: Scene) -> None:
    """Upload the camera and the scene's viewport geometry.

    Must be called before rendering.

    Args:
        camera: Camera position and orientation.
        scene: Scene providing viewport size and projection distance.
    """
    _camera_position[None] = list(camera.position)
    _camera_rotation[None] = [list(row) for row in camera.rotation]
    _viewport[None] = [scene.viewport_width, scene.viewport_height, scene.projection_distance]
    _camera_initialized[None] = 1


def reset_camera() -> None:
    """Mark the camera as not set up."""
    _camera_initialized[None] = 0


def is_camera_initialized() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_initialized[None])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def canvas_to_viewport(
    cx: ti.f64, cy: ti.f64, canvas_width: ti.f64, canvas_height: ti.f64
) -> vec3:
    """Map a centred canvas coordinate onto the viewport plane.

    Args:
        cx: Horizontal canvas coordinate, 0 at the centre, increasing right.
        cy: Vertical canvas coordinate, 0 at the centre, increasing up.
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.

    Returns:
        The view-space point on the viewport.
    """
    viewport = _viewport[None]
    return vec3(cx * viewport.x / canvas_width, cy * viewport.y / canvas_height, viewport.z)


@ti.func
def get_view_ray(cx: ti.f64, cy: ti.f64, canvas_width: ti.f64, canvas_height: ti.f64):
    """Primary ray through a canvas coordinate.

    Returns:
        Tuple (origin, direction) in world space. The direction is not
        normalized; t = 1 lands on the viewport plane.
    """
    rotation = _camera_rotation[None]
    direction = multiply_matrix_vector(
        rotation, canvas_to_viewport(cx, cy, canvas_width, canvas_height)
    )
    return _camera_position[None], direction


def get_camera_info() -> dict[str, tuple]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with position, rotation and viewport (width, height, distance).
    """
    position = _camera_position[None]
    rotation = _camera_rotation[None]
    viewport = _viewport[None]
    return {
        "position": tuple(float(position[i]) for i in range(3)),
        "rotation": tuple(tuple(float(rotation[i, j]) for j in range(3)) for i in range(3)),
        "viewport": tuple(float(viewport[i]) for i in range(3)),
    }
