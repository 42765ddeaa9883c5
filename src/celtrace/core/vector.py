"""Vector and color algebra for the cel-shading ray tracer.

Vectors and colors share the same three-component float64 representation.
Colors are left unclamped while lighting is accumulated (successive intensity
multiplication can push channels past 255) and are only clamped by
normalize_color() when a pixel is written.

All functions are Taichi functions and must be called from within a kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.core.vector import add, dot, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f64:
    ...     return dot(add(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0)), vec3(1.0, 1.0, 1.0))
"""

import taichi as ti

# Three-component float64 vector, used for both positions and RGB colors
vec3 = ti.types.vector(3, ti.f64)

# 3x3 float64 matrix for camera rotation
mat3 = ti.types.matrix(3, 3, ti.f64)


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    """Component-wise sum a + b."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def subtract(a: vec3, b: vec3) -> vec3:
    """Component-wise difference a - b."""
    return vec3(a.x - b.x, a.y - b.y, a.z - b.z)


@ti.func
def multiply(v: vec3, scalar: ti.f64) -> vec3:
    """Scale a vector by a scalar."""
    return vec3(v.x * scalar, v.y * scalar, v.z * scalar)


@ti.func
def divide(v: vec3, scalar: ti.f64) -> vec3:
    """Divide a vector by a scalar.

    The caller guarantees scalar != 0. Surface normals are only divided by
    their own length, which is the (positive) sphere radius at a hit point.
    """
    return vec3(v.x / scalar, v.y / scalar, v.z / scalar)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length(v: vec3) -> ti.f64:
    """Euclidean length of a vector."""
    return ti.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


@ti.func
def multiply_matrix_vector(matrix: mat3, v: vec3) -> vec3:
    """Multiply a 3x3 matrix by a column vector.

    Args:
        matrix: Row-major 3x3 matrix.
        v: The vector to transform.

    Returns:
        matrix @ v.
    """
    return vec3(
        v.x * matrix[0, 0] + v.y * matrix[0, 1] + v.z * matrix[0, 2],
        v.x * matrix[1, 0] + v.y * matrix[1, 1] + v.z * matrix[1, 2],
        v.x * matrix[2, 0] + v.y * matrix[2, 1] + v.z * matrix[2, 2],
    )


@ti.func
def reflect_ray(ray: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal: 2 * n * (n . r) - r.

    Unlike the usual incident-direction convention, ``ray`` points away from
    the surface (toward the viewer or the light) and so does the result.

    Args:
        ray: Vector to reflect, pointing away from the surface.
        normal: Surface normal (unit length).

    Returns:
        The mirrored vector.
    """
    return subtract(multiply(normal, 2.0 * dot(normal, ray)), ray)


# =============================================================================
# Color Operations
# =============================================================================


@ti.func
def intensify_color(color: vec3, intensity: ti.f64) -> vec3:
    """Scale every channel of a color by a light intensity."""
    return vec3(color.x * intensity, color.y * intensity, color.z * intensity)


@ti.func
def add_color(a: vec3, b: vec3) -> vec3:
    """Channel-wise sum of two colors (no clamping)."""
    return vec3(a.x + b.x, a.y + b.y, a.z + b.z)


@ti.func
def normalize_color(color: vec3, display_max: ti.f64) -> vec3:
    """Clamp a color to [0, 255] and map it onto [0, display_max].

    Args:
        color: Unclamped color on the 0-255 scale.
        display_max: Upper end of the target range (255.0 for 8-bit output,
            1.0 for unit-range displays).

    Returns:
        The clamped and rescaled color.
    """
    clamped = ti.min(ti.max(color, 0.0), 255.0)
    return clamped * (display_max / 255.0)
