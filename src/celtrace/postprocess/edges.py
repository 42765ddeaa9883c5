"""Sobel edge detection and alpha compositing for cel-shading outlines.

The rendered framebuffer goes through four stages:

    1. Grayscale: average R, G and B on the 16-bit channel scale, then
       reduce back to 8 bits.
    2. Convolution: for every interior pixel, apply the horizontal and
       vertical Sobel kernels to the 3x3 grayscale neighborhood. Each
       response is clamped with a deliberately harsh rule: negative sums
       become 0 and sums above 50 jump straight to 255. This binarizes weak
       gradients into bold ink lines.
    3. Edge map: store 255 - magnitude, so strong edges are dark. The
       1-pixel border is never convolved and stays white (no edge).
    4. Composite: copy the framebuffer and use the edge map as its alpha
       channel.

Stages 1 and 2 are separate kernel launches; each is a parallel map writing
one output cell per iteration, and the launch boundary guarantees the
grayscale image is complete before any neighborhood is read.

Example:
    >>> import numpy as np
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.celtrace.postprocess.edges import run_edge_detection
    >>> framebuffer = np.full((8, 8, 4), 255, dtype=np.uint8)
    >>> result = run_edge_detection(framebuffer)
    >>> int(result.edges.min())
    255
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

# Responses above this value are pushed to full intensity
RESPONSE_CLAMP = 50

# Value written for "no edge", also used to pre-fill the border
NO_EDGE = 255

# Sobel kernels, row-major
SOBEL_X = [[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]]
SOBEL_Y = [[-1, -2, -1], [0, 0, 0], [1, 2, 1]]

# 8-bit to 16-bit channel widening (0xff -> 0xffff)
CHANNEL_WIDEN = 0x101

mat3i = ti.types.matrix(3, 3, ti.i32)


@dataclass(frozen=True)
class EdgeDetectionResult:
    """Images produced by the edge-detection pipeline.

    Attributes:
        gray: (H, W) uint8 grayscale image.
        edges: (H, W) uint8 edge map; 255 means no edge.
        final: (H, W, 4) uint8 framebuffer copy with edges as alpha.
    """

    gray: npt.NDArray[np.uint8]
    edges: npt.NDArray[np.uint8]
    final: npt.NDArray[np.uint8]


# =============================================================================
# Convolution (Taichi functions)
# =============================================================================


@ti.func
def sobel_x_kernel() -> mat3i:
    """Horizontal gradient kernel Gx."""
    return ti.Matrix(SOBEL_X, dt=ti.i32)


@ti.func
def sobel_y_kernel() -> mat3i:
    """Vertical gradient kernel Gy."""
    return ti.Matrix(SOBEL_Y, dt=ti.i32)


@ti.func
def convolve_impl(neighborhood: mat3i, gradient: mat3i) -> ti.i32:
    """Sum of elementwise products, clamped to 0 below and 255 above 50."""
    result = 0
    for i, j in ti.static(ti.ndrange(3, 3)):
        result += neighborhood[i, j] * gradient[i, j]

    if result < 0:
        result = 0
    elif result > RESPONSE_CLAMP:
        result = 255
    return result


@ti.func
def sobel_magnitude_impl(neighborhood: mat3i) -> ti.f64:
    """Gradient magnitude sqrt(Gx^2 + Gy^2) of a 3x3 neighborhood."""
    gx = convolve_impl(neighborhood, sobel_x_kernel())
    gy = convolve_impl(neighborhood, sobel_y_kernel())
    return ti.sqrt(ti.cast(gx * gx + gy * gy, ti.f64))


# =============================================================================
# Stage kernels
# =============================================================================


@ti.kernel
def _grayscale_kernel(
    framebuffer: ti.types.ndarray(dtype=ti.u8, ndim=3),
    gray: ti.types.ndarray(dtype=ti.u8, ndim=2),
):
    for row, col in ti.ndrange(framebuffer.shape[0], framebuffer.shape[1]):
        r = ti.cast(framebuffer[row, col, 0], ti.i32) * CHANNEL_WIDEN
        g = ti.cast(framebuffer[row, col, 1], ti.i32) * CHANNEL_WIDEN
        b = ti.cast(framebuffer[row, col, 2], ti.i32) * CHANNEL_WIDEN
        gray[row, col] = ti.cast(((r + g + b) // 3) >> 8, ti.u8)


@ti.kernel
def _sobel_kernel(
    gray: ti.types.ndarray(dtype=ti.u8, ndim=2),
    edges: ti.types.ndarray(dtype=ti.u8, ndim=2),
):
    for row, col in ti.ndrange((1, gray.shape[0] - 1), (1, gray.shape[1] - 1)):
        neighborhood = ti.Matrix.zero(ti.i32, 3, 3)
        for i, j in ti.static(ti.ndrange(3, 3)):
            neighborhood[i, j] = ti.cast(gray[row + i - 1, col + j - 1], ti.i32)

        magnitude = ti.min(sobel_magnitude_impl(neighborhood), 255.0)
        edges[row, col] = ti.cast(NO_EDGE - ti.cast(magnitude, ti.i32), ti.u8)


@ti.kernel
def _convolve_kernel(
    neighborhood: ti.types.ndarray(dtype=ti.i32, ndim=2),
    gradient: ti.types.ndarray(dtype=ti.i32, ndim=2),
) -> ti.i32:
    a = ti.Matrix.zero(ti.i32, 3, 3)
    k = ti.Matrix.zero(ti.i32, 3, 3)
    for i, j in ti.static(ti.ndrange(3, 3)):
        a[i, j] = neighborhood[i, j]
        k[i, j] = gradient[i, j]
    return convolve_impl(a, k)


@ti.kernel
def _sobel_magnitude_kernel(neighborhood: ti.types.ndarray(dtype=ti.i32, ndim=2)) -> ti.f64:
    a = ti.Matrix.zero(ti.i32, 3, 3)
    for i, j in ti.static(ti.ndrange(3, 3)):
        a[i, j] = neighborhood[i, j]
    return sobel_magnitude_impl(a)


# =============================================================================
# Public API
# =============================================================================


def _as_neighborhood(values) -> npt.NDArray[np.int32]:
    neighborhood = np.ascontiguousarray(values, dtype=np.int32)
    if neighborhood.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 neighborhood, got shape {neighborhood.shape}")
    return neighborhood


def convolve(neighborhood, gradient) -> int:
    """Clamped response of one 3x3 kernel over a 3x3 neighborhood.

    Args:
        neighborhood: 3x3 grayscale values.
        gradient: 3x3 integer kernel (e.g. SOBEL_X).

    Returns:
        0 for negative sums, 255 for sums above 50, the sum otherwise.
    """
    return int(_convolve_kernel(_as_neighborhood(neighborhood), _as_neighborhood(gradient)))


def sobel_magnitude(neighborhood) -> float:
    """Combined Sobel gradient magnitude of a 3x3 neighborhood."""
    return float(_sobel_magnitude_kernel(_as_neighborhood(neighborhood)))


def _check_framebuffer(framebuffer: npt.NDArray[np.uint8]) -> None:
    if framebuffer.ndim != 3 or framebuffer.shape[2] != 4 or framebuffer.dtype != np.uint8:
        raise ValueError(
            f"Framebuffer must be a (height, width, 4) uint8 array, got "
            f"{framebuffer.shape} {framebuffer.dtype}"
        )


def to_grayscale(framebuffer: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Average the RGB channels of an RGBA framebuffer.

    Args:
        framebuffer: (H, W, 4) uint8 RGBA image.

    Returns:
        (H, W) uint8 grayscale image.
    """
    _check_framebuffer(framebuffer)
    gray = np.zeros(framebuffer.shape[:2], dtype=np.uint8)
    _grayscale_kernel(np.ascontiguousarray(framebuffer), gray)
    ti.sync()
    return gray


def detect_edges(gray: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Sobel edge map of a grayscale image.

    Args:
        gray: (H, W) uint8 grayscale image.

    Returns:
        (H, W) uint8 edge map. Interior pixels hold 255 - magnitude
        (magnitude capped at 255); the 1-pixel border is NO_EDGE.
    """
    if gray.ndim != 2 or gray.dtype != np.uint8:
        raise ValueError(f"Expected an (H, W) uint8 image, got {gray.shape} {gray.dtype}")
    edges = np.full(gray.shape, NO_EDGE, dtype=np.uint8)
    if gray.shape[0] >= 3 and gray.shape[1] >= 3:
        _sobel_kernel(np.ascontiguousarray(gray), edges)
        ti.sync()
    return edges


def composite_edges(
    framebuffer: npt.NDArray[np.uint8],
    edges: npt.NDArray[np.uint8],
) -> npt.NDArray[np.uint8]:
    """Copy ``framebuffer`` with its alpha channel replaced by ``edges``.

    Raises:
        ValueError: If the edge map and framebuffer sizes differ.
    """
    _check_framebuffer(framebuffer)
    if edges.shape != framebuffer.shape[:2]:
        raise ValueError(
            f"Edge map shape {edges.shape} does not match framebuffer {framebuffer.shape[:2]}"
        )
    final = framebuffer.copy()
    final[:, :, 3] = edges
    return final


def flatten_rgba(
    image: npt.NDArray[np.uint8],
    background: tuple[int, int, int] = (0, 0, 0),
) -> npt.NDArray[np.uint8]:
    """Alpha-composite an RGBA image over an opaque background color.

    With the default black background, pixels whose alpha was lowered by a
    detected edge darken into outlines.

    Args:
        image: (H, W, 4) uint8 RGBA image.
        background: RGB color behind the image.

    Returns:
        (H, W, 3) uint8 RGB image.
    """
    _check_framebuffer(image)
    alpha = image[:, :, 3:4].astype(np.float64) / 255.0
    rgb = image[:, :, :3].astype(np.float64)
    under = np.asarray(background, dtype=np.float64).reshape(1, 1, 3)
    flat = rgb * alpha + under * (1.0 - alpha)
    return np.clip(np.rint(flat), 0, 255).astype(np.uint8)


def run_edge_detection(framebuffer: npt.NDArray[np.uint8]) -> EdgeDetectionResult:
    """Run grayscale, Sobel and compositing over a rendered framebuffer.

    Args:
        framebuffer: (H, W, 4) uint8 RGBA render. Not modified.

    Returns:
        EdgeDetectionResult with gray, edges and final images.
    """
    gray = to_grayscale(framebuffer)
    edges = detect_edges(gray)
    final = composite_edges(framebuffer, edges)
    return EdgeDetectionResult(gray=gray, edges=edges, final=final)
