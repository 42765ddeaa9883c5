"""Image export utilities for rendered images.

This module saves the framebuffer and the edge-detection intermediates as
PNG files via Pillow. The Pillow mode follows the array layout:

    (H, W)      -> "L"     grayscale / edge map
    (H, W, 3)   -> "RGB"   flattened final image
    (H, W, 4)   -> "RGBA"  framebuffer / final image with edge alpha

Example:
    >>> from src.celtrace.preview.export import save_outputs
    >>> from src.celtrace.core.pipeline import render_cel_shaded
    >>>
    >>> result = render_cel_shaded(scene, camera, config)
    >>> paths = save_outputs(result, "output")
    >>> sorted(paths)
    ['edges', 'final', 'flat', 'gray', 'render']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.celtrace.core.pipeline import CelShadedRender

logger = logging.getLogger(__name__)

# Output file name for each pipeline artifact
OUTPUT_FILES = {
    "render": "render.png",
    "gray": "gray.png",
    "edges": "edges.png",
    "flat": "flat.png",
    "final": "final.png",
}

# (ndim, channels) -> Pillow mode
_MODES = {(2, None): "L", (3, 3): "RGB", (3, 4): "RGBA"}


def image_mode(image: npt.NDArray[np.uint8]) -> str:
    """Pillow mode matching the array layout of ``image``.

    Raises:
        ValueError: If the array is not (H, W), (H, W, 3) or (H, W, 4) uint8.
    """
    if image.dtype != np.uint8:
        raise ValueError(f"Expected a uint8 image, got {image.dtype}")
    channels = image.shape[2] if image.ndim == 3 else None
    mode = _MODES.get((image.ndim, channels))
    if mode is None:
        raise ValueError(f"Unsupported image shape: {image.shape}")
    return mode


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save a uint8 NumPy array as a PNG file.

    Args:
        image: (H, W), (H, W, 3) or (H, W, 4) uint8 array.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(filepath)
    mode = image_mode(image)
    pil_image = PILImage.fromarray(np.ascontiguousarray(image))
    if pil_image.mode != mode:
        pil_image = pil_image.convert(mode)
    pil_image.save(path)
    return path


def save_outputs(result: CelShadedRender, directory: str | Path) -> dict[str, Path]:
    """Write every pipeline artifact into ``directory``.

    The directory is created if needed. Files are named after OUTPUT_FILES.

    Args:
        result: Output of render_cel_shaded().
        directory: Target directory.

    Returns:
        Mapping of artifact name to the path written.

    Raises:
        OSError: If the directory or any file cannot be written.
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    for name, filename in OUTPUT_FILES.items():
        path = save_png_from_array(getattr(result, name), out_dir / filename)
        logger.info("Saved %s to %s", name, path)
        paths[name] = path
    return paths
