"""Matplotlib-based preview display for rendered images.

Example:
    >>> from src.celtrace.preview.display import show_stages
    >>> result = render_cel_shaded(scene, camera, config)
    >>> show_stages(result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from src.celtrace.core.pipeline import CelShadedRender


# Panels shown by create_stage_figure(), in order
STAGES = (
    ("render", "Render"),
    ("gray", "Grayscale"),
    ("edges", "Edges"),
    ("flat", "Cel-shaded"),
)


def _draw(ax, image: npt.NDArray[np.uint8], title: str) -> None:
    if image.ndim == 2:
        ax.imshow(image, cmap="gray", vmin=0, vmax=255)
    else:
        ax.imshow(image)
    ax.set_title(title)
    ax.axis("off")


def show_preview(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a single image as a Matplotlib figure.

    Args:
        image: (H, W), (H, W, 3) or (H, W, 4) uint8 image.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    if title is None:
        title = f"Render Preview - {image.shape[1]}x{image.shape[0]}"
    _draw(ax, image, title)

    plt.tight_layout()
    plt.show(block=block)


def create_stage_figure(
    result: CelShadedRender,
    *,
    figsize: tuple[float, float] = (16, 5),
) -> Figure:
    """Build a figure with one panel per pipeline stage.

    The figure is not shown, so this works with a non-interactive backend.

    Args:
        result: Output of render_cel_shaded().
        figsize: Figure size in inches.

    Returns:
        The Matplotlib figure.
    """
    import matplotlib.pyplot as plt

    fig, axes = plt.subplots(1, len(STAGES), figsize=figsize)
    for ax, (name, label) in zip(axes, STAGES):
        _draw(ax, getattr(result, name), label)

    fig.suptitle(
        f"{result.width}x{result.height} - render {result.render_seconds:.2f}s, "
        f"edges {result.postprocess_seconds:.2f}s"
    )
    fig.tight_layout()
    return fig


def show_stages(result: CelShadedRender, *, block: bool = True) -> None:
    """Display every pipeline stage side by side."""
    import matplotlib.pyplot as plt

    create_stage_figure(result)
    plt.show(block=block)
