"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview of the render and its stages
    export: PNG export of the framebuffer and edge-detection images

Example:
    >>> from src.celtrace.preview import save_outputs, show_stages
    >>> result = render_cel_shaded(scene, camera, config)
    >>> save_outputs(result, "output")
    >>> show_stages(result)
"""

from src.celtrace.preview.display import (
    STAGES,
    create_stage_figure,
    show_preview,
    show_stages,
)
from src.celtrace.preview.export import (
    OUTPUT_FILES,
    image_mode,
    save_outputs,
    save_png_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_stages",
    "create_stage_figure",
    "STAGES",
    # Export functions
    "save_outputs",
    "save_png_from_array",
    "image_mode",
    "OUTPUT_FILES",
]
