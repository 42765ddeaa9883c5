"""Render configuration.

Bundles the canvas size, reflection budget and cel-shading threshold that
drive a render, so tests can run the full pipeline on tiny canvases.
"""

from dataclasses import dataclass

# Threshold the cel-shading bands are expressed against (0.95T, 0.5T, 0.3T, 0.05T)
INTENSITY_THRESHOLD = 1.2

# White background for rays that escape the scene
DEFAULT_BACKGROUND = (255.0, 255.0, 255.0)


@dataclass(frozen=True)
class RenderConfig:
    """Settings for a single render.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        recursion_depth: Number of reflection bounces allowed per primary ray.
            Zero disables reflections entirely.
        intensity_threshold: Reference intensity T for the four cel bands.
        background: Color (0-255 scale) returned for rays that hit nothing.
    """

    width: int = 1080
    height: int = 1080
    recursion_depth: int = 1
    intensity_threshold: float = INTENSITY_THRESHOLD
    background: tuple[float, float, float] = DEFAULT_BACKGROUND

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.recursion_depth < 0:
            raise ValueError(f"Recursion depth must be >= 0, got {self.recursion_depth}")
        if self.intensity_threshold <= 0:
            raise ValueError(
                f"Intensity threshold must be positive, got {self.intensity_threshold}"
            )
        if len(self.background) != 3:
            raise ValueError(f"Background must be an RGB triple, got {self.background!r}")
        object.__setattr__(self, "background", tuple(float(c) for c in self.background))

    @property
    def size(self) -> tuple[int, int]:
        """Canvas size as (width, height)."""
        return self.width, self.height
