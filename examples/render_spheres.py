#!/usr/bin/env python3
"""Render the default cel-shaded sphere scene.

This script renders three spheres on a large ground sphere with flat
cel-shading bands, runs Sobel edge detection over the result and writes
every stage as a PNG.

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH           Image width in pixels (default: 1080)
    --height HEIGHT         Image height in pixels (default: 1080)
    --depth DEPTH           Reflection recursion depth (default: 1)
    --threshold T           Cel-shading threshold (default: 1.2)
    --output-dir DIR        Directory for the PNG files (default: output)
    --arch {cpu,gpu}        Taichi backend (default: cpu)
    --show                  Show the stages in a Matplotlib window
    --quiet                 Only log warnings and errors
    --verbose               Log debug messages

Example:
    python -m examples.render_spheres --width 512 --height 512 --depth 2
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default cel-shaded sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1080,
        help="Image width in pixels (default: 1080)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1080,
        help="Image height in pixels (default: 1080)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=1,
        help="Reflection recursion depth (default: 1)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=1.2,
        help="Cel-shading threshold (default: 1.2)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="output",
        help="Directory for the PNG files (default: output)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the stages in a Matplotlib window",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    return parser.parse_args(argv)


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    """Send log records to stderr at the requested level."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def render_spheres(
    width: int = 1080,
    height: int = 1080,
    depth: int = 1,
    threshold: float = 1.2,
    output_dir: str = "output",
    show: bool = False,
) -> dict[str, Path]:
    """Render the default scene and save every stage.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        depth: Reflection recursion depth.
        threshold: Cel-shading threshold.
        output_dir: Directory for the PNG files.
        show: If True, display the stages with Matplotlib.

    Returns:
        Mapping of artifact name to saved file path.
    """
    # Lazy imports to allow Taichi initialization first
    from src.celtrace.core.config import RenderConfig
    from src.celtrace.core.pipeline import render_cel_shaded
    from src.celtrace.preview.export import save_outputs
    from src.celtrace.scene.default_scene import create_default_scene

    config = RenderConfig(
        width=width,
        height=height,
        recursion_depth=depth,
        intensity_threshold=threshold,
    )
    scene, camera = create_default_scene()

    start_time = time.perf_counter()
    result = render_cel_shaded(scene, camera, config)
    elapsed = time.perf_counter() - start_time
    print(f"Image size: {width}x{height}, Execution time: {elapsed:.3f}s")

    paths = save_outputs(result, output_dir)

    if show:
        from src.celtrace.preview.display import show_stages

        show_stages(result)

    return paths


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, default_fp=ti.f64)
    logger.info("Using %s backend", args.arch.upper())

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            depth=args.depth,
            threshold=args.threshold,
            output_dir=args.output_dir,
            show=args.show,
        )
        return 0
    except OSError as e:
        logger.error("Could not write output: %s", e)
        return 2
    except Exception as e:
        logger.error("Render failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
