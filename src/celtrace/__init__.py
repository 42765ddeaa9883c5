"""Cel-shaded sphere ray tracer built on Taichi.

This package renders a static scene of spheres with Whitted-style recursive
reflection, quantizes the lighting into flat cel-shading bands and then runs
a Sobel edge detector over the result to produce ink outlines.

Subpackages:
    core: Vector algebra, ray tracer, render kernel and pipeline orchestration
    scene: Scene model, default scene and ray-scene intersection
    shading: Light accumulation and cel-shading quantization
    camera: Camera model and canvas-to-viewport projection
    postprocess: Grayscale, Sobel edge detection and alpha compositing
    preview: PNG export and Matplotlib preview

Taichi must be initialized with ``default_fp=ti.f64`` before importing the
subpackages that declare fields (scene, shading, camera, core.renderer).
"""

__version__ = "0.1.0"
