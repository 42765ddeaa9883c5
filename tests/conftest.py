"""Pytest configuration for celtrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Every kernel works
    in double precision, so default_fp must be f64.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_scene_state():
    """Clear the uploaded scene and camera before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is declared
    from src.celtrace.camera.projection import reset_camera
    from src.celtrace.scene.intersection import clear_scene

    clear_scene()
    reset_camera()

    yield

    clear_scene()
    reset_camera()
