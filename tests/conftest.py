"""
Pytest configuration and shared fixtures for the mask editor tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import pytest
from PIL import Image

from IM_Libs.MaskEditingLib.mask_models import BrushState, DisplayRect, SourceImage


@pytest.fixture
def landscape_source():
    """1600x1200 image (4:3)."""
    return SourceImage(1600, 1200)


@pytest.fixture
def matching_rect():
    """400x300 display box with the same aspect as landscape_source."""
    return DisplayRect(left=0, top=0, width=400, height=300)


@pytest.fixture
def small_source():
    """Small image where the brush is never scaled up."""
    return SourceImage(200, 100)


@pytest.fixture
def paint_brush():
    return BrushState(mode="paint", diameter=20)


@pytest.fixture
def sample_image_path(tmp_path):
    """
    Write a 120x80 RGB PNG to a temporary directory.

    Returns:
        Path to the image file
    """
    path = tmp_path / "photo.png"
    Image.new("RGB", (120, 80), (30, 120, 200)).save(path)
    return path


@pytest.fixture
def mask_colors():
    """
    The only two colors a binary mask may contain.

    Returns:
        List of (R, G, B, A) tuples
    """
    return [
        (0, 0, 0, 255),        # Black
        (255, 255, 255, 255),  # White
    ]
