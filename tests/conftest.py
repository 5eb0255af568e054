"""Shared fixtures for HeatSmith tests."""

from __future__ import annotations

import numpy as np
import pytest


@pytest.fixture
def red_blue_source():
    """Two-pixel red -> blue LUT source, shape (1, 2, 4)."""
    return np.array([[(255, 0, 0, 255), (0, 0, 255, 255)]], dtype=np.uint8)


@pytest.fixture
def gradient_source():
    """Seven-pixel source monotonic in every color channel."""
    r = np.array([0, 10, 40, 90, 160, 200, 255], dtype=np.uint8)
    g = r[::-1].copy()
    b = np.array([5, 5, 30, 30, 100, 220, 250], dtype=np.uint8)
    a = np.full(7, 255, dtype=np.uint8)
    return np.stack([r, g, b, a], axis=-1)[np.newaxis, :, :]


@pytest.fixture
def random_grid():
    """Random (5, 7) float64 grid in [-2, 12]."""
    rng = np.random.default_rng(42)
    return rng.uniform(-2.0, 12.0, size=(5, 7))


@pytest.fixture
def tmp_image_dir(tmp_path):
    """Temporary directory for test images."""
    d = tmp_path / "images"
    d.mkdir()
    return d


@pytest.fixture
def lut_png(tmp_image_dir, gradient_source):
    """Gradient LUT source written as a 1-pixel-high PNG."""
    import imageio.v3 as iio

    path = tmp_image_dir / "lut.png"
    iio.imwrite(str(path), gradient_source)
    return path
