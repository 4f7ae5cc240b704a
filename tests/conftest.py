"""
Pytest configuration and shared fixtures for Open Editor tests.

This module provides shared test images and encoded byte streams
used across multiple test modules.
"""

from io import BytesIO

import numpy as np
import pytest

from OE_Libs.ImageEditingLib.image_models import RasterImage


def encode_pil(image, fmt="PNG", **kwargs) -> bytes:
    """Encode a PIL image to bytes."""
    buffer = BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def make_gradient(width: int, height: int) -> RasterImage:
    """Image where every pixel is distinguishable from its neighbours."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.stack(
        [xs % 256, ys % 256, (xs * 7 + ys * 13) % 256, np.full_like(xs, 255)],
        axis=-1,
    ).astype(np.uint8)
    return RasterImage.from_pixels(pixels)


@pytest.fixture
def gradient_image():
    """A 60x40 RGBA image with unique-ish pixels."""
    return make_gradient(60, 40)


@pytest.fixture
def noisy_image():
    """A 128x128 random RGBA image (opaque) that compresses poorly."""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(128, 128, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return RasterImage.from_pixels(pixels)


@pytest.fixture
def solid_red():
    """A 100x100 opaque red image."""
    return RasterImage.new(100, 100, (255, 0, 0, 255))


@pytest.fixture
def wide_png_bytes():
    """PNG bytes of a 1000x500 image."""
    return encode_pil(make_gradient(1000, 500).image, "PNG")


@pytest.fixture
def small_png_bytes():
    """PNG bytes of a 100x50 image."""
    return encode_pil(make_gradient(100, 50).image, "PNG")
