"""Shared test fixtures."""

import numpy as np
import pytest
from PIL import Image

WHITE = (255, 255, 255, 255)


def make_pixels(rows):
    """Build a (height, width, 4) uint8 array from nested lists of RGBA tuples."""
    return np.array(rows, dtype=np.uint8).reshape(len(rows), len(rows[0]), 4)


def blue_pixel(b, alpha=255):
    """A bright pixel whose r * g * b product grows with `b`."""
    return (255, 255, b, alpha)


def pixel_multiset(pixels):
    return sorted(map(tuple, pixels.reshape(-1, 4).tolist()))


@pytest.fixture
def random_image():
    rng = np.random.RandomState(1234)
    return rng.randint(0, 256, size=(12, 16, 4), dtype=np.uint8)


@pytest.fixture
def image_file(tmp_path, random_image):
    path = tmp_path / "input.png"
    Image.fromarray(random_image).save(path)
    return path
