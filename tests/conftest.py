"""Shared test fixtures for image retrieval tests."""

import numpy as np
import cv2
import pytest


@pytest.fixture
def red_square_image():
    """Generate a 200x200 red square on white background (BGR)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    img[40:160, 40:160] = [30, 30, 200]  # Red square
    return img


@pytest.fixture
def blue_circle_image():
    """Generate a 200x200 blue circle on white background (BGR)."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 255
    cv2.circle(img, (100, 100), 60, (200, 30, 30), -1)
    return img


@pytest.fixture
def split_image():
    """Top half green, bottom half red (BGR)."""
    img = np.zeros((100, 80, 3), dtype=np.uint8)
    img[:50] = [0, 200, 0]
    img[50:] = [0, 0, 200]
    return img


@pytest.fixture
def textured_image():
    """Generate a 200x200 checkerboard with 20px cells."""
    img = np.ones((200, 200, 3), dtype=np.uint8) * 200
    for y in range(0, 200, 20):
        for x in range(0, 200, 20):
            if (x // 20 + y // 20) % 2 == 0:
                img[y:y+20, x:x+20] = [50, 50, 50]
    return img


@pytest.fixture
def pixel_checkerboard():
    """64x64 single-pixel black/white checkerboard."""
    yy, xx = np.indices((64, 64))
    gray = np.where((xx + yy) % 2 == 0, 0, 255).astype(np.uint8)
    return np.dstack([gray, gray, gray])


@pytest.fixture
def uniform_image():
    """64x64 uniform mid-gray image."""
    return np.full((64, 64, 3), 128, dtype=np.uint8)


@pytest.fixture
def noise_image():
    """Generate a 200x200 random noise image."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 255, (200, 200, 3), dtype=np.uint8)


@pytest.fixture
def bin_boundary_image():
    """3x2 gray/primary pixels straddling the 3-bin boundaries at 85/86 and 170/171 (BGR)."""
    return np.array([
        [[85, 85, 85], [86, 86, 86]],
        [[170, 170, 170], [171, 171, 171]],
        [[0, 0, 255], [255, 0, 0]],
    ], dtype=np.uint8)
