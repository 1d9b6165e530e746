"""
Image validation and region helpers shared by the descriptor modules.

Images are OpenCV-style BGR uint8 arrays of shape (rows, cols, 3). Nothing
here mutates its input; every helper returns a view or a new array.
"""

import cv2
import numpy as np
import logging

from .errors import InvalidInput

logger = logging.getLogger(__name__)

# Side length of the baseline centre patch
PATCH_SIZE = 7


def validate_image(image_np: np.ndarray) -> np.ndarray:
    """
    Check that an image is a non-empty 3-channel uint8 array.

    Args:
        image_np: BGR uint8 image.

    Returns:
        The same array, unchanged.

    Raises:
        InvalidInput: If the image is None, empty, or not (rows, cols, 3) uint8.
    """
    if image_np is None or image_np.size == 0:
        raise InvalidInput("Image is empty")
    if image_np.ndim != 3 or image_np.shape[2] != 3:
        raise InvalidInput(
            f"Expected a (rows, cols, 3) image, got shape {image_np.shape}"
        )
    if image_np.dtype != np.uint8:
        raise InvalidInput(f"Expected uint8 samples, got {image_np.dtype}")
    return image_np


def to_grayscale(image_np: np.ndarray) -> np.ndarray:
    """Convert a BGR image to single-channel uint8 grayscale."""
    validate_image(image_np)
    return cv2.cvtColor(image_np, cv2.COLOR_BGR2GRAY)


def extract_center_patch(image_np: np.ndarray,
                         patch_size: int = PATCH_SIZE) -> np.ndarray:
    """
    Cut the patch_size x patch_size block centred on (cols // 2, rows // 2).

    For the default 7x7 patch the block spans [centre - 3, centre + 4) on
    both axes.

    Args:
        image_np: BGR uint8 image.
        patch_size: Side length of the block.

    Returns:
        Array view of shape (patch_size, patch_size, 3).

    Raises:
        InvalidInput: If either image dimension is smaller than patch_size.
    """
    validate_image(image_np)
    h, w = image_np.shape[:2]
    if h < patch_size or w < patch_size:
        raise InvalidInput(
            f"Image is too small: {h}x{w}, need at least {patch_size}x{patch_size}"
        )

    center_x = w // 2
    center_y = h // 2
    half = patch_size // 2

    x1 = center_x - half
    y1 = center_y - half

    return image_np[y1:y1 + patch_size, x1:x1 + patch_size]


def split_halves(image_np: np.ndarray):
    """
    Split an image into top (rows // 2 rows) and bottom (remaining rows).

    Raises:
        InvalidInput: If the image has fewer than two rows.
    """
    validate_image(image_np)
    h = image_np.shape[0]
    if h < 2:
        raise InvalidInput("Image needs at least 2 rows to split into halves")
    mid = h // 2
    return image_np[:mid], image_np[mid:]


def center_region(image_np: np.ndarray) -> np.ndarray:
    """
    Return the middle half of the image on both axes.

    Images too small to have a non-empty middle half are returned whole.
    """
    validate_image(image_np)
    h, w = image_np.shape[:2]
    y1, y2 = h // 4, h - h // 4
    x1, x2 = w // 4, w - w // 4
    if y2 <= y1 or x2 <= x1:
        return image_np
    return image_np[y1:y2, x1:x2]
