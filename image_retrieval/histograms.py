"""
Colour histogram descriptors.

Four colour fingerprints, from crude to spatially aware:
    - raw 7x7 centre patch (baseline, compared with SSD)
    - rg chromaticity 2D histogram (brightness invariant)
    - RGB 3D histogram
    - multi-part RGB: separate 3D histograms of the top and bottom halves

Every histogram is L1-normalized so that it sums to 1, which keeps
histogram intersection bounded in [0, 1]. Input images are BGR uint8.
"""

import numpy as np
import logging

from .errors import InvalidArgument
from .preprocessing import validate_image, extract_center_patch as _center_block, split_halves

logger = logging.getLogger(__name__)


def _check_bins(bins_per_channel: int) -> None:
    if bins_per_channel < 1:
        raise InvalidArgument(f"bins_per_channel must be >= 1, got {bins_per_channel}")


def _l1_normalize(hist: np.ndarray) -> np.ndarray:
    total = hist.sum()
    if total > 0:
        hist = hist / total
    return hist.astype(np.float32)


def extract_center_patch(image_np: np.ndarray) -> np.ndarray:
    """
    Baseline descriptor: the raw samples of the 7x7 centre block.

    Flattened row-major with channel as the fastest index, so the result
    has 7 * 7 * 3 = 147 unnormalized values in B, G, R order per pixel.

    Raises:
        InvalidInput: If the image is empty or smaller than 7x7.
    """
    patch = _center_block(image_np)
    return patch.reshape(-1).astype(np.float32)


def chroma_2d(image_np: np.ndarray, bins_per_channel: int) -> np.ndarray:
    """
    Extract an L1-normalized rg-chromaticity histogram.

    Process:
        1. r = R / (R + G + B), g = G / (R + G + B) per pixel
        2. Drop pixels whose channel sum is 0 (pure black)
        3. Quantize each of r, g into bins_per_channel bins, clamping 1.0
           into the last bin
        4. Count into a bins x bins grid indexed [r_bin, g_bin]

    Args:
        image_np: BGR uint8 image.
        bins_per_channel: Number of bins along each chromaticity axis.

    Returns:
        Float32 vector of length bins_per_channel ** 2. All zeros if every
        pixel is black.
    """
    validate_image(image_np)
    _check_bins(bins_per_channel)

    pixels = image_np.reshape(-1, 3).astype(np.float32)
    total = pixels.sum(axis=1)
    keep = total > 0
    pixels, total = pixels[keep], total[keep]

    hist = np.zeros(bins_per_channel * bins_per_channel, dtype=np.float64)
    if pixels.shape[0] == 0:
        logger.debug("chroma_2d: no non-black pixels, returning empty histogram")
        return hist.astype(np.float32)

    r = pixels[:, 2] / total
    g = pixels[:, 1] / total

    bin_r = np.minimum((r * bins_per_channel).astype(np.int64), bins_per_channel - 1)
    bin_g = np.minimum((g * bins_per_channel).astype(np.int64), bins_per_channel - 1)

    np.add.at(hist, bin_r * bins_per_channel + bin_g, 1)
    return _l1_normalize(hist)


def chroma_3d(image_np: np.ndarray, bins_per_channel: int) -> np.ndarray:
    """
    Extract an L1-normalized RGB 3D histogram.

    Each channel is quantized independently with c * bins // 256; the flat
    index is R * bins^2 + G * bins + B.

    Args:
        image_np: BGR uint8 image.
        bins_per_channel: Number of bins per colour channel.

    Returns:
        Float32 vector of length bins_per_channel ** 3.
    """
    validate_image(image_np)
    _check_bins(bins_per_channel)

    pixels = image_np.reshape(-1, 3).astype(np.int64)
    binned = np.minimum(pixels * bins_per_channel // 256, bins_per_channel - 1)
    b, g, r = binned[:, 0], binned[:, 1], binned[:, 2]

    index = (r * bins_per_channel + g) * bins_per_channel + b
    hist = np.bincount(index, minlength=bins_per_channel ** 3).astype(np.float64)
    return _l1_normalize(hist)


def multi_part_rgb(image_np: np.ndarray, bins_per_channel: int) -> np.ndarray:
    """
    Concatenate the RGB histograms of the top and bottom image halves.

    The top half is the first rows // 2 rows; the bottom half takes the
    rest. Each half is normalized on its own, so the split-intersection
    metric can weigh both halves equally.

    Returns:
        Float32 vector of length 2 * bins_per_channel ** 3.
    """
    _check_bins(bins_per_channel)
    top, bottom = split_halves(image_np)
    return np.concatenate([
        chroma_3d(top, bins_per_channel),
        chroma_3d(bottom, bins_per_channel),
    ])
