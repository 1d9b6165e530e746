"""
Composite descriptors built from the colour and texture primitives.

colour_texture is a plain concatenation, compared with split intersection
so colour and texture count equally. The custom descriptor weights four
histogram parts (centre/whole colour, centre/whole texture) to bias
matching toward objects of a given size in frame.
"""

import numpy as np
import logging
from typing import Sequence

from .errors import InvalidArgument
from .histograms import chroma_3d
from .preprocessing import center_region
from .texture import gradient_texture

logger = logging.getLogger(__name__)

# Part weights: (centre colour, whole colour, centre texture, whole texture).
# Small objects sit in the middle of the frame; large ones fill it.
CUSTOM_PRESETS = {
    "small": (0.4, 0.1, 0.4, 0.1),
    "medium": (0.25, 0.25, 0.25, 0.25),
    "large": (0.1, 0.4, 0.1, 0.4),
}
CUSTOM_PARTS = 4


def color_texture(image_np: np.ndarray,
                  color_bins: int,
                  texture_bins: int) -> np.ndarray:
    """
    Concatenate an RGB 3D histogram and a gradient magnitude histogram.

    Returns:
        Float32 vector of length color_bins ** 3 + texture_bins. The colour
        part comes first, so split the vector at color_bins ** 3.
    """
    return np.concatenate([
        chroma_3d(image_np, color_bins),
        gradient_texture(image_np, texture_bins),
    ])


def normalize_weights(weights: Sequence[float]) -> np.ndarray:
    """
    Validate four part weights and scale them to sum to 1.

    Raises:
        InvalidArgument: On a wrong count, a negative weight, or a zero sum.
    """
    w = np.asarray(weights, dtype=np.float64).ravel()
    if w.size != CUSTOM_PARTS:
        raise InvalidArgument(f"Expected {CUSTOM_PARTS} weights, got {w.size}")
    if np.any(w < 0):
        raise InvalidArgument(f"Weights must be non-negative, got {list(w)}")
    total = w.sum()
    if total <= 0:
        raise InvalidArgument("Weights must have a positive sum")
    return w / total


def resolve_weights(weights) -> np.ndarray:
    """Accept either a preset name or an explicit weight sequence."""
    if isinstance(weights, str):
        try:
            weights = CUSTOM_PRESETS[weights]
        except KeyError:
            raise InvalidArgument(
                f"Unknown preset {weights!r}, expected one of {sorted(CUSTOM_PRESETS)}"
            ) from None
    return normalize_weights(weights)


def custom_descriptor(image_np: np.ndarray,
                      bins: int,
                      weights) -> np.ndarray:
    """
    Weighted four-part colour/texture descriptor.

    Parts, in order:
        [0]  RGB 3D histogram of the centre region      (bins^3)
        [1]  RGB 3D histogram of the whole image        (bins^3)
        [2]  gradient histogram of the centre region    (bins)
        [3]  gradient histogram of the whole image      (bins)

    Every part sums to 1 before weighting and the weights are normalized,
    so the whole vector sums to 1 and plain histogram intersection applies.

    Args:
        image_np: BGR uint8 image.
        bins: Bins per colour channel, also used for the texture parts.
        weights: Four part weights, or a CUSTOM_PRESETS name.

    Returns:
        Float32 vector of length 2 * bins^3 + 2 * bins.
    """
    w = resolve_weights(weights)
    center = center_region(image_np)

    parts = [
        chroma_3d(center, bins),
        chroma_3d(image_np, bins),
        gradient_texture(center, bins),
        gradient_texture(image_np, bins),
    ]
    weighted = [part.astype(np.float64) * weight for part, weight in zip(parts, w)]
    return np.concatenate(weighted).astype(np.float32)
