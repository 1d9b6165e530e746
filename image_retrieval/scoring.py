"""
Distance and similarity metrics for feature vectors.

Each metric carries an explicit polarity: SSD is a distance (lower is
better), the intersections and cosine similarity are similarities (higher
is better). The ranker reads the polarity to pick the sort direction.

All metrics reject vectors of unequal length with DimensionMismatch
instead of silently truncating.
"""

import enum
import logging
from functools import partial
from typing import Callable, NamedTuple

import numpy as np

from .errors import DimensionMismatch, InvalidArgument

logger = logging.getLogger(__name__)


class Polarity(enum.Enum):
    LOWER_IS_BETTER = "lower"
    HIGHER_IS_BETTER = "higher"


class Metric(NamedTuple):
    """A named scoring function plus the direction in which it improves."""

    name: str
    func: Callable[[np.ndarray, np.ndarray], float]
    polarity: Polarity

    def __call__(self, vec1: np.ndarray, vec2: np.ndarray) -> float:
        return self.func(vec1, vec2)

    @property
    def higher_is_better(self) -> bool:
        return self.polarity is Polarity.HIGHER_IS_BETTER


def _as_pair(vec1, vec2):
    a = np.asarray(vec1, dtype=np.float64).ravel()
    b = np.asarray(vec2, dtype=np.float64).ravel()
    if a.shape != b.shape:
        raise DimensionMismatch(
            f"Feature vectors must be of the same size: {a.size} vs {b.size}"
        )
    return a, b


def compute_ssd(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """Sum of squared differences. 0 for identical vectors."""
    a, b = _as_pair(vec1, vec2)
    diff = a - b
    return float(np.dot(diff, diff))


def histogram_intersection(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """
    Sum of per-bin minima.

    For two L1-normalized histograms the result lies in [0, 1], with 1
    meaning identical distributions.
    """
    a, b = _as_pair(vec1, vec2)
    return float(np.minimum(a, b).sum())


def split_intersection(vec1: np.ndarray,
                       vec2: np.ndarray,
                       split_point: int) -> float:
    """
    Average of histogram intersections over [0, split) and [split, len).

    Used for concatenated descriptors (top/bottom halves, colour/texture)
    so each part counts equally regardless of its bin count.

    Raises:
        InvalidArgument: If split_point is not strictly inside the vector.
        DimensionMismatch: If the vectors differ in length.
    """
    a, b = _as_pair(vec1, vec2)
    if not 0 < split_point < a.size:
        raise InvalidArgument(
            f"split_point must satisfy 0 < split_point < {a.size}, got {split_point}"
        )
    first = np.minimum(a[:split_point], b[:split_point]).sum()
    second = np.minimum(a[split_point:], b[split_point:]).sum()
    return float((first + second) / 2.0)


def cosine_similarity(vec1: np.ndarray, vec2: np.ndarray) -> float:
    """
    Cosine of the angle between two vectors, in [-1, 1].

    Undefined for an all-zero vector; NaN is returned in that case and the
    ranker places NaN scores last.
    """
    a, b = _as_pair(vec1, vec2)
    denom = np.linalg.norm(a) * np.linalg.norm(b)
    if denom == 0:
        logger.debug("cosine_similarity on a zero vector, returning NaN")
        return float("nan")
    return float(np.clip(np.dot(a, b) / denom, -1.0, 1.0))


SSD = Metric("ssd", compute_ssd, Polarity.LOWER_IS_BETTER)
INTERSECTION = Metric("intersection", histogram_intersection, Polarity.HIGHER_IS_BETTER)
COSINE = Metric("cosine", cosine_similarity, Polarity.HIGHER_IS_BETTER)


def split_metric(split_point: int) -> Metric:
    """Build a split-intersection metric bound to split_point."""
    if split_point < 1:
        raise InvalidArgument(f"split_point must be >= 1, got {split_point}")
    return Metric(
        f"split_intersection@{split_point}",
        partial(split_intersection, split_point=split_point),
        Polarity.HIGHER_IS_BETTER,
    )
