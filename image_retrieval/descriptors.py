"""
Descriptor registry.

Maps each descriptor tag to its extractor and the metric it is compared
with. Adding a descriptor means adding one Descriptor member and one
REGISTRY entry; nothing else branches on the tag.
"""

import enum
import logging
from typing import Callable, NamedTuple, Optional

import numpy as np

from .composite import color_texture, custom_descriptor
from .config import RetrievalConfig
from .errors import InvalidArgument
from .histograms import extract_center_patch, chroma_2d, chroma_3d, multi_part_rgb
from .scoring import COSINE, INTERSECTION, SSD, Metric, split_metric
from .texture import gabor_features, glcm, gradient_texture, laws_texture

logger = logging.getLogger(__name__)


class Descriptor(enum.Enum):
    BASELINE = "b"
    CHROMA_2D = "h2"
    CHROMA_3D = "h3"
    MULTI_PART = "m"
    TEXTURE = "t"
    COLOR_TEXTURE = "tc"
    GLCM = "glcm"
    LAWS = "laws"
    GABOR = "gabor"
    CUSTOM = "c"
    EMBEDDING = "dnn"

    @classmethod
    def from_tag(cls, tag: str) -> "Descriptor":
        try:
            return cls(tag)
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            raise InvalidArgument(f"Unknown descriptor {tag!r}, expected one of: {valid}") from None


Extractor = Callable[[np.ndarray, RetrievalConfig], np.ndarray]


class DescriptorSpec(NamedTuple):
    """Extractor (None for externally computed embeddings) and metric factory."""

    extract: Optional[Extractor]
    make_metric: Callable[[RetrievalConfig], Metric]


REGISTRY = {
    Descriptor.BASELINE: DescriptorSpec(
        lambda img, cfg: extract_center_patch(img),
        lambda cfg: SSD,
    ),
    Descriptor.CHROMA_2D: DescriptorSpec(
        lambda img, cfg: chroma_2d(img, cfg.bins_2d),
        lambda cfg: INTERSECTION,
    ),
    Descriptor.CHROMA_3D: DescriptorSpec(
        lambda img, cfg: chroma_3d(img, cfg.bins_3d),
        lambda cfg: INTERSECTION,
    ),
    Descriptor.MULTI_PART: DescriptorSpec(
        lambda img, cfg: multi_part_rgb(img, cfg.multi_bins),
        lambda cfg: split_metric(cfg.multi_bins ** 3),
    ),
    Descriptor.TEXTURE: DescriptorSpec(
        lambda img, cfg: gradient_texture(img, cfg.texture_bins),
        lambda cfg: INTERSECTION,
    ),
    Descriptor.COLOR_TEXTURE: DescriptorSpec(
        lambda img, cfg: color_texture(img, cfg.color_bins, cfg.texture_bins),
        lambda cfg: split_metric(cfg.color_bins ** 3),
    ),
    Descriptor.GLCM: DescriptorSpec(
        lambda img, cfg: glcm(img, cfg.glcm_distance, cfg.glcm_angle, cfg.glcm_levels),
        lambda cfg: SSD,
    ),
    Descriptor.LAWS: DescriptorSpec(
        lambda img, cfg: laws_texture(img),
        lambda cfg: COSINE,
    ),
    Descriptor.GABOR: DescriptorSpec(
        lambda img, cfg: gabor_features(img),
        lambda cfg: SSD,
    ),
    Descriptor.CUSTOM: DescriptorSpec(
        lambda img, cfg: custom_descriptor(img, cfg.custom_bins, cfg.custom_weights),
        lambda cfg: INTERSECTION,
    ),
    Descriptor.EMBEDDING: DescriptorSpec(None, lambda cfg: COSINE),
}


def _coerce(descriptor) -> Descriptor:
    if isinstance(descriptor, Descriptor):
        return descriptor
    return Descriptor.from_tag(descriptor)


def extract(descriptor, image_np: np.ndarray,
            config: Optional[RetrievalConfig] = None) -> np.ndarray:
    """
    Extract a feature vector with the descriptor's registered extractor.

    Args:
        descriptor: Descriptor member or its tag string ("b", "h3", ...).
        image_np: BGR uint8 image.
        config: Parameters; defaults to RetrievalConfig().

    Raises:
        InvalidArgument: For an unknown tag or a descriptor without an
            extractor (embeddings are computed outside the engine).
    """
    descriptor = _coerce(descriptor)
    spec = REGISTRY[descriptor]
    if spec.extract is None:
        raise InvalidArgument(
            f"Descriptor {descriptor.value!r} has no built-in extractor; "
            f"supply precomputed vectors instead"
        )
    return spec.extract(image_np, config or RetrievalConfig())


def metric_for(descriptor, config: Optional[RetrievalConfig] = None) -> Metric:
    """Return the metric paired with a descriptor under the given config."""
    descriptor = _coerce(descriptor)
    return REGISTRY[descriptor].make_metric(config or RetrievalConfig())


def has_extractor(descriptor) -> bool:
    return REGISTRY[_coerce(descriptor)].extract is not None
