"""
Retrieval configuration.

Every extractor and metric takes its parameters from a RetrievalConfig
passed in by the caller. Environment variables only provide the defaults
used by RetrievalConfig.from_env(); nothing in the engine reads them at
call time.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple

from .composite import CUSTOM_PRESETS, resolve_weights
from .errors import InvalidArgument
from .texture import GLCM_OFFSETS


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidArgument(f"{name}: {e}") from e


@dataclass(frozen=True)
class RetrievalConfig:
    """Bin counts, GLCM parameters and custom weights for all descriptors."""

    bins_2d: int = 16
    bins_3d: int = 8
    multi_bins: int = 8
    color_bins: int = 8
    texture_bins: int = 16
    custom_bins: int = 8
    custom_weights: Tuple[float, ...] = field(default=CUSTOM_PRESETS["medium"])
    glcm_distance: int = 1
    glcm_angle: int = 0
    glcm_levels: int = 8

    def __post_init__(self):
        for name in ("bins_2d", "bins_3d", "multi_bins", "color_bins",
                     "texture_bins", "custom_bins", "glcm_distance", "glcm_levels"):
            value = getattr(self, name)
            if value < 1:
                raise InvalidArgument(f"{name} must be >= 1, got {value}")
        if self.glcm_angle not in GLCM_OFFSETS:
            raise InvalidArgument(f"Unsupported GLCM angle {self.glcm_angle}")
        resolve_weights(self.custom_weights)

    @classmethod
    def from_env(cls) -> "RetrievalConfig":
        """Build a config from CBIR_* environment variables, falling back to defaults."""
        preset = os.environ.get("CBIR_CUSTOM_PRESET", "medium")
        raw_weights = os.environ.get("CBIR_CUSTOM_WEIGHTS")
        if raw_weights:
            try:
                weights = tuple(float(w) for w in raw_weights.split(","))
            except ValueError as e:
                raise InvalidArgument(f"CBIR_CUSTOM_WEIGHTS: {e}") from e
        else:
            weights = tuple(resolve_weights(preset))

        return cls(
            bins_2d=_env_int("CBIR_BINS_2D", 16),
            bins_3d=_env_int("CBIR_BINS_3D", 8),
            multi_bins=_env_int("CBIR_MULTI_BINS", 8),
            color_bins=_env_int("CBIR_COLOR_BINS", 8),
            texture_bins=_env_int("CBIR_TEXTURE_BINS", 16),
            custom_bins=_env_int("CBIR_CUSTOM_BINS", 8),
            custom_weights=weights,
            glcm_distance=_env_int("CBIR_GLCM_DISTANCE", 1),
            glcm_angle=_env_int("CBIR_GLCM_ANGLE", 0),
            glcm_levels=_env_int("CBIR_GLCM_LEVELS", 8),
        )
