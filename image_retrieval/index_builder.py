"""
Batch feature extraction for a directory of images.

Processes every image in a directory with one descriptor and writes the
(identifier, vector) rows to a feature file that SearchEngine can load.
Unreadable images and images the descriptor rejects (e.g. smaller than
the 7x7 baseline patch) are logged and skipped, never fatal.
"""

import os
import logging
from typing import Optional

import cv2

from .config import RetrievalConfig
from .descriptors import Descriptor, extract, has_extractor
from .errors import InvalidArgument, InvalidInput
from .feature_store import write_features

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tif', '.tiff', '.bmp'}


def list_images(image_dir: str) -> list:
    """Sorted image filenames in image_dir, filtered by extension."""
    return sorted(
        f for f in os.listdir(image_dir)
        if os.path.splitext(f)[1].lower() in IMAGE_EXTENSIONS
    )


def build_index(image_dir: str,
                output_path: str,
                descriptor,
                config: Optional[RetrievalConfig] = None) -> dict:
    """
    Extract one descriptor from every image in a directory.

    Identifiers are the image paths joined from image_dir and the filename,
    so a query image from the same directory finds itself first.

    Args:
        image_dir: Directory containing images.
        output_path: Feature CSV to (re)write.
        descriptor: Descriptor member or tag.
        config: Extraction parameters; defaults to RetrievalConfig().

    Returns:
        Dict with 'success', 'processed', 'errors', 'dimensions' and
        'output_path'.

    Raises:
        InvalidArgument: If the descriptor has no built-in extractor.
    """
    if not isinstance(descriptor, Descriptor):
        descriptor = Descriptor.from_tag(descriptor)
    if not has_extractor(descriptor):
        raise InvalidArgument(
            f"Descriptor {descriptor.value!r} vectors must be produced externally"
        )
    config = config or RetrievalConfig()

    filenames = list_images(image_dir)
    logger.info(
        f"Building {descriptor.value} features from {len(filenames)} images in {image_dir}"
    )

    entries = []
    errors = 0
    for i, filename in enumerate(filenames):
        filepath = os.path.join(image_dir, filename)
        image = cv2.imread(filepath, cv2.IMREAD_COLOR)
        if image is None:
            logger.warning(f"Could not read: {filename}")
            errors += 1
            continue

        try:
            vector = extract(descriptor, image, config)
        except InvalidInput as e:
            logger.warning(f"Skipping {filename}: {e}")
            errors += 1
            continue

        entries.append((filepath, vector))

        if (i + 1) % 500 == 0:
            logger.info(f"Processed {i + 1}/{len(filenames)} images")

    if not entries:
        return {"success": False, "error": "No valid images processed",
                "processed": 0, "errors": errors}

    write_features(output_path, entries)
    dim = int(entries[0][1].shape[0])

    logger.info(
        f"Features built: {len(entries)} images, {dim}d vectors, {errors} errors"
    )

    return {
        "success": True,
        "processed": len(entries),
        "errors": errors,
        "dimensions": dim,
        "output_path": output_path,
    }
