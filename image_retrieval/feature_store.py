"""
Flat-file feature store.

One image per line: the identifier (usually the image path) followed by
the vector components, comma-separated. Identifiers containing commas are
quoted by the csv module. Components are written with 9 significant
digits, enough to round-trip float32 exactly.
"""

import csv
import logging
import os
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .errors import InvalidInput

logger = logging.getLogger(__name__)

CorpusEntry = Tuple[str, np.ndarray]


def _format_row(identifier: str, vector: np.ndarray) -> list:
    values = np.asarray(vector, dtype=np.float32).ravel()
    return [identifier] + [f"{float(v):.9g}" for v in values]


def append_feature_row(path: str,
                       identifier: str,
                       vector: np.ndarray,
                       reset: bool = False) -> None:
    """
    Append one (identifier, vector) line to a feature file.

    Args:
        path: CSV file path.
        identifier: Image identifier, written as the first field.
        vector: Feature vector.
        reset: Truncate the file before writing.
    """
    mode = "w" if reset else "a"
    with open(path, mode, newline="", encoding="utf-8") as f:
        csv.writer(f).writerow(_format_row(identifier, vector))


def write_features(path: str, entries: Iterable[CorpusEntry]) -> int:
    """
    Write a whole corpus, replacing any existing file.

    Returns:
        Number of rows written.
    """
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for identifier, vector in entries:
            writer.writerow(_format_row(identifier, vector))
            count += 1
    logger.info(f"Wrote {count} feature rows to {path}")
    return count


def read_features(path: str) -> List[CorpusEntry]:
    """
    Load every (identifier, vector) pair from a feature file, in file order.

    Blank lines are ignored, as is one trailing comma per row. Vector lengths
    are not checked here; the metrics reject mismatches at comparison time.

    Raises:
        InvalidInput: If a row has a non-numeric or empty component, or the
            file does not exist.
    """
    if not os.path.isfile(path):
        raise InvalidInput(f"Feature file not found: {path}")

    entries = []
    with open(path, "r", newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            if not row or not any(field.strip() for field in row):
                continue
            identifier, values = row[0], row[1:]
            # A single trailing comma leaves one empty last field
            if values and not values[-1].strip():
                values = values[:-1]
            try:
                vector = np.array([float(v) for v in values], dtype=np.float32)
            except ValueError as e:
                raise InvalidInput(f"{path}:{line_no}: bad feature value ({e})") from e
            entries.append((identifier, vector))

    logger.info(f"Loaded {len(entries)} feature rows from {path}")
    return entries


def find_vector(entries: Sequence[CorpusEntry], identifier: str) -> np.ndarray:
    """
    Return the first stored vector for an identifier.

    Raises:
        KeyError: If no entry has that identifier.
    """
    for name, vector in entries:
        if name == identifier:
            return vector
    raise KeyError(identifier)
