"""
Feature-file search engine.

Loads a feature file produced by build_index() (or any external tool
writing the same format, e.g. a CNN embedding exporter) and answers Top-N
queries by image, by stored identifier, or by raw vector. The descriptor
fixes both the extractor used on query images and the metric.
"""

import logging
from typing import List, Optional

import numpy as np

from .config import RetrievalConfig
from .descriptors import Descriptor, extract, metric_for
from .feature_store import find_vector, read_features
from .ranking import ScoredMatch, rank

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


class SearchEngine:
    """
    Exact linear-scan search over a stored feature corpus.

    The corpus is read once at construction and not modified afterwards.
    """

    def __init__(self,
                 feature_path: str,
                 descriptor,
                 config: Optional[RetrievalConfig] = None):
        """
        Load a feature corpus from disk.

        Args:
            feature_path: Feature CSV written by build_index().
            descriptor: Descriptor member or tag the file was built with.
            config: Parameters matching the ones used at build time.
        """
        if not isinstance(descriptor, Descriptor):
            descriptor = Descriptor.from_tag(descriptor)
        self.descriptor = descriptor
        self.config = config or RetrievalConfig()
        self.metric = metric_for(descriptor, self.config)
        self.corpus = read_features(feature_path)
        logger.info(
            f"Loaded {len(self.corpus)} {descriptor.value} vectors, metric {self.metric.name}"
        )

    def search_vector(self, vector: np.ndarray, top_n: int = DEFAULT_TOP_N) -> List[ScoredMatch]:
        """Rank the corpus against an already extracted vector."""
        return rank(vector, self.corpus, self.metric, top_n)

    def search(self, query_image: np.ndarray, top_n: int = DEFAULT_TOP_N) -> List[ScoredMatch]:
        """
        Extract the query image's descriptor and rank the corpus.

        Returns:
            Up to top_n + 1 matches, best first; element 0 is usually the
            query itself when it is part of the corpus.
        """
        target = extract(self.descriptor, query_image, self.config)
        results = self.search_vector(target, top_n)
        logger.info(f"Search complete: {len(self.corpus)} candidates -> {len(results)} results")
        return results

    def search_by_id(self, identifier: str, top_n: int = DEFAULT_TOP_N) -> List[ScoredMatch]:
        """
        Rank the corpus against the stored vector of one of its entries.

        Raises:
            KeyError: If the identifier is not in the corpus.
        """
        return self.search_vector(find_vector(self.corpus, identifier), top_n)
