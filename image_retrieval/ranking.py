"""
Top-N ranking of a corpus against a target vector.

The ranker is an exact linear scan: every corpus entry is scored, then
sorted by the metric's polarity. Python's sort is stable, so ties keep
their corpus order and results are reproducible run to run.
"""

import math
import logging
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np

from .errors import EmptyCorpus, InvalidArgument
from .scoring import Metric

logger = logging.getLogger(__name__)

CorpusEntry = Tuple[str, np.ndarray]


class ScoredMatch(NamedTuple):
    identifier: str
    score: float


def score_corpus(target: np.ndarray,
                 corpus: Iterable[CorpusEntry],
                 metric: Metric) -> List[ScoredMatch]:
    """
    Score every corpus entry against the target, in corpus order.

    A DimensionMismatch from any entry propagates; nothing is skipped.
    """
    return [ScoredMatch(identifier, metric(target, vector)) for identifier, vector in corpus]


def rank_results(scored: Sequence[ScoredMatch], metric: Metric) -> List[ScoredMatch]:
    """
    Sort scored matches best first according to the metric's polarity.

    NaN scores (cosine on a zero vector) go after every real score, still
    in corpus order.
    """
    sign = -1.0 if metric.higher_is_better else 1.0

    def key(match):
        if math.isnan(match.score):
            return (1, 0.0)
        return (0, sign * match.score)

    return sorted(scored, key=key)


def rank(target: np.ndarray,
         corpus: Sequence[CorpusEntry],
         metric: Metric,
         n: int) -> List[ScoredMatch]:
    """
    Rank a corpus against a target vector and keep the best N + 1.

    The extra slot follows the convention that the target's own vector is
    in the corpus and ranks first. Use exclude_self() to drop it.

    Args:
        target: Target feature vector.
        corpus: Sequence of (identifier, vector) pairs.
        metric: Scoring metric; its polarity sets the sort direction.
        n: Number of matches wanted besides the self-match.

    Returns:
        min(n + 1, len(corpus)) ScoredMatch tuples, best first.

    Raises:
        EmptyCorpus: If the corpus has no entries.
        InvalidArgument: If n < 1.
        DimensionMismatch: If any corpus vector differs in length from target.
    """
    if n < 1:
        raise InvalidArgument(f"N must be >= 1, got {n}")
    if len(corpus) == 0:
        raise EmptyCorpus("Cannot rank against an empty corpus")

    scored = score_corpus(target, corpus, metric)
    ranked = rank_results(scored, metric)[:n + 1]

    logger.debug(
        f"Ranked {len(scored)} entries with {metric.name}, kept {len(ranked)}"
    )
    return ranked


def exclude_self(ranked: Sequence[ScoredMatch]) -> List[ScoredMatch]:
    """Drop element 0, which by convention is the target's own entry."""
    return list(ranked[1:])
