"""
Error taxonomy for the retrieval engine.

All errors derive from RetrievalError, itself a ValueError, so callers that
only care about "bad input" can catch ValueError.
"""


class RetrievalError(ValueError):
    """Base class for every error raised by the engine."""


class InvalidInput(RetrievalError):
    """Image is empty, too small, or has the wrong layout."""


class DimensionMismatch(RetrievalError):
    """Two vectors (or gradient images) of different shape were compared."""


class InvalidArgument(RetrievalError):
    """A numeric parameter is out of range (N < 1, bad split point, ...)."""


class EmptyCorpus(RetrievalError):
    """Ranking was requested against a corpus with no entries."""
