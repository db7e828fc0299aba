from __future__ import annotations
"""
Exception types raised by the recommender.

All of them derive from ``ValueError``: every failure the recommender
reports is caused by a bad argument, and callers are expected to retry
with corrected input.
"""


class RecommenderError(ValueError):
    """Base class for recommender validation failures."""


class ConfigurationError(RecommenderError):
    """Invalid ``max_vector_size``, ``max_similar_documents`` or ``min_score``."""


class InputShapeError(RecommenderError):
    """Documents (or a snapshot index) do not have the expected shape."""


class InvalidQueryError(RecommenderError):
    """Negative pagination arguments passed to a similarity lookup."""
