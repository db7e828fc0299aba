"""
Content-based recommender.

Builds, for every document of a corpus, a ranked list of the other
documents most similar to it by lexical content (TF-IDF vectors and
cosine similarity), and serves that list with paginated lookups.  Two
training modes are available: within one corpus, and across two
corpora (e.g. posts against tags).  There are no side-effects on
import.
"""
from __future__ import annotations

from .config import Document, RecommenderConfig, SimilarityEdge
from .errors import ConfigurationError, InputShapeError, InvalidQueryError, RecommenderError
from .recommender import ContentBasedRecommender, RecommenderState

__all__ = [
    "ContentBasedRecommender",
    "RecommenderState",
    "RecommenderConfig",
    "Document",
    "SimilarityEdge",
    "RecommenderError",
    "ConfigurationError",
    "InputShapeError",
    "InvalidQueryError",
]
