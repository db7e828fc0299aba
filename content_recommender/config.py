from __future__ import annotations
"""
Configuration for the content-based recommender.

Defaults can be overridden through ``CBR_*`` environment variables.  The
Pydantic schemas shared by the recommender, the snapshot format and the
HTTP API live at the bottom of this module.
"""

import os
import sys
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


def default_snapshot_path() -> Path:
    """
    ``CBR_SNAPSHOT_PATH`` if set, else ``indices/similarity_index.json`` under
    ``CBR_PROJECT_ROOT`` (default: the current working directory).
    """
    root = Path(os.getenv("CBR_PROJECT_ROOT", str(Path.cwd())))
    return Path(os.getenv("CBR_SNAPSHOT_PATH", str(root / "indices" / "similarity_index.json")))


SNAPSHOT_PATH = default_snapshot_path()

# Training defaults
DEFAULT_MAX_VECTOR_SIZE = int(os.getenv("CBR_MAX_VECTOR_SIZE", "100"))
DEFAULT_MAX_SIMILAR_DOCUMENTS = int(os.getenv("CBR_MAX_SIMILAR_DOCUMENTS", str(sys.maxsize)))
DEFAULT_MIN_SCORE = float(os.getenv("CBR_MIN_SCORE", "0.0"))

# Rows of the document matrix scored per block in the pairwise stage
SIMILARITY_BLOCK_SIZE = int(os.getenv("CBR_SIMILARITY_BLOCK_SIZE", "512"))

# Text processing
NGRAM_MAX = 3
NGRAM_JOINER = "_"
MIN_TOKEN_CHARS = 2

# Field names reserved for internal pipeline stages
RESERVED_DOCUMENT_FIELDS = ("tokens", "vector")

STOPWORDS = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "am", "an", "and",
    "any", "are", "as", "at", "be", "because", "been", "before", "being", "below",
    "between", "both", "but", "by", "can", "could", "did", "do", "does", "doing",
    "down", "during", "each", "few", "for", "from", "further", "had", "has", "have",
    "having", "he", "her", "here", "hers", "herself", "him", "himself", "his", "how",
    "i", "if", "in", "into", "is", "it", "its", "itself", "just", "me", "more",
    "most", "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once",
    "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same",
    "shall", "she", "should", "so", "some", "such", "than", "that", "the", "their",
    "theirs", "them", "themselves", "then", "there", "these", "they", "this",
    "those", "through", "to", "too", "under", "until", "up", "us", "very", "was",
    "we", "were", "what", "when", "where", "which", "while", "who", "whom", "why",
    "will", "with", "would", "you", "your", "yours", "yourself", "yourselves",
})

DocumentId = Union[StrictInt, str]


# Pydantic schemas
class RecommenderConfig(BaseModel):
    """Training options.  Frozen so a run always sees one consistent set."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_vector_size: StrictInt = Field(DEFAULT_MAX_VECTOR_SIZE, gt=0)
    max_similar_documents: StrictInt = Field(DEFAULT_MAX_SIMILAR_DOCUMENTS, gt=0)
    min_score: float = Field(DEFAULT_MIN_SCORE, ge=0.0, le=1.0, allow_inf_nan=False)

    @field_validator("min_score", mode="before")
    @classmethod
    def _real_number(cls, v):
        if isinstance(v, (bool, str, bytes, bytearray)):
            raise ValueError(f"min_score must be a real number, got {type(v).__name__}")
        return v


class Document(BaseModel):
    id: DocumentId
    content: str


class SimilarityEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: DocumentId
    score: float = Field(ge=0.0, le=1.0, allow_inf_nan=False)


class SimilarDocumentsResponse(BaseModel):
    id: DocumentId
    similar: List[SimilarityEdge]


class HealthResponse(BaseModel):
    status: str
