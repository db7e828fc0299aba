from __future__ import annotations
"""
Ranking policy applied to raw candidate edges.

Turns the similarity engine's unfiltered buffers into the published
index: low scores are dropped, the rest sorted by decreasing score and
capped per document.  Equal scores keep the order in which the engine
generated them (ascending position of the other document), because
Python's sort is stable.
"""

from typing import Dict, Hashable, List

from .config import SimilarityEdge
from .similarity import CandidateEdges

RecommendationIndex = Dict[Hashable, List[SimilarityEdge]]


def rank_edges(
    edges: List[tuple],
    min_score: float,
    max_similar_documents: int,
) -> List[SimilarityEdge]:
    """Filter (strictly above ``min_score``), sort descending, truncate."""
    kept = [(doc_id, score) for doc_id, score in edges if score > min_score]
    kept.sort(key=lambda x: -x[1])
    return [SimilarityEdge(id=doc_id, score=score) for doc_id, score in kept[:max_similar_documents]]


def rank(
    candidates: CandidateEdges,
    min_score: float,
    max_similar_documents: int,
) -> RecommendationIndex:
    """
    Build the recommendation index.  Every candidate key is kept, even
    when none of its edges survive the filter.
    """
    return {
        doc_id: rank_edges(edges, min_score, max_similar_documents)
        for doc_id, edges in candidates.items()
    }
