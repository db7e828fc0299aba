from __future__ import annotations
"""
TF-IDF vectorization of a tokenized corpus.

Every call to :func:`vectorize` defines its own IDF universe: the
document frequencies are computed over exactly the documents passed
in, once, and handed explicitly to the per-document weighting.  This
keeps the two corpora of a bidirectional training run independent.

Weighting follows the classic scheme used by the recommender since its
first release:

* ``tf(t, d)``  raw count of ``t`` in the token sequence of ``d``
* ``idf(t)``    ``1 + ln(N / (1 + df(t)))``

Since ``df(t) <= N`` the IDF is bounded below by ``1 + ln(N / (N + 1))``,
which is strictly positive, so terms present in every document keep a
small positive weight instead of vanishing or going negative.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Sequence

from loguru import logger


@dataclass
class ProcessedDocument:
    id: Hashable
    tokens: List[str] = field(default_factory=list)


@dataclass
class FeatureVector:
    id: Hashable
    weights: Dict[str, float] = field(default_factory=dict)  # term -> tf-idf, descending

    def __len__(self) -> int:
        return len(self.weights)


def compute_tf(tokens: Sequence[str]) -> Dict[str, int]:
    """Raw term counts, keyed in first-seen order."""
    return dict(Counter(tokens))


def compute_idf(documents: Sequence[ProcessedDocument]) -> Dict[str, float]:
    """IDF of every term that occurs in ``documents``."""
    n_docs = len(documents)
    df: Counter = Counter()
    for doc in documents:
        df.update(set(doc.tokens))
    return {term: 1.0 + math.log(n_docs / (1.0 + count)) for term, count in df.items()}


def tfidf_weights(
    tokens: Sequence[str],
    idf: Dict[str, float],
    max_vector_size: int,
) -> Dict[str, float]:
    """
    TF-IDF weights for one document, truncated to the ``max_vector_size``
    heaviest terms.  Ties keep first-seen order (``sorted`` is stable),
    which makes the truncation reproducible for a given token stream.
    """
    tf = compute_tf(tokens)
    scored = [(term, count * idf[term]) for term, count in tf.items()]
    scored.sort(key=lambda x: -x[1])
    return dict(scored[:max_vector_size])


def vectorize(
    documents: Sequence[ProcessedDocument],
    max_vector_size: int,
) -> List[FeatureVector]:
    """Turn processed documents into capped TF-IDF feature vectors."""
    idf = compute_idf(documents)
    vectors = [
        FeatureVector(id=doc.id, weights=tfidf_weights(doc.tokens, idf, max_vector_size))
        for doc in documents
    ]
    logger.info(
        "Vectorized {} documents over a vocabulary of {} terms (cap {})",
        len(vectors),
        len(idf),
        max_vector_size,
    )
    return vectors
