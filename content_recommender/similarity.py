from __future__ import annotations
"""
Pairwise cosine similarity between feature vectors.

Two graph builders are exposed:

* :func:`build_graph` scores every unordered pair of one vector set
  once and records the score on both endpoints.
* :func:`build_cross_graph` scores every pair drawn from two different
  vector sets; nothing is scored within a set.

Both return raw candidate edges (no filtering, no sorting) keyed by the
originating document id.  Each document's buffer is filled in ascending
order of the other document's position in the input, which the ranking
stage relies on to break score ties.

Batch scores come from a sparse matrix product over L2-normalised rows,
computed block by block so the dense score buffer stays bounded at
``block_size x n`` floats.
"""

import math
import time
from typing import Dict, Hashable, Iterator, List, Mapping, Sequence, Tuple, Union

import numpy as np
import scipy.sparse as sp
from loguru import logger

from .config import SIMILARITY_BLOCK_SIZE
from .vectorize import FeatureVector

CandidateEdges = Dict[Hashable, List[Tuple[Hashable, float]]]


def _weights(vector: Union[FeatureVector, Mapping[str, float]]) -> Mapping[str, float]:
    return vector.weights if isinstance(vector, FeatureVector) else vector


def cosine_similarity(
    a: Union[FeatureVector, Mapping[str, float]],
    b: Union[FeatureVector, Mapping[str, float]],
) -> float:
    """Cosine similarity of two sparse vectors; 0.0 if either has no weight."""
    v1, v2 = _weights(a), _weights(b)
    if not v1 or not v2:
        return 0.0
    common = set(v1) & set(v2)
    if not common:
        return 0.0
    dot = sum(v1[t] * v2[t] for t in common)
    n1 = math.sqrt(sum(w * w for w in v1.values()))
    n2 = math.sqrt(sum(w * w for w in v2.values()))
    if n1 == 0.0 or n2 == 0.0:
        return 0.0
    return min(1.0, max(0.0, dot / (n1 * n2)))


def build_vocabulary(*vector_sets: Sequence[FeatureVector]) -> Dict[str, int]:
    """Term -> column index over all given vector sets."""
    vocab: Dict[str, int] = {}
    for vectors in vector_sets:
        for vec in vectors:
            for term in vec.weights:
                if term not in vocab:
                    vocab[term] = len(vocab)
    return vocab


def to_normalized_matrix(vectors: Sequence[FeatureVector], vocab: Dict[str, int]) -> sp.csr_matrix:
    """
    Stack vectors into a CSR matrix with unit-length rows.  Rows without
    any weight stay all-zero, so they score 0.0 against everything.
    """
    rows: List[int] = []
    cols: List[int] = []
    vals: List[float] = []
    for i, vec in enumerate(vectors):
        for term, weight in vec.weights.items():
            rows.append(i)
            cols.append(vocab[term])
            vals.append(float(weight))
    mat = sp.csr_matrix(
        (
            np.asarray(vals, dtype=np.float64),
            (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64)),
        ),
        # one spare column keeps the shape valid for an empty vocabulary
        shape=(len(vectors), max(1, len(vocab))),
        dtype=np.float64,
    )
    norms = np.sqrt(np.asarray(mat.multiply(mat).sum(axis=1)).ravel())
    norms[norms == 0.0] = 1.0
    return sp.csr_matrix(sp.diags(1.0 / norms) @ mat)


def _score_blocks(
    left: sp.csr_matrix,
    right: sp.csr_matrix,
    block_size: int,
    upper: bool = False,
) -> Iterator[Tuple[int, np.ndarray]]:
    """
    Yield ``(start, scores)`` where ``scores[r, c]`` is the similarity of
    left row ``start + r`` and right row ``c`` (or ``start + c`` when
    ``upper`` is set, in which case only columns from ``start`` on are
    scored).
    """
    for start in range(0, left.shape[0], block_size):
        block = left[start:start + block_size]
        other = right[start:] if upper else right
        scores = (block @ other.T).toarray().astype(np.float64, copy=False)
        np.clip(scores, 0.0, 1.0, out=scores)
        yield start, scores


def build_graph(
    vectors: Sequence[FeatureVector],
    block_size: int = SIMILARITY_BLOCK_SIZE,
) -> CandidateEdges:
    """Score every unordered pair of ``vectors`` once, recording both directions."""
    t0 = time.perf_counter()
    ids = [vec.id for vec in vectors]
    candidates: CandidateEdges = {doc_id: [] for doc_id in ids}
    n = len(ids)
    if n < 2:
        return candidates

    matrix = to_normalized_matrix(vectors, build_vocabulary(vectors))
    for start, scores in _score_blocks(matrix, matrix, block_size, upper=True):
        for offset in range(scores.shape[0]):
            i = start + offset
            row = scores[offset]
            for j in range(i + 1, n):
                score = float(row[j - start])
                candidates[ids[i]].append((ids[j], score))
                candidates[ids[j]].append((ids[i], score))

    logger.info(
        "Scored {} document pairs in {:.2f}s",
        n * (n - 1) // 2,
        time.perf_counter() - t0,
    )
    return candidates


def build_cross_graph(
    vectors_a: Sequence[FeatureVector],
    vectors_b: Sequence[FeatureVector],
    block_size: int = SIMILARITY_BLOCK_SIZE,
) -> CandidateEdges:
    """Score every (a, b) pair across two vector sets, recording both directions."""
    t0 = time.perf_counter()
    ids_a = [vec.id for vec in vectors_a]
    ids_b = [vec.id for vec in vectors_b]
    candidates: CandidateEdges = {doc_id: [] for doc_id in ids_a + ids_b}
    if not ids_a or not ids_b:
        return candidates

    vocab = build_vocabulary(vectors_a, vectors_b)
    mat_a = to_normalized_matrix(vectors_a, vocab)
    mat_b = to_normalized_matrix(vectors_b, vocab)
    for start, scores in _score_blocks(mat_a, mat_b, block_size):
        for offset in range(scores.shape[0]):
            a = ids_a[start + offset]
            row = scores[offset]
            for j, b in enumerate(ids_b):
                score = float(row[j])
                candidates[a].append((b, score))
                candidates[b].append((a, score))

    logger.info(
        "Scored {} cross-corpus pairs in {:.2f}s",
        len(ids_a) * len(ids_b),
        time.perf_counter() - t0,
    )
    return candidates
