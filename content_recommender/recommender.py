from __future__ import annotations
"""
Training orchestrator and query surface of the content-based recommender.

Typical usage::

    from content_recommender import ContentBasedRecommender

    recommender = ContentBasedRecommender(max_similar_documents=10)
    recommender.train([
        {"id": "1000001", "content": "hello world <b>Hello</b> boy"},
        {"id": "1000002", "content": "I go to school by bus. Hello!"},
    ])
    recommender.get_similar_documents("1000001", start=0, size=10)

Training is a full batch: validate, tokenize, vectorize, score every
pair, rank, publish.  Validation happens before any text is touched,
and the new index is published with a single attribute assignment only
once everything succeeded, so a failed call never disturbs the index a
previous run left behind.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List, Mapping, Optional, Sequence

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .config import (
    RESERVED_DOCUMENT_FIELDS,
    Document,
    DocumentId,
    RecommenderConfig,
    SimilarityEdge,
)
from .errors import ConfigurationError, InputShapeError, InvalidQueryError
from .normalize import tokenize
from .ranking import RecommendationIndex, rank
from .similarity import build_cross_graph, build_graph
from .vectorize import ProcessedDocument, vectorize

_INDEX_ADAPTER = TypeAdapter(Dict[DocumentId, List[SimilarityEdge]])


class RecommenderState(str, Enum):
    CONFIGURED = "configured"
    TRAINED = "trained"


@dataclass(frozen=True)
class PublishedIndex:
    """An index together with the configuration it was built under."""

    configuration: RecommenderConfig
    index: RecommendationIndex


# ---------------------------
# Validation
# ---------------------------

def build_config(config: Any = None, **options: Any) -> RecommenderConfig:
    """
    Validate training options.  Accepts a ``RecommenderConfig``, a plain
    mapping, or keyword options; unspecified fields take the defaults.
    """
    if config is not None and options:
        raise ConfigurationError("Pass either a configuration object or keyword options, not both")
    if config is None:
        raw: Any = options
    elif isinstance(config, RecommenderConfig):
        raw = config.model_dump()
    elif isinstance(config, Mapping):
        raw = dict(config)
    else:
        raise ConfigurationError(f"Unsupported configuration type: {type(config).__name__}")
    try:
        return RecommenderConfig.model_validate(raw)
    except ValidationError as e:
        logger.warning("Rejected configuration {}: {}", raw, e)
        raise ConfigurationError(str(e)) from e


def _lookup(record: Any, name: str):
    if isinstance(record, Mapping):
        return name in record, record.get(name)
    return hasattr(record, name), getattr(record, name, None)


def validate_documents(documents: Any, label: str = "documents") -> List[Document]:
    """
    Check the shape of a training corpus and return it as ``Document``s.

    Records may be mappings or objects exposing ``id`` and ``content``.
    Raises :class:`InputShapeError` on the first problem found.
    """
    if isinstance(documents, (str, bytes)) or not isinstance(documents, Sequence):
        raise InputShapeError(f"{label} must be a list of records, got {type(documents).__name__}")

    validated: List[Document] = []
    seen = set()
    for pos, record in enumerate(documents):
        where = f"{label}[{pos}]"
        for reserved in RESERVED_DOCUMENT_FIELDS:
            if _lookup(record, reserved)[0]:
                raise InputShapeError(f"{where} carries reserved field '{reserved}'")
        has_id, doc_id = _lookup(record, "id")
        has_content, content = _lookup(record, "content")
        if not has_id:
            raise InputShapeError(f"{where} has no 'id'")
        if not has_content:
            raise InputShapeError(f"{where} has no 'content'")
        if isinstance(doc_id, bool) or not isinstance(doc_id, (str, int)):
            raise InputShapeError(f"{where} id must be a string or an integer, got {doc_id!r}")
        if not isinstance(content, str):
            raise InputShapeError(f"{where} content must be a string, got {type(content).__name__}")
        if doc_id in seen:
            raise InputShapeError(f"{where} repeats id {doc_id!r}")
        seen.add(doc_id)
        validated.append(Document(id=doc_id, content=content))
    return validated


def validate_index(raw: Any, config: RecommenderConfig) -> RecommendationIndex:
    """Parse a serialized index and check it against ``config``."""
    try:
        index = _INDEX_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise InputShapeError(f"Corrupt similarity index: {e}") from e

    for doc_id, edges in index.items():
        if len(edges) > config.max_similar_documents:
            raise InputShapeError(f"Index entry {doc_id!r} exceeds max_similar_documents")
        for k, edge in enumerate(edges):
            if edge.id == doc_id:
                raise InputShapeError(f"Index entry {doc_id!r} points at itself")
            if edge.score <= config.min_score:
                raise InputShapeError(f"Index entry {doc_id!r} holds a score at or below min_score")
            if k and edges[k - 1].score < edge.score:
                raise InputShapeError(f"Index entry {doc_id!r} is not sorted by score")
    return index


# ---------------------------
# Recommender
# ---------------------------

class ContentBasedRecommender:
    """
    Builds and serves a per-document list of lexically similar documents.

    ``tokenizer`` is any ``str -> list[str]`` callable; the default strips
    markup, drops stopwords, stems and adds bigrams/trigrams.
    """

    def __init__(
        self,
        config: Any = None,
        *,
        tokenizer: Optional[Callable[[str], List[str]]] = None,
        **options: Any,
    ):
        self._config = build_config(config, **options)
        self._tokenizer = tokenizer or tokenize
        self._published: Optional[PublishedIndex] = None
        self._state = RecommenderState.CONFIGURED

    # -- configuration ------------------------------------------------------

    @property
    def config(self) -> RecommenderConfig:
        return self._config

    @property
    def state(self) -> RecommenderState:
        return self._state

    def configure(self, config: Any = None, **options: Any) -> RecommenderConfig:
        """
        Replace the configuration.  The current index stays queryable but
        the recommender is back to ``CONFIGURED`` until it is retrained.
        """
        self._config = build_config(config, **options)
        self._state = RecommenderState.CONFIGURED
        return self._config

    # -- training -----------------------------------------------------------

    def _preprocess(self, documents: Sequence[Document]) -> List[ProcessedDocument]:
        return [
            ProcessedDocument(id=doc.id, tokens=list(self._tokenizer(doc.content)))
            for doc in documents
        ]

    def _publish(self, config: RecommenderConfig, index: RecommendationIndex) -> None:
        self._published = PublishedIndex(configuration=config, index=index)
        self._state = RecommenderState.TRAINED

    def train(self, documents: Sequence[Any]) -> None:
        """Rank every document against every other document of one corpus."""
        docs = validate_documents(documents)
        config = self._config
        t0 = time.perf_counter()
        logger.info("Training on {} documents", len(docs))

        vectors = vectorize(self._preprocess(docs), config.max_vector_size)
        index = rank(build_graph(vectors), config.min_score, config.max_similar_documents)

        self._publish(config, index)
        logger.info(
            "Training finished in {:.2f}s; {} documents indexed, {} edges kept",
            time.perf_counter() - t0,
            len(index),
            sum(len(edges) for edges in index.values()),
        )

    def train_bidirectional(
        self,
        documents_a: Sequence[Any],
        documents_b: Sequence[Any],
    ) -> None:
        """
        Rank documents of one corpus against documents of the other only.
        Each corpus is vectorized on its own, with its own IDF statistics.
        """
        docs_a = validate_documents(documents_a, label="documents_a")
        docs_b = validate_documents(documents_b, label="documents_b")
        shared = {d.id for d in docs_a} & {d.id for d in docs_b}
        if shared:
            raise InputShapeError(
                f"documents_a and documents_b share ids: {sorted(map(str, shared))[:5]}"
            )
        config = self._config
        t0 = time.perf_counter()
        logger.info("Bidirectional training on {} x {} documents", len(docs_a), len(docs_b))

        vectors_a = vectorize(self._preprocess(docs_a), config.max_vector_size)
        vectors_b = vectorize(self._preprocess(docs_b), config.max_vector_size)
        candidates = build_cross_graph(vectors_a, vectors_b)
        index = rank(candidates, config.min_score, config.max_similar_documents)

        self._publish(config, index)
        logger.info(
            "Bidirectional training finished in {:.2f}s; {} documents indexed",
            time.perf_counter() - t0,
            len(index),
        )

    # -- queries ------------------------------------------------------------

    def get_similar_documents(
        self,
        doc_id: Hashable,
        start: int = 0,
        size: Optional[int] = None,
    ) -> List[SimilarityEdge]:
        """
        Ranked neighbours of ``doc_id`` from offset ``start``, at most
        ``size`` of them (all remaining when ``size`` is None).  Unknown
        ids and out-of-range offsets give an empty or short list.
        """
        if start < 0:
            raise InvalidQueryError(f"start must be >= 0, got {start}")
        if size is not None and size < 0:
            raise InvalidQueryError(f"size must be >= 0, got {size}")
        published = self._published
        if published is None:
            return []
        edges = published.index.get(doc_id)
        if edges is None:
            return []
        end = None if size is None else start + size
        return edges[start:end]

    def __contains__(self, doc_id: Hashable) -> bool:
        published = self._published
        return published is not None and doc_id in published.index

    def resolve_id(self, raw: str) -> Hashable:
        """Ids typed as text (URL path, command line) match the integer form if that is what was indexed."""
        if raw in self:
            return raw
        try:
            as_int = int(raw)
        except ValueError:
            return raw
        return as_int if as_int in self else raw

    # -- persistence --------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        """
        Plain-data snapshot ``{"configuration": ..., "index": ...}``.  The
        configuration is the one the index was built with.
        """
        published = self._published
        if published is None:
            return {"configuration": self._config.model_dump(), "index": {}}
        return {
            "configuration": published.configuration.model_dump(),
            "index": {
                doc_id: [edge.model_dump() for edge in edges]
                for doc_id, edges in published.index.items()
            },
        }

    def import_snapshot(self, snapshot: Mapping[str, Any]) -> None:
        """Replace configuration and index with the contents of ``snapshot``."""
        if not isinstance(snapshot, Mapping):
            raise InputShapeError(f"Snapshot must be a mapping, got {type(snapshot).__name__}")
        missing = [key for key in ("configuration", "index") if key not in snapshot]
        if missing:
            raise InputShapeError(f"Snapshot is missing {missing}")

        config = build_config(snapshot["configuration"])
        index = validate_index(snapshot["index"], config)

        self._config = config
        self._publish(config, index)
        logger.info("Imported similarity index with {} documents", len(index))
