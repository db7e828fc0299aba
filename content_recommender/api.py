from __future__ import annotations
"""
FastAPI application serving a trained similarity index.

- The snapshot at ``SNAPSHOT_PATH`` is loaded once on startup
- ``GET /documents/{doc_id}/similar`` pages through one document's ranked list
- Unknown ids yield an empty list, never a 404
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .config import SNAPSHOT_PATH, HealthResponse, SimilarDocumentsResponse
from .persistence import load_recommender
from .recommender import ContentBasedRecommender

app = FastAPI(title="content-recommender")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_recommender: Optional[ContentBasedRecommender] = None


def set_recommender(recommender: Optional[ContentBasedRecommender]) -> None:
    global _recommender
    _recommender = recommender


@app.on_event("startup")
def startup_event() -> None:
    logger.info("Starting app warmup...")
    if not SNAPSHOT_PATH.exists():
        logger.warning("No similarity index at {}; serving nothing until one is trained", SNAPSHOT_PATH)
        return
    set_recommender(load_recommender(SNAPSHOT_PATH))
    logger.info("Warmup complete.")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.get("/documents/{doc_id}/similar", response_model=SimilarDocumentsResponse)
def similar_documents(
    doc_id: str,
    start: int = Query(0, ge=0),
    size: Optional[int] = Query(None, ge=0),
) -> SimilarDocumentsResponse:
    if _recommender is None:
        raise HTTPException(status_code=503, detail="Similarity index not loaded")
    key = _recommender.resolve_id(doc_id)
    similar = _recommender.get_similar_documents(key, start=start, size=size)
    return SimilarDocumentsResponse(id=key, similar=similar)
