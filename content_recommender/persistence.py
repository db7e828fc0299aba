from __future__ import annotations
"""
Snapshot files for trained recommenders.

A snapshot is the JSON form of :meth:`ContentBasedRecommender.export`.
JSON object keys are always strings, so the index is written as a list
of ``{"id": ..., "similar": [...]}`` entries instead; integer document
ids therefore come back as integers.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from .config import SNAPSHOT_PATH
from .errors import InputShapeError
from .recommender import ContentBasedRecommender


def snapshot_to_json(snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """Exported snapshot -> JSON-safe document."""
    return {
        "configuration": snapshot["configuration"],
        "index": [
            {"id": doc_id, "similar": edges}
            for doc_id, edges in snapshot["index"].items()
        ],
    }


def snapshot_from_json(data: Any) -> Dict[str, Any]:
    """Inverse of :func:`snapshot_to_json`."""
    if not isinstance(data, dict) or not isinstance(data.get("index"), list):
        raise InputShapeError("Snapshot file must hold an object with an 'index' list")
    index: Dict[Any, List[Any]] = {}
    for entry in data["index"]:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), (str, int)) or "similar" not in entry:
            raise InputShapeError(f"Malformed index entry: {entry!r}")
        if entry["id"] in index:
            raise InputShapeError(f"Index entry {entry['id']!r} appears twice")
        index[entry["id"]] = entry["similar"]
    return {"configuration": data.get("configuration"), "index": index}


def save_snapshot(recommender: ContentBasedRecommender, path: Path = SNAPSHOT_PATH) -> Path:
    """Write the recommender's snapshot as JSON and return the path."""
    path = Path(path)
    snapshot = recommender.export()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(snapshot_to_json(snapshot), f)
    logger.info("Similarity index ({} documents) written to {}", len(snapshot["index"]), path)
    return path


def load_snapshot(path: Path = SNAPSHOT_PATH) -> Dict[str, Any]:
    """Read a snapshot written by :func:`save_snapshot`."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Similarity index not found at {path}. Run training first.")
    logger.info("Loading similarity index from {}", path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return snapshot_from_json(data)


def load_recommender(path: Path = SNAPSHOT_PATH) -> ContentBasedRecommender:
    """Fresh recommender restored from a snapshot file."""
    recommender = ContentBasedRecommender()
    recommender.import_snapshot(load_snapshot(path))
    return recommender
