# content_recommender/cli.py
"""
Batch runner for the content-based recommender.

- ``train``: read documents (CSV / JSON / JSON lines), train, write a snapshot
- ``train --against``: cross-corpus training between two document files
- ``query``: print the ranked neighbours of one id from a snapshot
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from loguru import logger

from content_recommender.config import SNAPSHOT_PATH
from content_recommender.persistence import load_recommender, save_snapshot
from content_recommender.recommender import ContentBasedRecommender


def load_documents(path: Path) -> List[Dict[str, object]]:
    ext = path.suffix.lower()
    if ext == ".csv":
        df = pd.read_csv(path, dtype={"id": str})
    elif ext == ".jsonl":
        df = pd.read_json(path, lines=True, dtype={"id": str})
    elif ext == ".json":
        df = pd.read_json(path, orient="records", dtype={"id": str})
    else:
        raise ValueError(f"Unsupported document file type: {path}")
    cols = {c.lower(): c for c in df.columns}
    missing = [name for name in ("id", "content") if name not in cols]
    if missing:
        raise ValueError(f"Expected columns 'id' and 'content' in {path}. Found: {list(df.columns)}")
    df = df[[cols["id"], cols["content"]]].rename(columns={cols["id"]: "id", cols["content"]: "content"})
    df["id"] = df["id"].astype(str)
    df["content"] = df["content"].fillna("").astype(str)
    return df.to_dict(orient="records")


def _options(args: argparse.Namespace) -> Dict[str, object]:
    options: Dict[str, object] = {}
    if args.max_vector_size is not None:
        options["max_vector_size"] = args.max_vector_size
    if args.max_similar_documents is not None:
        options["max_similar_documents"] = args.max_similar_documents
    if args.min_score is not None:
        options["min_score"] = args.min_score
    return options


def run_train(args: argparse.Namespace) -> Path:
    recommender = ContentBasedRecommender(**_options(args))
    documents = load_documents(Path(args.inp))
    print(f"Loaded {len(documents)} documents from {args.inp}")
    if args.against:
        others = load_documents(Path(args.against))
        print(f"Loaded {len(others)} documents from {args.against}")
        recommender.train_bidirectional(documents, others)
    else:
        recommender.train(documents)
    out = save_snapshot(recommender, Path(args.out))
    print(f"Wrote similarity index to {out}")
    return out


def run_query(args: argparse.Namespace) -> None:
    recommender = load_recommender(Path(args.snapshot))
    doc_id = recommender.resolve_id(args.id)
    for edge in recommender.get_similar_documents(doc_id, start=args.start, size=args.size):
        print(f"{edge.id}\t{edge.score:.6f}")


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="content-recommender")
    sub = ap.add_subparsers(dest="command", required=True)

    tr = sub.add_parser("train", help="train on a document file and write a snapshot")
    tr.add_argument("--in", dest="inp", required=True, help="documents file (.csv, .json, .jsonl)")
    tr.add_argument("--against", default=None, help="second corpus for cross-corpus training")
    tr.add_argument("--out", default=str(SNAPSHOT_PATH), help=f"snapshot path (default {SNAPSHOT_PATH})")
    tr.add_argument("--max-vector-size", type=int, default=None)
    tr.add_argument("--max-similar-documents", type=int, default=None)
    tr.add_argument("--min-score", type=float, default=None)

    q = sub.add_parser("query", help="print similar documents from a snapshot")
    q.add_argument("--snapshot", default=str(SNAPSHOT_PATH))
    q.add_argument("--id", required=True)
    q.add_argument("--start", type=int, default=0)
    q.add_argument("--size", type=int, default=None)

    args = ap.parse_args(argv)
    logger.info("Running {} command", args.command)
    if args.command == "train":
        run_train(args)
    else:
        run_query(args)


if __name__ == "__main__":
    main()
