from __future__ import annotations

import json

import pandas as pd
import pytest

from content_recommender import ContentBasedRecommender
from content_recommender.cli import load_documents, main
from content_recommender.persistence import save_snapshot


def _write_csv(path, documents):
    pd.DataFrame(documents).to_csv(path, index=False)
    return path


def test_load_documents_from_csv_and_json(tmp_path, sample_documents):
    csv_path = _write_csv(tmp_path / "docs.csv", sample_documents)
    json_path = tmp_path / "docs.json"
    json_path.write_text(json.dumps(sample_documents), encoding="utf-8")

    assert load_documents(csv_path) == sample_documents
    assert load_documents(json_path) == sample_documents


def test_load_documents_requires_id_and_content(tmp_path):
    path = _write_csv(tmp_path / "docs.csv", [{"id": "1", "body": "text"}])
    with pytest.raises(ValueError, match="content"):
        load_documents(path)


def test_load_documents_rejects_unknown_extension(tmp_path):
    path = tmp_path / "docs.txt"
    path.write_text("id,content\n1,x\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_documents(path)


def test_train_then_query(tmp_path, sample_documents, capsys):
    docs = _write_csv(tmp_path / "docs.csv", sample_documents)
    out = tmp_path / "index.json"

    main(["train", "--in", str(docs), "--out", str(out), "--max-similar-documents", "1"])
    assert out.exists()

    capsys.readouterr()
    main(["query", "--snapshot", str(out), "--id", "1000003"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    assert lines[0].split("\t")[0] == "1000004"


def test_train_against_second_corpus(tmp_path, capsys):
    posts = _write_csv(tmp_path / "posts.csv", [{"id": "a1", "content": "machine learning python"}])
    tags = _write_csv(
        tmp_path / "tags.csv",
        [{"id": "b1", "content": "python tutorial"}, {"id": "b2", "content": "cooking recipes"}],
    )
    out = tmp_path / "index.json"
    main(["train", "--in", str(posts), "--against", str(tags), "--out", str(out)])

    capsys.readouterr()
    main(["query", "--snapshot", str(out), "--id", "a1"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert [line.split("\t")[0] for line in lines] == ["b1"]


def test_query_matches_integer_ids(tmp_path, capsys):
    recommender = ContentBasedRecommender()
    recommender.train([
        {"id": 1, "content": "python machine learning tutorial"},
        {"id": 2, "content": "python machine learning course"},
        {"id": 3, "content": "slow cooking recipes"},
    ])
    out = save_snapshot(recommender, tmp_path / "index.json")

    capsys.readouterr()
    main(["query", "--snapshot", str(out), "--id", "1"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert [line.split("\t")[0] for line in lines] == ["2"]
