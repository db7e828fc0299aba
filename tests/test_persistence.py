from __future__ import annotations

import json

import pytest

from content_recommender import ContentBasedRecommender, InputShapeError
from content_recommender.config import default_snapshot_path
from content_recommender.persistence import (
    load_recommender,
    load_snapshot,
    save_snapshot,
    snapshot_from_json,
)


def test_save_and_load_round_trip(tmp_path, sample_documents):
    recommender = ContentBasedRecommender(max_similar_documents=2)
    recommender.train(sample_documents)
    path = save_snapshot(recommender, tmp_path / "nested" / "index.json")
    assert path.exists()

    restored = load_recommender(path)
    assert restored.config == recommender.config
    for doc in sample_documents:
        assert restored.get_similar_documents(doc["id"]) == recommender.get_similar_documents(doc["id"])


def test_integer_ids_survive_the_file(tmp_path):
    recommender = ContentBasedRecommender()
    recommender.train([{"id": 10, "content": "red apple"}, {"id": 20, "content": "green apple"}])
    path = save_snapshot(recommender, tmp_path / "index.json")

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert [entry["id"] for entry in stored["index"]] == [10, 20]

    restored = load_recommender(path)
    assert [e.id for e in restored.get_similar_documents(10)] == [20]


def test_missing_snapshot_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_snapshot(tmp_path / "absent.json")


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"configuration": {}, "index": {}},
        {"configuration": {}, "index": [{"id": "a"}]},
        {"configuration": {}, "index": [{"id": ["a"], "similar": []}]},
        {"configuration": {}, "index": [{"id": "a", "similar": []}, {"id": "a", "similar": []}]},
    ],
)
def test_malformed_snapshot_files_are_rejected(data):
    with pytest.raises(InputShapeError):
        snapshot_from_json(data)


def test_default_snapshot_path_follows_working_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("CBR_SNAPSHOT_PATH", raising=False)
    monkeypatch.delenv("CBR_PROJECT_ROOT", raising=False)
    monkeypatch.chdir(tmp_path)
    assert default_snapshot_path() == tmp_path.resolve() / "indices" / "similarity_index.json"

    monkeypatch.setenv("CBR_SNAPSHOT_PATH", str(tmp_path / "custom.json"))
    assert default_snapshot_path() == tmp_path / "custom.json"
