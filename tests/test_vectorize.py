from __future__ import annotations

import math

import pytest

from content_recommender.vectorize import (
    ProcessedDocument,
    compute_idf,
    compute_tf,
    tfidf_weights,
    vectorize,
)


def test_compute_tf_counts_in_first_seen_order():
    assert list(compute_tf(["b", "a", "b"]).items()) == [("b", 2), ("a", 1)]


def test_idf_is_positive_for_terms_in_every_document():
    docs = [ProcessedDocument("d1", ["common", "x"]), ProcessedDocument("d2", ["common", "y"])]
    idf = compute_idf(docs)
    assert idf["common"] == pytest.approx(1.0 + math.log(2 / 3))
    assert idf["x"] == pytest.approx(1.0 + math.log(2 / 2))
    assert all(math.isfinite(v) and v > 0 for v in idf.values())


def test_idf_for_single_document_corpus_stays_positive():
    idf = compute_idf([ProcessedDocument("only", ["a"])])
    assert idf["a"] == pytest.approx(1.0 + math.log(0.5))
    assert idf["a"] > 0


def test_weights_are_tf_times_idf():
    idf = {"a": 2.0, "b": 0.5}
    assert tfidf_weights(["a", "b", "a"], idf, 10) == {"a": 4.0, "b": 0.5}


def test_truncation_keeps_heaviest_terms_with_first_seen_ties():
    idf = {"a": 1.0, "b": 1.0, "c": 1.0, "d": 1.0}
    weights = tfidf_weights(["b", "c", "d", "a", "a"], idf, 3)
    assert list(weights) == ["a", "b", "c"]


def test_vectorize_caps_every_vector():
    docs = [
        ProcessedDocument("d1", ["t%d" % i for i in range(20)]),
        ProcessedDocument("d2", ["t1", "t2"]),
    ]
    vectors = vectorize(docs, max_vector_size=5)
    assert [v.id for v in vectors] == ["d1", "d2"]
    assert len(vectors[0]) == 5
    assert len(vectors[1]) == 2


def test_vectorize_document_without_tokens_gives_empty_vector():
    vectors = vectorize([ProcessedDocument("empty", []), ProcessedDocument("d", ["a"])], 10)
    assert vectors[0].weights == {}


def test_each_call_has_its_own_idf_universe():
    shared = ProcessedDocument("a1", ["python"])
    alone = vectorize([shared], 10)[0].weights["python"]
    together = vectorize([shared, ProcessedDocument("a2", ["python"])], 10)[0].weights["python"]
    assert alone == pytest.approx(1.0 + math.log(1 / 2))
    assert together == pytest.approx(1.0 + math.log(2 / 3))
