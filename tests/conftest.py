from __future__ import annotations

import pytest

from content_recommender import ContentBasedRecommender


@pytest.fixture
def sample_documents():
    return [
        {"id": "1000001", "content": "hello world <b>Hello</b> boy"},
        {"id": "1000002", "content": "I go to school by bus. Hello!"},
        {"id": "1000003", "content": "I am king of the world"},
        {"id": "1000004", "content": "King and Queen are funny"},
    ]


@pytest.fixture
def news_documents():
    return [
        {"id": "n1", "content": "Python release adds faster startup and better error messages"},
        {"id": "n2", "content": "New Python release improves error messages for beginners"},
        {"id": "n3", "content": "Football club wins the league after a dramatic final match"},
        {"id": "n4", "content": "League final match ends in penalties, football fans celebrate"},
        {"id": "n5", "content": "Startup raises funding to build faster databases"},
        {"id": "n6", "content": "Database startup hires Python engineers after funding round"},
        {"id": "n7", "content": "Recipe: slow cooked tomato soup with basil"},
    ]


@pytest.fixture
def trained(sample_documents):
    recommender = ContentBasedRecommender()
    recommender.train(sample_documents)
    return recommender
