"""Unit tests for the query path."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from segment_rag.errors import EmbeddingError, QueryError
from segment_rag.retrieval.models import ScoredPoint
from segment_rag.retrieval.query import Retriever

HITS = [
    ScoredPoint(id=9, score=0.93, payload={"text": "Rust has no garbage collector."}),
    ScoredPoint(id=4, score=0.81, payload={"text": "Integers are fixed width."}),
    ScoredPoint(id=2, score=0.40, payload={"text": "Cargo builds crates."}),
]


@pytest.fixture()
def store(make_store):
    return make_store(hits=HITS)


def test_query_returns_store_order(store, embedder) -> None:
    retriever = Retriever(store, embedder, collection_name="book")
    hits = retriever.query("how are numbers represented?", k=5)
    assert [h.id for h in hits] == [9, 4, 2]

    (collection, vector, limit), = store.searches
    assert collection == "book"
    assert limit == 5
    assert vector == embedder.embed_query("how are numbers represented?")


def test_query_respects_k(store, embedder) -> None:
    assert len(Retriever(store, embedder).query("q", k=2)) == 2


def test_empty_result_is_not_an_error(make_store, embedder) -> None:
    assert Retriever(make_store(), embedder).query("q") == []


@pytest.mark.parametrize("k", [0, -1])
def test_non_positive_k(store, embedder, k: int) -> None:
    with pytest.raises(ValueError):
        Retriever(store, embedder).query("q", k=k)


def test_embedding_failure_raises_query_error(store) -> None:
    embedder = MagicMock()
    embedder.embed_query.side_effect = EmbeddingError("provider down")
    with pytest.raises(QueryError, match="provider down"):
        Retriever(store, embedder).query("q")


def test_store_failure_raises_query_error(embedder) -> None:
    store = MagicMock()
    store.search.side_effect = ConnectionError("Collection `book` doesn't exist")
    with pytest.raises(QueryError, match="doesn't exist"):
        Retriever(store, embedder, collection_name="book").query("q")


def test_context_joins_payload_text(store, embedder) -> None:
    context = Retriever(store, embedder).context("q", k=2)
    assert context == "Rust has no garbage collector.\nIntegers are fixed width."
