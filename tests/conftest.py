"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import uuid

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from segment_rag.ingestion.embedder import Embedder
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import CollectionInfo, Distance, MetadataFilter, Point, ScoredPoint

DIM = 384


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run tests that need network access or external services",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-integration"):
        return
    skip = pytest.mark.skip(reason="needs --run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


class CharEncoding:
    """One token per character; lossless and offline."""

    def encode_ordinary(self, text: str) -> list[int]:
        return [ord(c) for c in text]

    def decode(self, tokens: list[int]) -> str:
        return "".join(chr(t) for t in tokens)


class RecordingStore(VectorStoreBase):
    """In-memory store that records every call it receives."""

    def __init__(self, hits: list[ScoredPoint] | None = None) -> None:
        self.collections: dict[str, dict[int, Point]] = {}
        self.dimensions: dict[str, int] = {}
        self.upserts: list[tuple[str, list[Point]]] = []
        self.searches: list[tuple[str, list[float], int]] = []
        self._hits = hits or []

    def create_collection(self, collection_name: str, dimension: int, distance: Distance = Distance.COSINE) -> None:
        self.collections[collection_name] = {}
        self.dimensions[collection_name] = dimension

    def delete_collection(self, collection_name: str) -> bool:
        self.dimensions.pop(collection_name, None)
        return self.collections.pop(collection_name, None) is not None

    def collection_exists(self, collection_name: str) -> bool:
        return collection_name in self.collections

    def collection_info(self, collection_name: str) -> CollectionInfo:
        return CollectionInfo(
            name=collection_name,
            points_count=len(self.collections[collection_name]),
            dimension=self.dimensions[collection_name],
            distance=Distance.COSINE,
        )

    def upsert(self, collection_name: str, points: list[Point]) -> None:
        self.upserts.append((collection_name, points))
        target = self.collections.setdefault(collection_name, {})
        for p in points:
            target[p.id] = p

    def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        limit: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ScoredPoint]:
        self.searches.append((collection_name, vector, limit))
        return self._hits[:limit]

    def health_check(self) -> bool:
        return True


@pytest.fixture()
def char_encoding() -> CharEncoding:
    return CharEncoding()


@pytest.fixture()
def fake_embeddings() -> DeterministicFakeEmbedding:
    return DeterministicFakeEmbedding(size=DIM)


@pytest.fixture()
def embedder(fake_embeddings: DeterministicFakeEmbedding) -> Embedder:
    return Embedder(fake_embeddings, dimension=DIM)


@pytest.fixture()
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def qdrant_store():
    from segment_rag.retrieval.qdrant_store import QdrantVectorStore

    return QdrantVectorStore(location=":memory:")


@pytest.fixture()
def collection_name() -> str:
    return f"test_{uuid.uuid4().hex[:8]}"


@pytest.fixture()
def make_store():
    """Factory for :class:`RecordingStore` with canned search hits."""
    return RecordingStore
