"""
Retrieval — vector-store backends and the query path.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend.
- :class:`QdrantVectorStore` — default backend.
- :class:`ChromaVectorStore` — alternative backend.
- :class:`Retriever` — embed a question and search one collection.
- :class:`Point`, :class:`ScoredPoint`, :class:`CollectionInfo`,
  :class:`Distance`, :class:`MetadataFilter`, :class:`SegmentRecord` — data models.
- :func:`get_vector_store` — backend factory driven by settings.
"""

from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import (
    CollectionInfo,
    Distance,
    MetadataFilter,
    Point,
    ScoredPoint,
    SegmentRecord,
)

__all__ = [
    "ChromaVectorStore",
    "CollectionInfo",
    "Distance",
    "MetadataFilter",
    "Point",
    "QdrantVectorStore",
    "Retriever",
    "ScoredPoint",
    "SegmentRecord",
    "VectorStoreBase",
    "get_vector_store",
]


def get_vector_store(kind: str | None = None) -> VectorStoreBase:
    """Build the backend named by *kind* (defaults to ``settings.vector_store``)."""
    from segment_rag.config import settings

    kind = kind or settings.vector_store
    if kind == "qdrant":
        from segment_rag.retrieval.qdrant_store import QdrantVectorStore

        return QdrantVectorStore()
    if kind == "chroma":
        from segment_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore()
    raise ValueError(f"Unsupported vector store: {kind!r}")


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends and the retriever to avoid pulling in clients at import time."""
    if name == "QdrantVectorStore":
        from segment_rag.retrieval.qdrant_store import QdrantVectorStore

        return QdrantVectorStore
    if name == "ChromaVectorStore":
        from segment_rag.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    if name == "Retriever":
        from segment_rag.retrieval.query import Retriever

        return Retriever
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
