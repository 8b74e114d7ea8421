"""Query path — embed a question and fetch the nearest stored segments.

Usage::

    from segment_rag.retrieval.query import Retriever

    retriever = Retriever()
    for hit in retriever.query("how are numbers represented in Rust?", k=5):
        print(hit.id, round(hit.score, 3), hit.text[:80])

Results come back exactly as the store ordered them; there is no
client-side re-ranking.
"""

from __future__ import annotations

import logging

from segment_rag.config import settings
from segment_rag.errors import EmbeddingError, QueryError
from segment_rag.ingestion.embedder import Embedder
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import MetadataFilter, ScoredPoint

logger = logging.getLogger(__name__)


class Retriever:
    """Similarity search over one collection.

    Parameters
    ----------
    store:
        A concrete vector-store backend.  When *None*, the backend named
        by ``settings.vector_store`` is created.
    embedder:
        Embedder used for the question; must match the model the
        collection was ingested with.
    collection_name:
        Collection to search.
    """

    def __init__(
        self,
        store: VectorStoreBase | None = None,
        embedder: Embedder | None = None,
        *,
        collection_name: str = settings.collection_name,
    ) -> None:
        if store is None:
            from segment_rag.retrieval import get_vector_store

            store = get_vector_store()
        self._store = store
        self._embedder = embedder or Embedder()
        self.collection_name = collection_name

    def query(
        self,
        question: str,
        k: int = 5,
        *,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ScoredPoint]:
        """Return up to *k* points nearest to *question*, highest score first.

        An empty list is a valid answer.  Any upstream failure is raised
        as :class:`QueryError`.
        """
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")

        try:
            vector = self._embedder.embed_query(question)
        except EmbeddingError as exc:
            raise QueryError(f"Failed to embed question: {exc}") from exc

        try:
            hits = self._store.search(self.collection_name, vector, limit=k, filters=filters)
        except Exception as exc:
            raise QueryError(f"Search in {self.collection_name!r} failed: {exc}") from exc

        logger.info("Query returned %d hit(s) from %s", len(hits), self.collection_name)
        return hits

    def context(self, question: str, k: int = 5) -> str:
        """Join the payload text of the top-*k* hits, one per line."""
        return "\n".join(hit.text for hit in self.query(question, k))
