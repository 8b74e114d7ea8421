"""Batch embedding with a positional-correspondence check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from segment_rag.errors import EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


class Embedder:
    """Wrap a LangChain ``Embeddings`` model.

    Parameters
    ----------
    model:
        Embedding model.  Defaults to :func:`segment_rag.llm.get_embedding_model`.
    dimension:
        Expected vector length; when set, every vector is checked against it.
    """

    def __init__(self, model: Embeddings | None = None, *, dimension: int | None = None) -> None:
        if model is None:
            from segment_rag.llm import get_embedding_model

            model = get_embedding_model()
        self._model = model
        self.dimension = dimension

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts* in one call; ``result[i]`` is the vector of ``texts[i]``.

        No sub-batching happens here: callers keep *texts* within the
        provider's input limit.
        """
        texts = list(texts)
        if not texts:
            return []

        try:
            vectors = self._model.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingError(f"Embedding request for {len(texts)} text(s) failed: {exc}") from exc

        if len(vectors) != len(texts):
            raise EmbeddingError(f"Embedding returned {len(vectors)} vector(s) for {len(texts)} input(s)")
        self._check_dimensions(vectors)
        logger.debug("Embedded %d text(s) (dim=%d)", len(vectors), len(vectors[0]))
        return [list(v) for v in vectors]

    def embed_query(self, text: str) -> list[float]:
        """Embed a single query string."""
        try:
            vector = self._model.embed_query(text)
        except Exception as exc:
            raise EmbeddingError(f"Embedding request for query failed: {exc}") from exc
        self._check_dimensions([vector])
        return list(vector)

    def _check_dimensions(self, vectors: list[list[float]]) -> None:
        expected = self.dimension if self.dimension is not None else len(vectors[0])
        for i, vector in enumerate(vectors):
            if len(vector) != expected:
                raise EmbeddingError(f"Vector {i} has dimension {len(vector)}, expected {expected}")
