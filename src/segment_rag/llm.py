"""Model initialisation — single place to swap providers.

Chat model (segmentation):

1. **OpenAI cloud** (default) — set ``OPENAI_API_KEY``.
2. **OpenAI-compatible server** — set ``LLM_BASE_URL`` (vLLM, LocalAI, …).

Embedding model:

1. **HuggingFace sentence-transformer** (default) — runs locally,
   ``all-MiniLM-L12-v2`` produces 384-dimensional vectors.
2. **OpenAI embeddings** — set ``EMBEDDING_PROVIDER=openai`` and
   ``EMBEDDING_MODEL`` (e.g. ``text-embedding-ada-002``, 1536 dims).

Both clients are built with ``max_retries=0``: a failed call surfaces
immediately and the caller decides what to do.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from segment_rag.config import settings

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings
    from langchain_openai import ChatOpenAI

logger = logging.getLogger(__name__)


def get_llm(max_tokens: int | None = None, temperature: float = 0.0) -> ChatOpenAI:
    """Return the configured chat model.

    When ``settings.llm_base_url`` is set the client is pointed at that
    endpoint instead of the OpenAI cloud API.  A dummy API key
    (``"EMPTY"``) is used because local servers do not require
    authentication.
    """
    from langchain_openai import ChatOpenAI

    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": temperature,
        "max_tokens": max_tokens or settings.segmenter_max_tokens,
        "timeout": settings.request_timeout,
        "max_retries": 0,
    }

    if settings.llm_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", settings.llm_base_url)
        kwargs["base_url"] = settings.llm_base_url
        # Local servers don't need a real key; LangChain requires a non-empty value.
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)


def get_embedding_model() -> Embeddings:
    """Return the configured LangChain embedding model."""
    if settings.embedding_provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        kwargs: dict = {
            "model": settings.embedding_model,
            "api_key": settings.openai_api_key,
            "timeout": settings.request_timeout,
            "max_retries": 0,
        }
        if settings.llm_base_url:
            kwargs["base_url"] = settings.llm_base_url
        return OpenAIEmbeddings(**kwargs)

    from langchain_huggingface import HuggingFaceEmbeddings

    logger.info("Loading sentence-transformer model %s", settings.embedding_model)
    return HuggingFaceEmbeddings(model_name=settings.embedding_model)
