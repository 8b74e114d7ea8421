"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM (segmentation)
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for a local server)")
    llm_model_name: str = Field(default="gpt-3.5-turbo-16k", description="Chat model used for segmentation")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for an OpenAI-compatible chat endpoint. Leave empty to use "
            "OpenAI cloud."
        ),
    )
    segmenter_max_tokens: int = Field(default=7000, description="Max output tokens per segmentation reply")
    request_timeout: float = Field(default=60.0, description="Per-request timeout (seconds) for remote calls")

    # Segmentation
    segment_delimiter: str = "~>_^~"
    keep_empty_segments: bool = Field(
        default=False,
        description="Keep empty / whitespace-only fields produced by adjacent or trailing delimiters",
    )

    # Chunking
    tokenizer_encoding: str = "cl100k_base"
    chunk_max_tokens: int = 3000

    # Embedding
    embedding_provider: Literal["huggingface", "openai"] = "huggingface"
    embedding_model: str = "sentence-transformers/all-MiniLM-L12-v2"
    embedding_dimension: int = 384

    # Vector store
    vector_store: Literal["qdrant", "chroma"] = "qdrant"
    qdrant_url: str = "http://127.0.0.1:6333"
    qdrant_api_key: str = ""
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    collection_name: str = "rust_in_action"
    distance: Literal["cosine", "dot", "euclid"] = "cosine"

    # Identifier allocation
    id_strategy: Literal["counter", "random"] = "counter"
    id_pool_size: int = Field(default=100_000, description="Upper bound on segments produced by one run")
    id_counter_start: int | None = Field(
        default=None,
        description="First (highest) id handed out by the counter strategy; defaults to id_pool_size - 1",
    )
    id_seed: int | None = Field(default=None, description="Seed for the random strategy")

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
