"""FastAPI application exposing collection info and similarity search."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from segment_rag import __version__
from segment_rag.errors import QueryError
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import CollectionInfo
from segment_rag.retrieval.query import Retriever

app = FastAPI(
    title="Segment RAG API",
    version=__version__,
    description="Similarity search over LLM-segmented documents.",
)


@lru_cache(maxsize=1)
def get_store() -> VectorStoreBase:
    from segment_rag.retrieval import get_vector_store

    return get_vector_store()


@lru_cache(maxsize=1)
def get_retriever() -> Retriever:
    return Retriever(store=get_store())


# ── Request / Response schemas ────────────────────────────────────────
class QueryRequest(BaseModel):
    """Incoming question from the user."""

    question: str
    k: int = Field(default=5, gt=0, le=100)


class Hit(BaseModel):
    id: int
    score: float
    text: str
    payload: dict[str, Any] = {}


class QueryResponse(BaseModel):
    """Hits in the order the store ranked them."""

    hits: list[Hit] = []


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/collections/{name}", response_model=CollectionInfo)
def collection_info(name: str, store: VectorStoreBase = Depends(get_store)) -> CollectionInfo:
    """Point count and vector parameters of a collection."""
    try:
        return store.collection_info(name)
    except Exception as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.post("/query", response_model=QueryResponse)
def query(request: QueryRequest, retriever: Retriever = Depends(get_retriever)) -> QueryResponse:
    """Embed the question and return the nearest segments."""
    try:
        hits = retriever.query(request.question, request.k)
    except QueryError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return QueryResponse(
        hits=[Hit(id=h.id, score=h.score, text=h.text, payload=h.payload) for h in hits]
    )
