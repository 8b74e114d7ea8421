"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from segment_rag.config import settings
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import CollectionInfo, Distance, MetadataFilter, Point, ScoredPoint

logger = logging.getLogger(__name__)

_SPACE_MAP = {
    Distance.COSINE: "cosine",
    Distance.DOT: "ip",
    Distance.EUCLID: "l2",
}
_SPACE_REVERSE = {v: k for k, v in _SPACE_MAP.items()}


def _build_chroma_where(filters: list[MetadataFilter]) -> dict[str, Any] | None:
    """Convert a list of :class:`MetadataFilter` to Chroma ``where`` syntax."""
    if not filters:
        return None

    _OP_MAP = {
        "eq": "$eq",
        "ne": "$ne",
        "gt": "$gt",
        "gte": "$gte",
        "lt": "$lt",
        "lte": "$lte",
        "in": "$in",
        "nin": "$nin",
    }

    clauses: list[dict[str, Any]] = []
    for f in filters:
        chroma_op = _OP_MAP.get(f.operator)
        if chroma_op is None:
            raise ValueError(f"Unsupported filter operator: {f.operator!r}")
        clauses.append({f.field: {chroma_op: f.value}})

    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def _distance_to_score(distance: float, space: str) -> float:
    # Chroma reports distances; cosine and ip are 1 - similarity.
    if space == "l2":
        return 1.0 / (1.0 + distance)
    return 1.0 - distance


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Chroma keys records by string, so point ids are stored as decimal
    strings and converted back to ``int`` on the way out.  The declared
    dimensionality is kept in the collection metadata.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built client (e.g. ``chromadb.EphemeralClient()``), overrides
        *host* / *port*.
    """

    def __init__(
        self,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any | None = None,
    ) -> None:
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)

    def _collection(self, collection_name: str) -> Any:
        return self._client.get_collection(collection_name, embedding_function=None)

    # -- collection management ------------------------------------------------

    def create_collection(
        self,
        collection_name: str,
        dimension: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        logger.info("Creating collection %s (dim=%d)", collection_name, dimension)
        self._client.create_collection(
            name=collection_name,
            metadata={"hnsw:space": _SPACE_MAP[Distance(distance)], "dimension": dimension},
            embedding_function=None,
        )

    def delete_collection(self, collection_name: str) -> bool:
        if not self.collection_exists(collection_name):
            return False
        logger.info("Deleting collection %s", collection_name)
        self._client.delete_collection(collection_name)
        return True

    def collection_exists(self, collection_name: str) -> bool:
        # list_collections returns names on chromadb 0.6, Collection objects elsewhere.
        names = {getattr(c, "name", c) for c in self._client.list_collections()}
        return collection_name in names

    def collection_info(self, collection_name: str) -> CollectionInfo:
        collection = self._collection(collection_name)
        meta = collection.metadata or {}
        space = meta.get("hnsw:space", "l2")
        return CollectionInfo(
            name=collection_name,
            points_count=collection.count(),
            dimension=meta.get("dimension"),
            distance=_SPACE_REVERSE.get(space),
        )

    # -- points ---------------------------------------------------------------

    def upsert(self, collection_name: str, points: list[Point]) -> None:
        collection = self._collection(collection_name)
        collection.upsert(
            ids=[str(p.id) for p in points],
            embeddings=[p.vector for p in points],
            documents=[p.payload.get("text", "") for p in points],
            # Chroma metadata values must be flat str/int/float/bool
            metadatas=[
                {k: v for k, v in p.payload.items() if isinstance(v, (str, int, float, bool))}
                for p in points
            ],
        )

    def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        limit: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ScoredPoint]:
        collection = self._collection(collection_name)
        space = (collection.metadata or {}).get("hnsw:space", "l2")
        results = collection.query(
            query_embeddings=[vector],
            n_results=limit,
            where=_build_chroma_where(filters) if filters else None,
            include=["metadatas", "distances"],
        )

        ids = results.get("ids", [[]])[0]
        metas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        return [
            ScoredPoint(id=int(point_id), score=_distance_to_score(dist, space), payload=dict(meta or {}))
            for point_id, meta, dist in zip(ids, metas, distances)
        ]

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
