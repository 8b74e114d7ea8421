"""Qdrant implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from typing import Any

from qdrant_client import QdrantClient
from qdrant_client.http import models as rest

from segment_rag.config import settings
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import CollectionInfo, Distance, MetadataFilter, Point, ScoredPoint

logger = logging.getLogger(__name__)

_DISTANCE_MAP = {
    Distance.COSINE: rest.Distance.COSINE,
    Distance.DOT: rest.Distance.DOT,
    Distance.EUCLID: rest.Distance.EUCLID,
}
_DISTANCE_REVERSE = {v: k for k, v in _DISTANCE_MAP.items()}


def _build_qdrant_filter(filters: list[MetadataFilter]) -> rest.Filter | None:
    """Convert a list of :class:`MetadataFilter` to a Qdrant ``Filter``."""
    if not filters:
        return None

    must: list[Any] = []
    must_not: list[Any] = []
    for f in filters:
        if f.operator == "eq":
            must.append(rest.FieldCondition(key=f.field, match=rest.MatchValue(value=f.value)))
        elif f.operator == "ne":
            must_not.append(rest.FieldCondition(key=f.field, match=rest.MatchValue(value=f.value)))
        elif f.operator == "in":
            must.append(rest.FieldCondition(key=f.field, match=rest.MatchAny(any=list(f.value))))
        elif f.operator == "nin":
            must_not.append(rest.FieldCondition(key=f.field, match=rest.MatchAny(any=list(f.value))))
        elif f.operator in ("gt", "gte", "lt", "lte"):
            must.append(rest.FieldCondition(key=f.field, range=rest.Range(**{f.operator: f.value})))
        else:
            raise ValueError(f"Unsupported filter operator: {f.operator!r}")

    return rest.Filter(must=must or None, must_not=must_not or None)


class QdrantVectorStore(VectorStoreBase):
    """Qdrant-backed vector store.

    Parameters
    ----------
    url:
        Qdrant REST endpoint.  Ignored when *location* is given.
    api_key:
        API key for managed Qdrant instances.
    location:
        Passed straight to ``QdrantClient``; ``":memory:"`` runs an
        in-process store (used by the test-suite).
    client:
        Pre-built client, overrides every other argument.
    """

    def __init__(
        self,
        *,
        url: str = settings.qdrant_url,
        api_key: str = settings.qdrant_api_key,
        location: str | None = None,
        client: QdrantClient | None = None,
    ) -> None:
        if client is not None:
            self._client = client
        elif location is not None:
            self._client = QdrantClient(location=location)
        else:
            self._client = QdrantClient(
                url=url,
                api_key=api_key or None,
                timeout=int(settings.request_timeout),
            )

    # -- collection management ------------------------------------------------

    def create_collection(
        self,
        collection_name: str,
        dimension: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        logger.info(
            "Creating collection %s (dim=%d, distance=%s)", collection_name, dimension, distance.value
        )
        self._client.create_collection(
            collection_name=collection_name,
            vectors_config=rest.VectorParams(size=dimension, distance=_DISTANCE_MAP[Distance(distance)]),
        )

    def delete_collection(self, collection_name: str) -> bool:
        logger.info("Deleting collection %s", collection_name)
        return bool(self._client.delete_collection(collection_name=collection_name))

    def collection_exists(self, collection_name: str) -> bool:
        return self._client.collection_exists(collection_name)

    def collection_info(self, collection_name: str) -> CollectionInfo:
        info = self._client.get_collection(collection_name)
        vectors = info.config.params.vectors
        dimension = distance = None
        # Unnamed vector config only; named vectors come back as a dict.
        if isinstance(vectors, rest.VectorParams):
            dimension = vectors.size
            distance = _DISTANCE_REVERSE.get(vectors.distance)
        return CollectionInfo(
            name=collection_name,
            points_count=info.points_count or 0,
            dimension=dimension,
            distance=distance,
        )

    # -- points ---------------------------------------------------------------

    def upsert(self, collection_name: str, points: list[Point]) -> None:
        self._client.upsert(
            collection_name=collection_name,
            points=[rest.PointStruct(id=p.id, vector=p.vector, payload=p.payload) for p in points],
            wait=True,
        )

    def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        limit: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ScoredPoint]:
        response = self._client.query_points(
            collection_name=collection_name,
            query=vector,
            limit=limit,
            query_filter=_build_qdrant_filter(filters) if filters else None,
            with_payload=True,
        )
        return [
            ScoredPoint(id=int(hit.id), score=hit.score, payload=hit.payload or {})
            for hit in response.points
        ]

    def health_check(self) -> bool:
        try:
            self._client.get_collections()
            return True
        except Exception:
            logger.warning("Qdrant health-check failed", exc_info=True)
            return False
