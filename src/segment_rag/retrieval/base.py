"""Abstract base class for vector-store backends.

Adding a new backend (Pinecone, Weaviate, …) only requires subclassing
:class:`VectorStoreBase` and implementing the abstract methods.  The
ingestion and query paths are backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from segment_rag.retrieval.models import CollectionInfo, Distance, MetadataFilter, Point, ScoredPoint


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    Every method takes the collection name explicitly; one store handle
    can serve several collections.
    """

    # -- collection management ------------------------------------------------

    @abstractmethod
    def create_collection(
        self,
        collection_name: str,
        dimension: int,
        distance: Distance = Distance.COSINE,
    ) -> None:
        """Create *collection_name* with a fixed vector dimensionality."""
        ...

    @abstractmethod
    def delete_collection(self, collection_name: str) -> bool:
        """Drop the collection and all its points.

        Returns ``True`` when something was deleted.
        """
        ...

    @abstractmethod
    def collection_info(self, collection_name: str) -> CollectionInfo:
        """Return point count and vector parameters of the collection."""
        ...

    @abstractmethod
    def collection_exists(self, collection_name: str) -> bool:
        ...

    # -- points ---------------------------------------------------------------

    @abstractmethod
    def upsert(self, collection_name: str, points: list[Point]) -> None:
        """Insert or overwrite *points* by id.

        Must block until the store has acknowledged the write.
        """
        ...

    @abstractmethod
    def search(
        self,
        collection_name: str,
        vector: list[float],
        *,
        limit: int = 5,
        filters: list[MetadataFilter] | None = None,
    ) -> list[ScoredPoint]:
        """Return up to *limit* nearest points, most similar first.

        Results carry the payload; ``score`` is higher for closer points.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- helpers --------------------------------------------------------------

    def ensure_collection(
        self,
        collection_name: str,
        dimension: int,
        distance: Distance = Distance.COSINE,
    ) -> CollectionInfo:
        """Create the collection unless it exists; verify its dimensionality."""
        if not self.collection_exists(collection_name):
            self.create_collection(collection_name, dimension, distance)
        info = self.collection_info(collection_name)
        if info.dimension is not None and info.dimension != dimension:
            raise ValueError(
                f"Collection {collection_name!r} has dimension {info.dimension}, "
                f"expected {dimension}"
            )
        return info
