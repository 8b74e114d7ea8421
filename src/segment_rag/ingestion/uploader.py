"""Pair segments with ids and vectors and upsert them as points."""

from __future__ import annotations

import logging

from segment_rag.errors import ArityMismatchError, UploadError
from segment_rag.retrieval.base import VectorStoreBase
from segment_rag.retrieval.models import Point, SegmentRecord

logger = logging.getLogger(__name__)


class Uploader:
    """Blocking, overwrite-by-id upserts into a vector store.

    Parameters
    ----------
    store:
        Target backend.
    dimension:
        Declared dimensionality of the target collection.  When set,
        vectors of any other length are rejected before the store is
        contacted.
    """

    def __init__(self, store: VectorStoreBase, *, dimension: int | None = None) -> None:
        self._store = store
        self.dimension = dimension

    def upload(
        self,
        ids: list[int],
        texts: list[str],
        vectors: list[list[float]],
        collection: str,
    ) -> None:
        """Upsert one point per index ``i`` of the three parallel sequences.

        Payload text is stripped of surrounding whitespace.  Uploading
        the same arguments twice leaves the collection unchanged.

        Raises
        ------
        ArityMismatchError
            The sequences differ in length; nothing is sent.
        UploadError
            Dimensionality mismatch, or the store failed / rejected the batch.
        """
        if not (len(ids) == len(texts) == len(vectors)):
            raise ArityMismatchError(
                f"ids ({len(ids)}), texts ({len(texts)}) and vectors ({len(vectors)}) differ in length"
            )
        if not ids:
            return

        if self.dimension is not None:
            for point_id, vector in zip(ids, vectors):
                if len(vector) != self.dimension:
                    raise UploadError(
                        f"Point {point_id} has dimension {len(vector)}, "
                        f"collection {collection!r} expects {self.dimension}"
                    )

        try:
            points = [
                Point(id=point_id, vector=vector, payload={"text": text.strip()})
                for point_id, text, vector in zip(ids, texts, vectors)
            ]
        except ValueError as exc:
            raise UploadError(f"Invalid point for {collection!r}: {exc}") from exc

        try:
            self._store.upsert(collection, points)
        except Exception as exc:
            raise UploadError(f"Upsert of {len(points)} point(s) into {collection!r} failed: {exc}") from exc
        logger.info("Upserted %d point(s) into %s", len(points), collection)

    def upload_records(self, records: list[SegmentRecord], collection: str) -> None:
        """Upload already-bundled records."""
        missing = [r.id for r in records if r.vector is None]
        if missing:
            raise ArityMismatchError(f"{len(missing)} record(s) have no vector, e.g. id {missing[0]}")
        self.upload(
            [r.id for r in records],
            [r.text for r in records],
            [r.vector for r in records],
            collection,
        )
