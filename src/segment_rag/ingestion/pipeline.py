"""Sequential ingestion loop: chunk → segment → allocate ids → embed → upload.

Chunks are processed strictly one after another; chunk *i + 1* is not
segmented before chunk *i* has been uploaded.  The first failure aborts
the run and propagates unchanged.

Usage::

    from segment_rag.ingestion.pipeline import IngestionPipeline

    pipeline = IngestionPipeline.from_settings()
    report = pipeline.ingest(Path("book.txt").read_text())
    print(report.points_uploaded)
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from segment_rag.config import settings
from segment_rag.ingestion.chunker import Encoding, chunk
from segment_rag.ingestion.embedder import Embedder
from segment_rag.ingestion.ids import IdentifierPool, allocate
from segment_rag.ingestion.segmenter import Segmenter
from segment_rag.ingestion.uploader import Uploader
from segment_rag.retrieval.models import SegmentRecord

logger = logging.getLogger(__name__)


class IngestionReport(BaseModel):
    """Outcome of one successful :meth:`IngestionPipeline.ingest` run."""

    collection: str
    chunks: int = 0
    segments: int = 0
    points_uploaded: int = 0
    ids: list[int] = Field(default_factory=list)


class IngestionPipeline:
    """Wire the ingestion components together.

    Parameters
    ----------
    segmenter, embedder, uploader:
        Pipeline stages.
    pool:
        Identifier pool owned by this pipeline for the whole run.
    collection_name:
        Target collection.
    max_tokens:
        Chunk window size.
    encoding:
        Tokenizer for chunking; defaults to ``settings.tokenizer_encoding``.
    """

    def __init__(
        self,
        segmenter: Segmenter,
        embedder: Embedder,
        uploader: Uploader,
        pool: IdentifierPool,
        *,
        collection_name: str = settings.collection_name,
        max_tokens: int = settings.chunk_max_tokens,
        encoding: Encoding | None = None,
    ) -> None:
        self.segmenter = segmenter
        self.embedder = embedder
        self.uploader = uploader
        self.pool = pool
        self.collection_name = collection_name
        self.max_tokens = max_tokens
        self.encoding = encoding

    @classmethod
    def from_settings(cls) -> IngestionPipeline:
        """Build a pipeline from the global settings."""
        from segment_rag.retrieval import get_vector_store

        pool = allocate(
            settings.id_pool_size,
            settings.id_strategy,
            start=settings.id_counter_start,
            seed=settings.id_seed,
        )
        return cls(
            Segmenter(),
            Embedder(dimension=settings.embedding_dimension),
            Uploader(get_vector_store(), dimension=settings.embedding_dimension),
            pool,
        )

    def ingest(self, document: str) -> IngestionReport:
        """Ingest *document* into the collection and report what was stored."""
        chunks = chunk(document, self.max_tokens, self.encoding)
        report = IngestionReport(collection=self.collection_name, chunks=len(chunks))

        for index, text in enumerate(chunks, 1):
            records = self.process_chunk(text)
            report.segments += len(records)
            report.points_uploaded += len(records)
            report.ids.extend(r.id for r in records)
            logger.info(
                "Chunk %d/%d: %d segment(s) uploaded, %d id(s) left",
                index,
                len(chunks),
                len(records),
                self.pool.remaining,
            )

        logger.info(
            "Ingested %d chunk(s) / %d segment(s) into %s",
            report.chunks,
            report.segments,
            self.collection_name,
        )
        return report

    def process_chunk(self, text: str) -> list[SegmentRecord]:
        """Segment, embed and upload one chunk; return the stored records."""
        segments = self.segmenter.segment(text)
        if not segments:
            logger.warning("Chunk produced no segments, skipping")
            return []

        ids = self.pool.take(len(segments))
        records = [SegmentRecord(id=i, text=s) for i, s in zip(ids, segments)]

        vectors = self.embedder.embed([r.text for r in records])
        for record, vector in zip(records, vectors):
            record.vector = vector

        self.uploader.upload_records(records, self.collection_name)
        return records
