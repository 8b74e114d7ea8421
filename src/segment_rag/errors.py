"""Error taxonomy.

Every component surfaces failures as one of these types.  Upstream
exceptions (transport errors, non-success responses, SDK errors) are
chained with ``raise ... from exc`` so the original text stays attached.
"""

from __future__ import annotations


class SegmentRagError(Exception):
    """Base class for all pipeline errors."""


class ChunkDecodeError(SegmentRagError):
    """A token window could not be decoded back to text."""


class SegmentationError(SegmentRagError):
    """The chat endpoint failed or returned no usable content."""


class PoolExhaustedError(SegmentRagError):
    """An identifier was requested from an empty pool."""


class EmbeddingError(SegmentRagError):
    """The embedding call failed or broke positional correspondence."""


class ArityMismatchError(SegmentRagError, ValueError):
    """ids / texts / vectors passed to an upload differ in length."""


class UploadError(SegmentRagError):
    """The vector store rejected or failed an upsert."""


class QueryError(SegmentRagError):
    """Embedding the question or searching the collection failed."""
