"""Domain models for points, search hits, and collection metadata."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

MAX_POINT_ID = 2**64 - 1


class Distance(str, Enum):
    """Similarity metric declared when a collection is created."""

    COSINE = "cosine"
    DOT = "dot"
    EUCLID = "euclid"


class MetadataFilter(BaseModel):
    """Declarative payload filter for vector-store searches.

    Attributes
    ----------
    field:
        The payload key to filter on (e.g. ``"source"``).
    operator:
        Comparison operator — one of ``eq``, ``ne``, ``gt``, ``gte``,
        ``lt``, ``lte``, ``in``, ``nin``.
    value:
        The value (or list of values for ``in`` / ``nin``) to compare against.
    """

    field: str
    operator: str = "eq"
    value: Any = None

    @classmethod
    def equals(cls, field: str, value: Any) -> MetadataFilter:
        return cls(field=field, operator="eq", value=value)

    @classmethod
    def one_of(cls, field: str, values: list[Any]) -> MetadataFilter:
        return cls(field=field, operator="in", value=values)


class Point(BaseModel):
    """The durable unit stored in a collection.

    An upsert with an existing ``id`` fully replaces the stored vector
    and payload.
    """

    id: int = Field(ge=0, le=MAX_POINT_ID)
    vector: list[float]
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.payload.get("text", "")


class ScoredPoint(BaseModel):
    """A search hit, in the order the store returned it."""

    id: int
    score: float
    payload: dict[str, Any] = Field(default_factory=dict)
    vector: list[float] | None = None

    @property
    def text(self) -> str:
        return self.payload.get("text", "")


class CollectionInfo(BaseModel):
    """Summary of a collection as reported by the store."""

    name: str
    points_count: int
    dimension: int | None = None
    distance: Distance | None = None


class SegmentRecord(BaseModel):
    """One segment bundled with its identifier and, once embedded, its vector.

    Records are created right after identifiers are drawn so that text,
    id and vector can never drift out of positional alignment.
    """

    id: int = Field(ge=0, le=MAX_POINT_ID)
    text: str
    vector: list[float] | None = None
