"""LLM-driven segmentation of a chunk into semantically coherent units."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from segment_rag.config import settings
from segment_rag.errors import SegmentationError
from segment_rag.ingestion.prompts import build_segmentation_prompt

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)


def parse_segments(reply: str, delimiter: str = settings.segment_delimiter, keep_empty: bool = False) -> list[str]:
    """Split a model reply into segments.

    Every field between delimiters is one segment, in reply order.  A
    reply without the delimiter is a single segment.  The model may emit
    empty fields (leading, trailing or doubled delimiters): with
    ``keep_empty=False`` fields that are empty or whitespace-only are
    dropped, with ``keep_empty=True`` every raw field is returned as-is.

    >>> parse_segments("a~>_^~b~>_^~c")
    ['a', 'b', 'c']
    >>> parse_segments("a~>_^~", keep_empty=True)
    ['a', '']
    """
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")
    fields = reply.split(delimiter)
    if keep_empty:
        return fields
    return [f for f in fields if f.strip()]


def _reply_text(content: Any) -> str:
    """Flatten a chat message ``content`` (string or content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


class Segmenter:
    """Ask a chat model to split a chunk and parse its reply.

    Parameters
    ----------
    llm:
        Any LangChain chat model.  Defaults to :func:`segment_rag.llm.get_llm`.
    delimiter:
        Sentinel separating segments in the reply.
    keep_empty:
        Empty-field policy forwarded to :func:`parse_segments`.
    """

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        *,
        delimiter: str = settings.segment_delimiter,
        keep_empty: bool = settings.keep_empty_segments,
    ) -> None:
        if llm is None:
            from segment_rag.llm import get_llm

            llm = get_llm()
        self._llm = llm
        self.delimiter = delimiter
        self.keep_empty = keep_empty

    def segment(self, chunk: str) -> list[str]:
        """Return the segments of *chunk* in reply order.

        Raises
        ------
        SegmentationError
            The chat call failed or the reply carried no text.
        """
        messages = build_segmentation_prompt(chunk, self.delimiter)
        try:
            response = self._llm.invoke(messages)
        except Exception as exc:
            raise SegmentationError(f"Segmentation request failed: {exc}") from exc

        raw_text = _reply_text(getattr(response, "content", None))
        if not raw_text.strip():
            raise SegmentationError("Segmentation reply had no content")

        segments = parse_segments(raw_text, self.delimiter, keep_empty=self.keep_empty)
        logger.debug("Chunk of %d chars -> %d segment(s)", len(chunk), len(segments))
        return segments
