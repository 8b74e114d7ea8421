"""Token-bounded text chunking."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Protocol

import tiktoken

from segment_rag.config import settings
from segment_rag.errors import ChunkDecodeError

logger = logging.getLogger(__name__)

# A UTF-8 character is at most 4 bytes, so at most 3 trailing tokens can
# hold an incomplete character.
_MAX_BACKTRACK = 3


class Encoding(Protocol):
    """The subset of ``tiktoken.Encoding`` the chunker relies on.

    Encodings that also provide ``decode_bytes`` (tiktoken does) get
    character-safe window boundaries and strict UTF-8 decoding.
    """

    def encode_ordinary(self, text: str) -> list[int]: ...

    def decode(self, tokens: list[int]) -> str: ...


@lru_cache(maxsize=None)
def get_encoding(name: str | None = None) -> tiktoken.Encoding:
    """Return (and cache) the tiktoken encoding called *name*."""
    return tiktoken.get_encoding(name or settings.tokenizer_encoding)


def count_tokens(text: str, encoding: Encoding | None = None) -> int:
    """Number of tokens *text* encodes to."""
    encoding = encoding or get_encoding()
    return len(encoding.encode_ordinary(text))


def _strict_decode(encoding: Encoding, tokens: list[int]) -> str:
    """Decode *tokens*, raising ``UnicodeDecodeError`` on a partial character."""
    decode_bytes = getattr(encoding, "decode_bytes", None)
    if decode_bytes is None:
        return encoding.decode(tokens)
    return decode_bytes(tokens).decode("utf-8")


def _next_window(encoding: Encoding, tokens: list[int], start: int, max_tokens: int) -> tuple[int, str]:
    """Return ``(end, text)`` for the longest decodable window starting at *start*."""
    end = min(start + max_tokens, len(tokens))
    floor = max(start + 1, end - _MAX_BACKTRACK)
    error: Exception | None = None
    for cut in range(end, floor - 1, -1):
        try:
            return cut, _strict_decode(encoding, tokens[start:cut])
        except UnicodeDecodeError as exc:
            # Window ends inside a multi-byte character; pull the boundary back.
            error = error or exc
        except Exception as exc:
            raise ChunkDecodeError(f"Failed to decode tokens {start}:{cut}: {exc}") from exc
    raise ChunkDecodeError(f"No valid UTF-8 boundary for tokens {start}:{end}: {error}") from error


def chunk(
    document: str,
    max_tokens: int = settings.chunk_max_tokens,
    encoding: Encoding | None = None,
) -> list[str]:
    """Split *document* into chunks of at most *max_tokens* tokens.

    The whole document is encoded once and the token stream is cut into
    consecutive, non-overlapping windows; each window is decoded on its
    own.  A window is shortened by up to three tokens when its last token
    would end inside a multi-byte character, so every chunk decodes
    cleanly and the chunks joined together give back the document.
    Chunk text is never re-split after decoding.

    Parameters
    ----------
    document:
        Full source text.  An empty document yields no chunks.
    max_tokens:
        Window size; a window may be shorter at a character boundary and
        the final window may be shorter still.
    encoding:
        Anything exposing ``encode_ordinary`` / ``decode``.  Defaults to
        ``settings.tokenizer_encoding``.

    Returns
    -------
    list[str]
        Chunks in document order.

    Raises
    ------
    ChunkDecodeError
        A window could not be decoded.
    """
    if max_tokens <= 0:
        raise ValueError(f"max_tokens must be positive, got {max_tokens}")
    if not document:
        return []

    encoding = encoding or get_encoding()
    tokens = encoding.encode_ordinary(document)

    chunks: list[str] = []
    start = 0
    while start < len(tokens):
        start, text = _next_window(encoding, tokens, start, max_tokens)
        chunks.append(text)

    logger.info("Split document (%d chars) into %d chunk(s) of <= %d tokens", len(document), len(chunks), max_tokens)
    return chunks
