"""Drains a Bedrock response body into text.

Two stream shapes are accepted:

- Pull-based readers with ``read(amt)`` (botocore ``StreamingBody``), read
  until they return an empty buffer.
- Iterables of byte buffers, or of single ``int`` values when the transport
  hands the body over one byte at a time.

Chunks are buffered as raw bytes and decoded as UTF-8 exactly once after the
stream is exhausted. Decoding each chunk on its own corrupts multi-byte
characters that straddle a chunk boundary (e.g. "Ä" split across two
single-byte reads), so it is never done here.
"""

import logging
from collections.abc import Iterable
from typing import Any

from botocore.exceptions import BotoCoreError

from vct_builder.errors import MalformedResponseError, StreamReadError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096

# Exceptions that mean the transport broke while we were reading
TRANSPORT_ERRORS = (OSError, BotoCoreError)


def _read_pull(reader: Any, chunk_size: int) -> bytes:
    buffer = bytearray()
    while True:
        chunk = reader.read(chunk_size)
        if not chunk:
            break
        buffer.extend(chunk)
    return bytes(buffer)


def _read_iter(chunks: Iterable) -> bytes:
    buffer = bytearray()
    for chunk in chunks:
        if isinstance(chunk, int):
            buffer.append(chunk)
        elif isinstance(chunk, (bytes, bytearray, memoryview)):
            buffer.extend(chunk)
        else:
            raise StreamReadError(
                f"Unexpected stream chunk type: {type(chunk).__name__}"
            )
    return bytes(buffer)


def _close_quietly(stream: Any) -> None:
    close = getattr(stream, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception as e:
        # Must not mask the read result or the original read error
        logger.warning(f"Failed to close response stream: {e}")


def read_all(stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Drain ``stream`` to completion and return the concatenated bytes.

    Raises:
        StreamReadError: If the transport fails mid-read or the stream is of
            an unsupported shape
    """
    if isinstance(stream, (bytes, bytearray)):
        return bytes(stream)

    try:
        if hasattr(stream, "read"):
            data = _read_pull(stream, chunk_size)
        elif isinstance(stream, Iterable):
            data = _read_iter(stream)
        else:
            raise StreamReadError(f"Unsupported stream type: {type(stream).__name__}")
    except TRANSPORT_ERRORS as e:
        raise StreamReadError(f"Response stream failed mid-read: {e}", detail=repr(e)) from e
    finally:
        _close_quietly(stream)

    logger.debug(f"Drained {len(data)} bytes from response stream")
    return data


def decode(stream: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Drain ``stream`` and decode it as UTF-8.

    Args:
        stream: Pull-based reader, iterable of byte chunks, or raw bytes
        chunk_size: Read size for pull-based readers

    Returns:
        The complete response text

    Raises:
        StreamReadError: If the transport fails mid-read
        MalformedResponseError: If the drained bytes are not valid UTF-8
    """
    data = read_all(stream, chunk_size=chunk_size)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedResponseError(
            f"Response body is not valid UTF-8: {e}",
            raw_text=data.decode("utf-8", errors="replace"),
        ) from e
