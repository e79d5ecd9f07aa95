"""
core/wav/chunks.py — Sequential cursor over RIFF chunk data.

A RIFF chunk is a 4-byte identifier, a u32 little-endian body size, then
the body. ChunkReader walks a byte buffer one header at a time; the caller
decides whether to consume a body or skip it.

All multi-byte numbers are little-endian.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass

from core.errors import TruncatedHeaderError

logger = logging.getLogger(__name__)

CHUNK_HEADER_SIZE = 8

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class ChunkHeader:
    """Identifier and declared body size of one RIFF chunk."""

    chunk_id: bytes
    size: int

    @property
    def name(self) -> str:
        """Identifier decoded as latin-1, e.g. 'fmt ' or 'data'."""
        return self.chunk_id.decode("latin-1")


class ChunkReader:
    """Forward-only cursor over an in-memory byte buffer.

    Args:
        data: The complete file contents.
        offset: Starting cursor position (default 0).
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = memoryview(data)
        self._pos = min(max(offset, 0), len(self._data))

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        """True when fewer bytes remain than a chunk header needs."""
        return self.remaining < CHUNK_HEADER_SIZE

    def _require(self, n: int) -> None:
        if self.remaining < n:
            raise TruncatedHeaderError(self._pos, n, self.remaining)

    def read_chunk_header(self) -> ChunkHeader:
        """Consume and return the next chunk header.

        Raises:
            TruncatedHeaderError: If fewer than 8 bytes remain.
        """
        self._require(CHUNK_HEADER_SIZE)
        chunk_id, size = _HEADER.unpack_from(self._data, self._pos)
        self._pos += CHUNK_HEADER_SIZE
        return ChunkHeader(chunk_id=bytes(chunk_id), size=size)

    def skip(self, n: int) -> None:
        """Advance the cursor by n bytes, stopping at the end of the buffer."""
        self._pos = min(self._pos + max(n, 0), len(self._data))

    def read(self, n: int) -> bytes:
        """Consume up to n bytes. Returns fewer only at the end of the buffer."""
        end = min(self._pos + max(n, 0), len(self._data))
        out = bytes(self._data[self._pos : end])
        self._pos = end
        return out

    def read_u16(self) -> int:
        self._require(_U16.size)
        (value,) = _U16.unpack_from(self._data, self._pos)
        self._pos += _U16.size
        return int(value)

    def read_u32(self) -> int:
        self._require(_U32.size)
        (value,) = _U32.unpack_from(self._data, self._pos)
        self._pos += _U32.size
        return int(value)

    def find_chunk(self, chunk_id: bytes) -> ChunkHeader | None:
        """Scan forward to the next chunk named chunk_id.

        Chunks with any other identifier are skipped by their declared size.
        On a match the cursor is left at the start of the chunk body.

        Returns:
            The matching header, or None if the buffer ran out first.
        """
        while not self.at_end():
            header = self.read_chunk_header()
            if header.chunk_id == chunk_id:
                return header
            logger.debug("Skipping chunk %r (%d bytes) at byte %d", header.name, header.size, self._pos)
            self.skip(header.size)
        return None
