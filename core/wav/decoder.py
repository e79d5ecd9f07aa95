"""
core/wav/decoder.py — RIFF/WAVE PCM decoder.

Parses the container with ChunkReader, validates the ``fmt `` chunk, locates
the ``data`` chunk and turns the interleaved PCM bytes into a normalized
mono SampleBuffer.

Design:
    - Pure: bytes in → frozen dataclasses out. File reading lives in
      ingestion/wav_loader.py.
    - All-or-nothing. Every structural violation raises its own DecodeError
      subclass; nothing partial is ever returned.
    - Two-phase API (read_header, decode_samples) so the orchestrator can
      publish metadata before the sample decode runs. decode() composes both.
    - Supported sample widths: 16-bit signed LE and 8-bit unsigned. Any other
      width fails the whole decode instead of skipping bytes per sample.
"""

from __future__ import annotations

import logging

import numpy as np

from core.errors import (
    DataChunkMissingError,
    FmtChunkMissingError,
    NotRiffError,
    NotWaveError,
    UnsupportedBitDepthError,
    UnsupportedFormatError,
)
from core.wav.chunks import ChunkReader
from core.wav.downmix import downmix
from core.wav.types import AudioMetadata, SampleBuffer, WavHeader

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

WAVE_FORMAT_PCM = 1
_FMT_BODY_SIZE = 16  # audio_format .. bits_per_sample

SUPPORTED_BIT_DEPTHS: frozenset[int] = frozenset({8, 16})

# 8-bit WAV is unsigned with silence at 128; scale to the 16-bit range
_U8_CENTER = 128
_U8_SCALE = 256


# ---------------------------------------------------------------------------
# Header parsing
# ---------------------------------------------------------------------------


def _check_riff_header(reader: ChunkReader) -> None:
    signature = reader.read(4)
    if signature != RIFF_ID:
        raise NotRiffError()
    reader.skip(4)  # RIFF size, not validated against the real length
    form_type = reader.read(4)
    if form_type != WAVE_ID:
        raise NotWaveError()


def read_header(data: bytes) -> WavHeader:
    """Validate the container and decode the format description.

    Args:
        data: Complete WAV file contents.

    Returns:
        WavHeader with AudioMetadata and the location of the sample bytes.

    Raises:
        NotRiffError: First four bytes are not 'RIFF'.
        NotWaveError: Form type is not 'WAVE'.
        FmtChunkMissingError: No 'fmt ' chunk before the end of the buffer.
        UnsupportedFormatError: Format tag is not PCM, or channels/byte rate are zero.
        DataChunkMissingError: No 'data' chunk after 'fmt '.
        TruncatedHeaderError: A header or fmt field runs past the buffer end.
    """
    reader = ChunkReader(data)
    _check_riff_header(reader)

    fmt = reader.find_chunk(FMT_ID)
    if fmt is None:
        raise FmtChunkMissingError()

    audio_format = reader.read_u16()
    if audio_format != WAVE_FORMAT_PCM:
        raise UnsupportedFormatError(audio_format)
    num_channels = reader.read_u16()
    sample_rate = reader.read_u32()
    byte_rate = reader.read_u32()
    block_align = reader.read_u16()
    bits_per_sample = reader.read_u16()
    if fmt.size > _FMT_BODY_SIZE:
        reader.skip(fmt.size - _FMT_BODY_SIZE)  # cbSize and extension fields

    if num_channels == 0:
        raise UnsupportedFormatError(audio_format, "WAV declares zero channels.")
    if sample_rate == 0 or byte_rate == 0:
        raise UnsupportedFormatError(
            audio_format,
            f"WAV declares sample rate {sample_rate} Hz and byte rate {byte_rate}; both must be non-zero.",
        )

    data_chunk = reader.find_chunk(DATA_ID)
    if data_chunk is None:
        raise DataChunkMissingError()

    metadata = AudioMetadata(
        duration_sec=data_chunk.size / byte_rate,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        channels=num_channels,
        bits_per_sample=bits_per_sample,
        bit_rate=byte_rate * 8,
        audio_format=audio_format,
        block_align=block_align,
        data_byte_size=data_chunk.size,
    )
    return WavHeader(
        metadata=metadata,
        data_offset=reader.position,
        data_byte_size=data_chunk.size,
    )


# ---------------------------------------------------------------------------
# Sample decoding
# ---------------------------------------------------------------------------


def _frame_sums(raw: bytes, n_frames: int, channels: int, bits: int) -> np.ndarray:
    """Sum each frame's channel values on the 16-bit scale."""
    count = n_frames * channels
    if count == 0:
        return np.zeros(0, dtype=np.float64)
    if bits == 16:
        values = np.frombuffer(raw, dtype="<i2", count=count).astype(np.float64)
    else:
        values = np.frombuffer(raw, dtype=np.uint8, count=count).astype(np.float64)
        values = (values - _U8_CENTER) * _U8_SCALE
    return values.reshape(n_frames, channels).sum(axis=1)


def decode_samples(data: bytes, header: WavHeader) -> SampleBuffer:
    """Decode the data chunk described by header into a mono SampleBuffer.

    Frame count is data_byte_size // (channels * bytes_per_sample). When the
    chunk declares more bytes than the buffer holds, only the whole frames
    actually present are decoded.

    Raises:
        UnsupportedBitDepthError: bits_per_sample is not 8 or 16.
    """
    meta = header.metadata
    if meta.bits_per_sample not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepthError(meta.bits_per_sample)

    frame_bytes = meta.channels * meta.bytes_per_sample
    if meta.block_align and meta.block_align != frame_bytes:
        logger.warning(
            "fmt block_align=%d disagrees with channels*bytes=%d; using the latter",
            meta.block_align,
            frame_bytes,
        )

    declared_frames = header.data_byte_size // frame_bytes
    available = max(len(data) - header.data_offset, 0)
    n_frames = min(declared_frames, available // frame_bytes)
    if n_frames < declared_frames:
        logger.warning(
            "data chunk declares %d frames but only %d are present; decoding what is there",
            declared_frames,
            n_frames,
        )

    start = header.data_offset
    raw = data[start : start + n_frames * frame_bytes]
    sums = _frame_sums(raw, n_frames, meta.channels, meta.bits_per_sample)
    return SampleBuffer(samples=downmix(sums, meta.channels), sample_rate=meta.sample_rate)


def decode(data: bytes) -> tuple[AudioMetadata, SampleBuffer]:
    """Decode a complete RIFF/WAVE PCM file held in memory.

    Args:
        data: The file's bytes.

    Returns:
        (metadata, samples) — a complete, valid result.

    Raises:
        DecodeError: One of its subclasses, naming the first violation found.
    """
    header = read_header(data)
    samples = decode_samples(data, header)
    logger.debug(
        "Decoded %d frames (%d ch, %d bit, %d Hz)",
        len(samples),
        header.metadata.channels,
        header.metadata.bits_per_sample,
        header.metadata.sample_rate,
    )
    return header.metadata, samples
