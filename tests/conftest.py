"""
Shared fixtures for the test suite.

Centralizes the synthetic WAV builder so individual test files don't need
to repeat RIFF packing boilerplate.
"""

from __future__ import annotations

import struct
from collections.abc import Callable, Sequence

import numpy as np
import pytest

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SR = 8000
"""Default sample rate for synthetic files (Hz)."""


# ---------------------------------------------------------------------------
# RIFF builder
# ---------------------------------------------------------------------------


def _chunk(chunk_id: bytes, body: bytes, declared_size: int | None = None) -> bytes:
    size = len(body) if declared_size is None else declared_size
    return chunk_id + struct.pack("<I", size) + body


def build_wav(
    pcm: bytes,
    *,
    channels: int = 1,
    sample_rate: int = SR,
    bits: int = 16,
    audio_format: int = 1,
    byte_rate: int | None = None,
    block_align: int | None = None,
    fmt_extra: bytes = b"",
    before_fmt: Sequence[tuple[bytes, bytes]] = (),
    between: Sequence[tuple[bytes, bytes]] = (),
    data_size: int | None = None,
    include_fmt: bool = True,
    include_data: bool = True,
    riff_id: bytes = b"RIFF",
    form_type: bytes = b"WAVE",
) -> bytes:
    """Pack a RIFF/WAVE file around raw PCM bytes.

    ``before_fmt`` / ``between`` insert extra (id, body) chunks before the
    fmt chunk and between fmt and data. ``data_size`` overrides the declared
    data length without changing the bytes written.
    """
    bytes_per_sample = max(bits // 8, 1)
    if block_align is None:
        block_align = channels * bytes_per_sample
    if byte_rate is None:
        byte_rate = sample_rate * block_align

    body = b""
    for cid, cbody in before_fmt:
        body += _chunk(cid, cbody)
    if include_fmt:
        fmt = struct.pack(
            "<HHIIHH", audio_format, channels, sample_rate, byte_rate, block_align, bits
        )
        body += _chunk(b"fmt ", fmt + fmt_extra)
    for cid, cbody in between:
        body += _chunk(cid, cbody)
    if include_data:
        body += _chunk(b"data", pcm, declared_size=data_size)

    return riff_id + struct.pack("<I", 4 + len(body)) + form_type + body


def pcm16(values: Sequence[int] | np.ndarray) -> bytes:
    """Little-endian signed 16-bit PCM bytes."""
    return np.asarray(values, dtype="<i2").tobytes()


def sine_pcm16(
    freq_hz: float,
    *,
    sample_rate: int = SR,
    duration: float = 1.0,
    amplitude: float = 0.5,
) -> bytes:
    """Mono 16-bit PCM sine wave."""
    n = int(sample_rate * duration)
    t = np.arange(n) / sample_rate
    values = np.round(amplitude * 32767 * np.sin(2.0 * np.pi * freq_hz * t))
    return pcm16(values)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_wav() -> Callable[..., bytes]:
    """The ``build_wav`` packer."""
    return build_wav


@pytest.fixture()
def sine_wav_bytes() -> bytes:
    """1 s, 8000 Hz, mono, 16-bit 440 Hz sine."""
    return build_wav(sine_pcm16(440.0))


@pytest.fixture()
def sine_wav_file(tmp_path, sine_wav_bytes):
    """The 440 Hz sine written to ``tone.wav`` under tmp_path."""
    path = tmp_path / "tone.wav"
    path.write_bytes(sine_wav_bytes)
    return path
