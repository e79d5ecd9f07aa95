"""
core/wav/types.py — Frozen data types for decoded WAV audio.

All types are frozen dataclasses — immutable snapshots created once per
decode and handed to the caller.

Design principles:
    - No I/O, no side effects.
    - Sample arrays are numpy float64 and flagged read-only at construction,
      so a SampleBuffer can be shared between threads by reference.
    - Dataclasses holding arrays use eq=False: array equality is elementwise
      and would make ``==`` ambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.arrays import readonly_float64


@dataclass(frozen=True)
class AudioMetadata:
    """Format description decoded from the ``fmt `` and ``data`` chunks.

    Invariants:
        duration_sec == data_byte_size / byte_rate
        bit_rate == byte_rate * 8
        channels >= 1
    """

    duration_sec: float
    """Playing time in seconds, derived from the declared data size."""

    sample_rate: int
    """Frames per second, e.g. 44100."""

    byte_rate: int
    """Bytes per second as declared by the ``fmt `` chunk."""

    channels: int
    """Number of interleaved channels (1 = mono, 2 = stereo)."""

    bits_per_sample: int
    """Sample width in bits (8 or 16 for decodable files)."""

    bit_rate: int
    """Bits per second (byte_rate * 8)."""

    audio_format: int = 1
    """Format tag from the ``fmt `` chunk. Always 1 (PCM) after a successful decode."""

    block_align: int = 0
    """Bytes per frame as declared by the ``fmt `` chunk."""

    data_byte_size: int = 0
    """Declared size of the ``data`` chunk body in bytes."""

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    def summary(self) -> str:
        """One-line description, e.g. 'Dur: 1.00 s  SR: 8000 Hz  BR: 128000 bps  Ch: 1  Bits: 16'."""
        return (
            f"Dur: {self.duration_sec:.2f} s  SR: {self.sample_rate} Hz  "
            f"BR: {self.bit_rate} bps  Ch: {self.channels}  Bits: {self.bits_per_sample}"
        )


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Normalized mono samples, one value per audio frame.

    Invariants:
        samples.ndim == 1
        -1.0 <= samples[i] <= 1.0
        sample_rate > 0
    """

    samples: np.ndarray
    """Read-only float64 array of downmixed, normalized samples."""

    sample_rate: int
    """Sample rate in Hz, copied from AudioMetadata."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "samples", readonly_float64(np.ravel(self.samples)))

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_sec(self) -> float:
        """Length of the buffer in seconds. 0.0 for an empty buffer."""
        if self.sample_rate <= 0:
            return 0.0
        return len(self) / self.sample_rate

    def clamp_position(self, seconds: float) -> float:
        """Bound a playback marker position to [0, duration_sec]."""
        return min(max(seconds, 0.0), self.duration_sec)

    def envelope(self, n_buckets: int) -> tuple[np.ndarray, np.ndarray]:
        """Per-bucket minimum and maximum sample values.

        Splits the buffer into ``n_buckets`` contiguous spans of roughly equal
        length (one per horizontal pixel of a waveform view) and returns the
        lowest and highest sample in each. A waveform outline is drawn from the
        maxima left-to-right and back along the minima.

        Args:
            n_buckets: Number of spans. Capped at len(self) so every bucket
                holds at least one sample.

        Returns:
            (mins, maxs) — two float64 arrays of equal length. Both are empty
            when the buffer is empty.

        Raises:
            ValueError: If n_buckets < 1.
        """
        if n_buckets < 1:
            raise ValueError(f"n_buckets must be >= 1, got {n_buckets}")
        n = len(self)
        if n == 0:
            empty = np.zeros(0, dtype=np.float64)
            return empty, empty.copy()

        buckets = min(n_buckets, n)
        edges = np.linspace(0, n, buckets + 1).astype(np.int64)
        mins = np.minimum.reduceat(self.samples, edges[:-1])
        maxs = np.maximum.reduceat(self.samples, edges[:-1])
        return mins, maxs


@dataclass(frozen=True)
class WavHeader:
    """Everything the decoder learns before touching sample bytes.

    ``data_offset`` points at the first byte of the ``data`` chunk body.
    """

    metadata: AudioMetadata
    data_offset: int
    data_byte_size: int
