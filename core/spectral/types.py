"""
core/spectral/types.py — Frozen data types for frequency-domain results.

Frequencies are never stored on the spectrogram: they are derived from
fft_size and sample_rate, so the frame matrix is the only payload.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.arrays import readonly_float64


def bin_frequencies(fft_size: int, sample_rate: int) -> np.ndarray:
    """Centre frequency of bins 0 .. fft_size/2 - 1: ``i * sample_rate / fft_size``."""
    return np.arange(fft_size // 2, dtype=np.float64) * sample_rate / fft_size


@dataclass(frozen=True, eq=False)
class SpectrumResult:
    """Single-frame spectrum.

    Invariants:
        len(frequencies_hz) == len(amplitudes) == fft_size // 2
        frequencies_hz is strictly increasing, starting at 0.0
    """

    frequencies_hz: np.ndarray
    amplitudes: np.ndarray
    """dB (20*log10(mag + 1e-12)) when ``decibels`` is True, else linear magnitude."""

    fft_size: int
    sample_rate: int
    decibels: bool = True

    def __post_init__(self) -> None:
        freqs = readonly_float64(self.frequencies_hz, 1)
        amps = readonly_float64(self.amplitudes, 1)
        if freqs.shape != amps.shape:
            raise ValueError(
                f"frequencies ({freqs.shape[0]}) and amplitudes ({amps.shape[0]}) differ in length"
            )
        object.__setattr__(self, "frequencies_hz", freqs)
        object.__setattr__(self, "amplitudes", amps)

    def __len__(self) -> int:
        return int(self.frequencies_hz.shape[0])

    @property
    def peak_bin(self) -> int:
        """Index of the loudest bin. -1 for an empty spectrum."""
        if len(self) == 0:
            return -1
        return int(np.argmax(self.amplitudes))

    @property
    def peak_frequency_hz(self) -> float:
        """Frequency of the loudest bin in Hz. 0.0 for an empty spectrum."""
        idx = self.peak_bin
        return float(self.frequencies_hz[idx]) if idx >= 0 else 0.0


@dataclass(frozen=True, eq=False)
class SpectrogramResult:
    """Time-ordered sequence of linear magnitude frames.

    Invariants:
        magnitudes.shape == (n_frames, fft_size // 2)
        frame f starts at sample f * hop_size
    """

    magnitudes: np.ndarray
    fft_size: int
    hop_size: int
    sample_rate: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "magnitudes", readonly_float64(self.magnitudes, 2))

    @property
    def n_frames(self) -> int:
        return int(self.magnitudes.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.n_frames == 0

    @property
    def frequencies_hz(self) -> np.ndarray:
        return bin_frequencies(self.fft_size, self.sample_rate)

    @property
    def frame_times_sec(self) -> np.ndarray:
        """Start time of each frame in seconds."""
        return np.arange(self.n_frames, dtype=np.float64) * self.hop_size / self.sample_rate
