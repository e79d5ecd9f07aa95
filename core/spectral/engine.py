"""
core/spectral/engine.py — Windowed FFT spectrum and spectrogram.

Design:
    - All functions are pure: (samples: np.ndarray, sample_rate: int) →
      frozen dataclasses. No state is kept between calls, so independent
      inputs can be analysed concurrently.
    - numpy does the transform, scipy supplies the symmetric Hann window
      w[i] = 0.5 * (1 - cos(2*pi*i / (n - 1))).
    - Only bins 0 .. fft_size/2 - 1 are reported (Nyquist excluded).
    - The one-shot spectrum is dB-scaled; spectrogram frames stay linear.
"""

from __future__ import annotations

import logging

import numpy as np
from scipy.signal import windows as scipy_windows

from core.errors import FftInitError
from core.spectral.types import SpectrogramResult, SpectrumResult, bin_frequencies

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DB_EPS = 1e-12  # keeps log10 finite for empty bins
DEFAULT_SPECTRUM_FFT_SIZE = 2048
DEFAULT_SPECTROGRAM_FFT_SIZE = 512
FRAMES_PER_BLOCK = 1024  # frames transformed per rfft call in compute_spectrogram


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_params(sample_rate: int, fft_size: int) -> None:
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}")
    if fft_size < 2:
        raise ValueError(f"fft_size must be >= 2, got {fft_size}")


def _as_mono(samples: np.ndarray) -> np.ndarray:
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Expected a 1-D sample array, got shape {arr.shape}")
    return arr


def _magnitudes(frames: np.ndarray, fft_size: int) -> np.ndarray:
    """|DFT| of each row of frames, bins 0 .. fft_size/2 - 1.

    Raises:
        FftInitError: The backend could not allocate or run the transform.
    """
    try:
        spectrum = np.fft.rfft(frames, n=fft_size, axis=-1)
    except (MemoryError, ValueError) as exc:
        raise FftInitError(fft_size, str(exc) or type(exc).__name__) from exc
    return np.abs(spectrum[..., : fft_size // 2])


def to_decibels(magnitudes: np.ndarray) -> np.ndarray:
    """Linear magnitude to dB: 20 * log10(mag + 1e-12)."""
    return 20.0 * np.log10(np.asarray(magnitudes, dtype=np.float64) + DB_EPS)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def hann_window(n: int) -> np.ndarray:
    """Symmetric Hann window of length n: 0.5 * (1 - cos(2*pi*i / (n - 1)))."""
    if n < 1:
        raise ValueError(f"Window length must be >= 1, got {n}")
    return scipy_windows.hann(n, sym=True)


def compute_spectrum(
    samples: np.ndarray,
    sample_rate: int,
    fft_size: int = DEFAULT_SPECTRUM_FFT_SIZE,
    *,
    apply_window: bool = True,
    decibels: bool = True,
) -> SpectrumResult:
    """Single-frame spectrum of the first fft_size samples.

    Copies min(len(samples), fft_size) samples into a zero-padded frame,
    applies a Hann window, transforms, and reports one value per bin.

    Args:
        samples: Mono samples, shape (N,). N may be shorter or longer than fft_size.
        sample_rate: Sample rate in Hz.
        fft_size: Transform length (default 2048).
        apply_window: Multiply by a Hann window first. False gives the raw
            rectangular-window spectrum.
        decibels: Report 20*log10(mag + 1e-12) when True, linear magnitude otherwise.

    Returns:
        SpectrumResult with fft_size // 2 bins in increasing frequency order.

    Raises:
        ValueError: sample_rate <= 0, fft_size < 2, or samples not 1-D.
        FftInitError: The FFT backend failed.
    """
    _check_params(sample_rate, fft_size)
    mono = _as_mono(samples)

    frame = np.zeros(fft_size, dtype=np.float64)
    n = min(mono.shape[0], fft_size)
    frame[:n] = mono[:n]
    if apply_window:
        frame *= hann_window(fft_size)

    magnitudes = _magnitudes(frame, fft_size)
    amplitudes = to_decibels(magnitudes) if decibels else magnitudes

    return SpectrumResult(
        frequencies_hz=bin_frequencies(fft_size, sample_rate),
        amplitudes=amplitudes,
        fft_size=fft_size,
        sample_rate=sample_rate,
        decibels=decibels,
    )


def spectrogram_frame_count(n_samples: int, fft_size: int, hop_size: int) -> int:
    """floor((n_samples - fft_size) / hop_size), floored at 0."""
    return max((n_samples - fft_size) // hop_size, 0)


def compute_spectrogram(
    samples: np.ndarray,
    sample_rate: int,
    fft_size: int = DEFAULT_SPECTROGRAM_FFT_SIZE,
    hop_size: int | None = None,
) -> SpectrogramResult:
    """Short-time magnitude spectra over overlapping Hann-windowed frames.

    Frame f covers samples [f * hop_size, f * hop_size + fft_size). The number
    of frames is floor((N - fft_size) / hop_size); input too short for even
    one frame yields an empty result rather than an error.

    Args:
        samples: Mono samples, shape (N,).
        sample_rate: Sample rate in Hz.
        fft_size: Frame and transform length (default 512).
        hop_size: Advance between frames. Defaults to fft_size // 2 (50% overlap).

    Returns:
        SpectrogramResult with magnitudes shaped (n_frames, fft_size // 2),
        linear scale.

    Raises:
        ValueError: sample_rate <= 0, fft_size < 2, hop_size < 1, or samples not 1-D.
        FftInitError: The FFT backend failed.
    """
    _check_params(sample_rate, fft_size)
    hop = fft_size // 2 if hop_size is None else hop_size
    if hop < 1:
        raise ValueError(f"hop_size must be >= 1, got {hop}")
    mono = _as_mono(samples)

    n_frames = spectrogram_frame_count(mono.shape[0], fft_size, hop)
    if n_frames == 0:
        return SpectrogramResult(
            magnitudes=np.zeros((0, fft_size // 2), dtype=np.float64),
            fft_size=fft_size,
            hop_size=hop,
            sample_rate=sample_rate,
        )

    window = hann_window(fft_size)
    # (n_windows, fft_size) view; only one block at a time is materialised
    frames = np.lib.stride_tricks.sliding_window_view(mono, fft_size)[::hop][:n_frames]
    magnitudes = np.empty((n_frames, fft_size // 2), dtype=np.float64)
    for start in range(0, n_frames, FRAMES_PER_BLOCK):
        stop = min(start + FRAMES_PER_BLOCK, n_frames)
        magnitudes[start:stop] = _magnitudes(frames[start:stop] * window, fft_size)
    magnitudes.flags.writeable = False

    logger.debug("Spectrogram: %d frames of %d bins (hop=%d)", n_frames, fft_size // 2, hop)
    return SpectrogramResult(
        magnitudes=magnitudes,
        fft_size=fft_size,
        hop_size=hop,
        sample_rate=sample_rate,
    )
