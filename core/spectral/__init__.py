"""
core/spectral — Frequency-domain analysis of mono sample buffers.

All functions are pure: numpy arrays in → frozen dataclasses out.

Public API:
    Types:   SpectrumResult, SpectrogramResult
    Engine:  compute_spectrum, compute_spectrogram, hann_window, to_decibels
"""

from core.spectral.engine import (
    compute_spectrogram,
    compute_spectrum,
    hann_window,
    spectrogram_frame_count,
    to_decibels,
)
from core.spectral.types import SpectrogramResult, SpectrumResult, bin_frequencies

__all__ = [
    "SpectrumResult",
    "SpectrogramResult",
    "bin_frequencies",
    "compute_spectrum",
    "compute_spectrogram",
    "hann_window",
    "spectrogram_frame_count",
    "to_decibels",
]
