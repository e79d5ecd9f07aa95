"""
core/analysis.py — Decode → downmix → spectrum → spectrogram pipeline.

analyze_bytes() runs the whole chain over an in-memory WAV file and hands
each product to a listener the moment it exists, so a view can draw the
waveform while the spectral stages are still running:

    bytes
      │
      ├─ read_header()          → listener.on_metadata(AudioMetadata)
      ├─ decode_samples()       → listener.on_waveform(SampleBuffer)
      ├─ compute_spectrum()     → listener.on_spectrum(SpectrumResult)
      └─ compute_spectrogram()  → listener.on_spectrogram(SpectrogramResult)

A failure at any stage goes to listener.on_error(message) and is re-raised.
Products delivered before the failure are not retracted.

reanalyze_around_position() is the "live spectrum while playing" path: a
pure function of an existing SampleBuffer and a playback position.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np

from core.config import DEFAULT_CONFIG, AnalysisConfig
from core.errors import AnalysisError
from core.spectral.engine import compute_spectrogram, compute_spectrum
from core.spectral.types import SpectrogramResult, SpectrumResult
from core.wav.decoder import decode_samples, read_header
from core.wav.types import AudioMetadata, SampleBuffer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Listener protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class AnalysisListener(Protocol):
    """
    Receiver for pipeline products as they become available.

    Methods are called on the thread running the analysis; a GUI is
    responsible for marshalling them onto its own thread.
    """

    def on_metadata(self, metadata: AudioMetadata) -> None: ...

    def on_waveform(self, buffer: SampleBuffer) -> None: ...

    def on_spectrum(self, spectrum: SpectrumResult) -> None: ...

    def on_spectrogram(self, spectrogram: SpectrogramResult) -> None: ...

    def on_error(self, message: str) -> None: ...


class CollectingListener:
    """Listener that records every delivery, in order.

    ``events`` holds the stage names ("metadata", "waveform", "spectrum",
    "spectrogram", "error") in the order they arrived.
    """

    def __init__(self) -> None:
        self.events: list[str] = []
        self.metadata: AudioMetadata | None = None
        self.waveform: SampleBuffer | None = None
        self.spectrum: SpectrumResult | None = None
        self.spectrogram: SpectrogramResult | None = None
        self.errors: list[str] = []

    def on_metadata(self, metadata: AudioMetadata) -> None:
        self.events.append("metadata")
        self.metadata = metadata

    def on_waveform(self, buffer: SampleBuffer) -> None:
        self.events.append("waveform")
        self.waveform = buffer

    def on_spectrum(self, spectrum: SpectrumResult) -> None:
        self.events.append("spectrum")
        self.spectrum = spectrum

    def on_spectrogram(self, spectrogram: SpectrogramResult) -> None:
        self.events.append("spectrogram")
        self.spectrogram = spectrogram

    def on_error(self, message: str) -> None:
        self.events.append("error")
        self.errors.append(message)


# ---------------------------------------------------------------------------
# FileAnalysis — the output of the complete pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class FileAnalysis:
    """All four products of one successful analysis.

    Attributes:
        metadata:    Decoded format description.
        waveform:    Normalized mono samples.
        spectrum:    One-shot spectrum of the first spectrum_fft_size samples.
        spectrogram: Linear-magnitude spectrogram of the full buffer.
        source:      Path or label the bytes came from ("" for raw bytes).
    """

    metadata: AudioMetadata
    waveform: SampleBuffer
    spectrum: SpectrumResult
    spectrogram: SpectrogramResult
    source: str = field(default="")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def analyze_bytes(
    data: bytes,
    *,
    config: AnalysisConfig = DEFAULT_CONFIG,
    listener: AnalysisListener | None = None,
    source: str = "",
) -> FileAnalysis:
    """Run the full pipeline over a WAV file held in memory.

    Args:
        data: Complete WAV file contents.
        config: FFT sizes, hop and spectrum options.
        listener: Optional receiver for staged delivery.
        source: Label carried into FileAnalysis and log lines.

    Returns:
        FileAnalysis with all four products.

    Raises:
        AnalysisError: Any decode or transform failure. The listener's
            on_error has already been called with the same message.
    """
    try:
        header = read_header(data)
        metadata = header.metadata
        if listener is not None:
            listener.on_metadata(metadata)

        waveform = decode_samples(data, header)
        if listener is not None:
            listener.on_waveform(waveform)

        spectrum = compute_spectrum(
            waveform.samples,
            metadata.sample_rate,
            config.spectrum_fft_size,
            apply_window=config.apply_window,
            decibels=config.spectrum_decibels,
        )
        if listener is not None:
            listener.on_spectrum(spectrum)

        spectrogram = compute_spectrogram(
            waveform.samples,
            metadata.sample_rate,
            config.spectrogram_fft_size,
            config.hop_size,
        )
        if listener is not None:
            listener.on_spectrogram(spectrogram)
    except AnalysisError as exc:
        logger.warning("Analysis of %s failed (%s): %s", source or "<bytes>", exc.kind.value, exc)
        if listener is not None:
            listener.on_error(str(exc))
        raise

    return FileAnalysis(
        metadata=metadata,
        waveform=waveform,
        spectrum=spectrum,
        spectrogram=spectrogram,
        source=source,
    )


def reanalyze_around_position(
    buffer: SampleBuffer | np.ndarray,
    sample_rate: int,
    position_seconds: float,
    fft_size: int = 2048,
    *,
    apply_window: bool = True,
    decibels: bool = True,
) -> SpectrumResult | None:
    """Spectrum of the fft_size samples starting at a playback position.

    Args:
        buffer: SampleBuffer or a 1-D sample array.
        sample_rate: Sample rate in Hz.
        position_seconds: Playback position. Negative values clamp to 0.
        fft_size: Transform length (default 2048).
        apply_window: Passed to compute_spectrum.
        decibels: Passed to compute_spectrum.

    Returns:
        SpectrumResult, or None when the position is at or past the end of
        the data or is not finite. Short tails are zero-padded by compute_spectrum.
    """
    offset = position_seconds * sample_rate
    if not math.isfinite(offset):
        return None
    samples = buffer.samples if isinstance(buffer, SampleBuffer) else np.asarray(buffer)
    start = max(math.floor(offset), 0)
    if start >= samples.shape[0]:
        return None
    window = samples[start : start + fft_size]
    return compute_spectrum(
        window,
        sample_rate,
        fft_size,
        apply_window=apply_window,
        decibels=decibels,
    )
