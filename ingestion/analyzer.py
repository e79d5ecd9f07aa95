"""
ingestion/analyzer.py — High-level orchestrator for the WAV analysis pipeline.

WavAnalyzer wires together the production pipeline:

    WAV file
        │
        ├─ read_wav_bytes()             [ingestion/wav_loader.py — I/O boundary]
        │       ↓
        └─ analyze_bytes()              [core/analysis.py — pure pipeline]
                ├─ read_header()        [core/wav/decoder.py]
                ├─ decode_samples()     [core/wav/decoder.py + downmix.py]
                ├─ compute_spectrum()   [core/spectral/engine.py]
                └─ compute_spectrogram()[core/spectral/engine.py]

This module is in `ingestion/` because it performs file I/O. The decode and
transform logic is pure and lives in `core/`.

Usage:
    analyzer = WavAnalyzer()
    result = analyzer.analyze_file("/path/to/take.wav", listener=view)
    print(result.metadata.summary())

    # on each (throttled) playback tick
    spectrum = analyzer.reanalyze_around_position(result.waveform, 12.5)
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from core.analysis import AnalysisListener, FileAnalysis, analyze_bytes, reanalyze_around_position
from core.config import DEFAULT_CONFIG, AnalysisConfig
from core.errors import WavIOError
from core.spectral.types import SpectrumResult
from core.wav.types import SampleBuffer
from ingestion.wav_loader import read_wav_bytes

logger = logging.getLogger(__name__)


class WavAnalyzer:
    """Analyzes WAV files and re-analyzes around playback positions.

    Holds only immutable configuration, so a single instance can serve
    several threads.

    Args:
        config: Analysis parameters. Defaults to DEFAULT_CONFIG.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def analyze_file(
        self,
        path: str | Path,
        listener: AnalysisListener | None = None,
    ) -> FileAnalysis:
        """Read a WAV file and run the full analysis pipeline.

        Products are pushed to ``listener`` as each stage completes.

        Args:
            path: Path to a .wav file.
            listener: Optional receiver for staged delivery.

        Returns:
            FileAnalysis with metadata, waveform, spectrum and spectrogram.

        Raises:
            WavIOError: The file could not be read.
            AnalysisError: Decode or transform failure (subclass names which).
        """
        t0 = time.monotonic()
        try:
            data = read_wav_bytes(path)
        except WavIOError as exc:
            logger.warning("Cannot analyze %s: %s", path, exc)
            if listener is not None:
                listener.on_error(str(exc))
            raise

        result = analyze_bytes(data, config=self.config, listener=listener, source=str(path))
        elapsed_ms = (time.monotonic() - t0) * 1000
        logger.info(
            "Analyzed %s: %s, %d spectrogram frames in %.1f ms",
            Path(path).name,
            result.metadata.summary(),
            result.spectrogram.n_frames,
            elapsed_ms,
        )
        return result

    def reanalyze_around_position(
        self,
        buffer: SampleBuffer,
        position_seconds: float,
        fft_size: int | None = None,
    ) -> SpectrumResult | None:
        """Spectrum at a playback position, or None past the end of the data.

        Uses the buffer's own sample rate and the configured spectrum options.
        Callers rate-limit invocations (see infrastructure/throttle.py).
        """
        return reanalyze_around_position(
            buffer,
            buffer.sample_rate,
            position_seconds,
            fft_size or self.config.spectrum_fft_size,
            apply_window=self.config.apply_window,
            decibels=self.config.spectrum_decibels,
        )
