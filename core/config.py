"""
Configuration dataclasses for the WAV analysis pipeline.

These immutable config objects decouple parameter passing from function signatures,
making it easier to define standard configurations and reuse them across analyses.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Configuration for file analysis and live re-analysis.

    Immutable configuration object shared by the analyzer, the live spectrum
    path and the spectrogram history owned by a view.

    Attributes:
        spectrum_fft_size: Transform length of the one-shot spectrum.
            Defaults to 2048.
        spectrogram_fft_size: Frame length of the spectrogram. Defaults to 512.
        spectrogram_hop_size: Advance between spectrogram frames. None means
            half the frame (50% overlap), which existing views expect.
        apply_window: Hann-window the one-shot spectrum. False selects the
            raw rectangular variant used for debugging.
        spectrum_decibels: Report the one-shot spectrum in dB. False reports
            linear magnitude.
        history_max_frames: Cap on slices retained by a live spectrogram view.
        position_update_interval: Minimum seconds between live re-analyses
            driven by playback ticks. Defaults to 0.05 (50 ms).

    Example:
        >>> config = AnalysisConfig(spectrum_fft_size=4096)
        >>> result = WavAnalyzer(config).analyze_file("/tmp/tone.wav")
    """

    spectrum_fft_size: int = 2048
    spectrogram_fft_size: int = 512
    spectrogram_hop_size: int | None = None
    apply_window: bool = True
    spectrum_decibels: bool = True
    history_max_frames: int = 500
    position_update_interval: float = 0.05

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.spectrum_fft_size < 2:
            raise ValueError(f"spectrum_fft_size must be >= 2, got {self.spectrum_fft_size}")
        if self.spectrogram_fft_size < 2:
            raise ValueError(
                f"spectrogram_fft_size must be >= 2, got {self.spectrogram_fft_size}"
            )
        if self.spectrogram_hop_size is not None and self.spectrogram_hop_size < 1:
            raise ValueError(
                f"spectrogram_hop_size must be >= 1, got {self.spectrogram_hop_size}"
            )
        if self.history_max_frames <= 0:
            raise ValueError(
                f"history_max_frames must be positive, got {self.history_max_frames}"
            )
        if self.position_update_interval < 0:
            raise ValueError(
                "position_update_interval must be non-negative, "
                f"got {self.position_update_interval}"
            )

    @property
    def hop_size(self) -> int:
        """Effective spectrogram hop, resolving None to half the frame."""
        if self.spectrogram_hop_size is None:
            return self.spectrogram_fft_size // 2
        return self.spectrogram_hop_size


# Pre-defined configurations for common use cases

DEFAULT_CONFIG = AnalysisConfig()
"""Default configuration: 2048-point dB spectrum, 512-point spectrogram with 50% overlap."""

RAW_SPECTRUM_CONFIG = AnalysisConfig(apply_window=False, spectrum_decibels=False)
"""Unwindowed linear-magnitude spectrum for debugging the transform."""

HIGH_RESOLUTION_CONFIG = AnalysisConfig(spectrum_fft_size=8192, spectrogram_fft_size=2048)
"""Finer frequency resolution at the cost of time resolution."""
