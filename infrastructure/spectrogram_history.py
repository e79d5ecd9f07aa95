"""Bounded, thread-safe spectrogram history for live views.

A live spectrogram view appends one spectrum slice per playback update and
scrolls the oldest slice off once ``max_frames`` are held. Appends come from
the analysis thread while the view reads snapshots from the GUI thread, so
every access goes through one lock.

The history belongs to the presentation side; the spectral engine itself
keeps no state.

Usage::

    from infrastructure.spectrogram_history import SpectrogramHistory

    history = SpectrogramHistory(max_frames=500)
    history.replace(result.spectrogram)          # full-file spectrogram
    history.append(spectrum.frequencies_hz, mags)  # live slice
    image = history.intensity_image()
"""

from __future__ import annotations

import logging
from collections import deque
from threading import Lock

import numpy as np

from core.spectral.types import SpectrogramResult

logger = logging.getLogger(__name__)

_DEFAULT_MAX_FRAMES = 500


class SpectrogramHistory:
    """Ring buffer of magnitude slices with a fixed bin count.

    The first slice fixes the bin count; later slices of a different length
    are rejected until clear() or replace() resets it.

    Args:
        max_frames: Maximum slices retained (default: 500).
    """

    def __init__(self, max_frames: int = _DEFAULT_MAX_FRAMES) -> None:
        """Initialize an empty history."""
        if max_frames <= 0:
            raise ValueError(f"max_frames must be positive, got {max_frames}")
        self.max_frames = max_frames
        self._frames: deque[np.ndarray] = deque(maxlen=max_frames)
        self._bin_count = 0
        self._lock = Lock()

    @property
    def bin_count(self) -> int:
        """Bins per slice, 0 while empty."""
        with self._lock:
            return self._bin_count

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)

    def append(self, frequencies: np.ndarray, magnitudes: np.ndarray) -> bool:
        """
        Add one slice, dropping the oldest if the history is full.

        Args:
            frequencies: Bin frequencies of the slice.
            magnitudes: Linear magnitudes, same length as frequencies.

        Returns:
            True if stored, False if the lengths disagree or the bin count
            differs from the slices already held.
        """
        freqs = np.asarray(frequencies)
        mags = np.array(magnitudes, dtype=np.float64, copy=True).ravel()
        if freqs.shape[0] != mags.shape[0]:
            logger.debug("Rejected slice: %d freqs vs %d magnitudes", freqs.shape[0], mags.shape[0])
            return False

        with self._lock:
            if self._bin_count == 0:
                self._bin_count = mags.shape[0]
            elif mags.shape[0] != self._bin_count:
                logger.debug(
                    "Rejected slice with %d bins (history holds %d)", mags.shape[0], self._bin_count
                )
                return False
            mags.flags.writeable = False
            self._frames.append(mags)
            return True

    def replace(self, spectrogram: SpectrogramResult) -> None:
        """Swap the whole history for a computed spectrogram.

        Only the newest max_frames frames are kept.
        """
        with self._lock:
            self._frames.clear()
            self._frames.extend(spectrogram.magnitudes)
            self._bin_count = 0 if spectrogram.is_empty else spectrogram.magnitudes.shape[1]

    def clear(self) -> None:
        """Drop all slices and reset the bin count."""
        with self._lock:
            self._frames.clear()
            self._bin_count = 0

    def snapshot(self) -> np.ndarray:
        """Copy of the history shaped (n_frames, bin_count), oldest first."""
        with self._lock:
            if not self._frames:
                return np.zeros((0, self._bin_count), dtype=np.float64)
            return np.vstack(self._frames)

    def intensity_image(self, max_magnitude: float = 1.0) -> np.ndarray:
        """
        8-bit intensity image of the history.

        Magnitudes are scaled by max_magnitude, clamped to [0, 1] and mapped to
        0..255. The image is shaped (bin_count, n_frames): one column per
        slice, with the lowest frequency on the bottom row.

        Raises:
            ValueError: If max_magnitude <= 0.
        """
        if max_magnitude <= 0:
            raise ValueError(f"max_magnitude must be positive, got {max_magnitude}")
        frames = self.snapshot()
        norm = np.clip(frames / max_magnitude, 0.0, 1.0)
        return np.flipud((norm * 255).astype(np.uint8).T)
