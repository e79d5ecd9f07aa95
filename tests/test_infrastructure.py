"""Tests for infrastructure/ live-view helpers.

Covers:
- SpectrogramHistory: cap, bin-count guard, replace/clear, snapshot, image
- PositionThrottle: interval gating with an injected clock, thread safety
"""

from __future__ import annotations

import threading

import numpy as np
import pytest

from core.spectral.engine import compute_spectrogram
from infrastructure.spectrogram_history import SpectrogramHistory
from infrastructure.throttle import PositionThrottle

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _slice(value: float, bins: int = 4) -> tuple[np.ndarray, np.ndarray]:
    return np.arange(bins, dtype=np.float64), np.full(bins, value)


class _FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


# ---------------------------------------------------------------------------
# SpectrogramHistory
# ---------------------------------------------------------------------------


class TestSpectrogramHistory:
    def test_starts_empty(self) -> None:
        history = SpectrogramHistory()
        assert len(history) == 0
        assert history.bin_count == 0
        assert history.max_frames == 500
        assert history.snapshot().shape == (0, 0)

    def test_append_sets_bin_count(self) -> None:
        history = SpectrogramHistory()
        assert history.append(*_slice(0.5))
        assert history.bin_count == 4
        assert len(history) == 1

    def test_rejects_length_mismatch(self) -> None:
        history = SpectrogramHistory()
        assert not history.append(np.arange(4), np.zeros(3))
        assert len(history) == 0
        assert history.bin_count == 0

    def test_rejects_different_bin_count(self) -> None:
        history = SpectrogramHistory()
        history.append(*_slice(0.1, bins=4))
        assert not history.append(*_slice(0.1, bins=8))
        assert len(history) == 1

    def test_caps_retained_frames(self) -> None:
        history = SpectrogramHistory(max_frames=3)
        for v in range(5):
            history.append(*_slice(float(v)))
        snap = history.snapshot()
        assert len(history) == 3
        np.testing.assert_array_equal(snap[:, 0], [2.0, 3.0, 4.0])

    def test_snapshot_is_a_copy(self) -> None:
        history = SpectrogramHistory()
        history.append(*_slice(0.5))
        snap = history.snapshot()
        snap[0, 0] = 99.0
        assert history.snapshot()[0, 0] == 0.5

    def test_appended_array_is_copied(self) -> None:
        history = SpectrogramHistory()
        freqs, mags = _slice(0.5)
        history.append(freqs, mags)
        mags[:] = 7.0
        assert history.snapshot()[0, 0] == 0.5

    def test_clear_resets_bin_count(self) -> None:
        history = SpectrogramHistory()
        history.append(*_slice(0.5, bins=4))
        history.clear()
        assert len(history) == 0
        assert history.append(*_slice(0.5, bins=8))
        assert history.bin_count == 8

    def test_replace_with_spectrogram(self) -> None:
        result = compute_spectrogram(np.random.default_rng(0).standard_normal(4096), 8000, 256)
        history = SpectrogramHistory()
        history.append(*_slice(0.5, bins=4))
        history.replace(result)
        assert len(history) == result.n_frames
        assert history.bin_count == 128
        np.testing.assert_allclose(history.snapshot(), result.magnitudes)

    def test_replace_keeps_newest_when_over_cap(self) -> None:
        result = compute_spectrogram(np.random.default_rng(1).standard_normal(4096), 8000, 256)
        history = SpectrogramHistory(max_frames=5)
        history.replace(result)
        np.testing.assert_allclose(history.snapshot(), result.magnitudes[-5:])

    def test_replace_with_empty_resets(self) -> None:
        history = SpectrogramHistory()
        history.append(*_slice(0.5))
        history.replace(compute_spectrogram(np.zeros(10), 8000))
        assert len(history) == 0
        assert history.bin_count == 0

    def test_intensity_image_orientation_and_scale(self) -> None:
        history = SpectrogramHistory()
        history.append(np.arange(3), np.array([0.0, 0.5, 2.0]))
        history.append(np.arange(3), np.array([1.0, 0.0, -1.0]))
        img = history.intensity_image()
        assert img.dtype == np.uint8
        assert img.shape == (3, 2)
        # bottom row is bin 0
        np.testing.assert_array_equal(img[-1], [0, 255])
        np.testing.assert_array_equal(img[1], [127, 0])
        np.testing.assert_array_equal(img[0], [255, 0])

    def test_intensity_image_custom_max(self) -> None:
        history = SpectrogramHistory()
        history.append(np.arange(1), np.array([5.0]))
        assert history.intensity_image(max_magnitude=10.0)[0, 0] == 127

    def test_intensity_image_invalid_max(self) -> None:
        with pytest.raises(ValueError):
            SpectrogramHistory().intensity_image(max_magnitude=0.0)

    def test_invalid_max_frames(self) -> None:
        with pytest.raises(ValueError, match="max_frames"):
            SpectrogramHistory(max_frames=0)

    def test_concurrent_appends_respect_cap(self) -> None:
        history = SpectrogramHistory(max_frames=50)

        def worker() -> None:
            for _ in range(200):
                history.append(*_slice(1.0))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(history) == 50
        assert history.snapshot().shape == (50, 4)


# ---------------------------------------------------------------------------
# PositionThrottle
# ---------------------------------------------------------------------------


class TestPositionThrottle:
    def test_first_call_allowed(self) -> None:
        assert PositionThrottle(clock=_FakeClock()).allow()

    def test_blocks_within_interval(self) -> None:
        clock = _FakeClock()
        throttle = PositionThrottle(0.05, clock=clock)
        assert throttle.allow()
        clock.now += 0.02
        assert not throttle.allow()
        clock.now += 0.02
        assert not throttle.allow()
        assert throttle.dropped == 2

    def test_allows_after_interval(self) -> None:
        clock = _FakeClock()
        throttle = PositionThrottle(0.05, clock=clock)
        throttle.allow()
        clock.now += 0.06
        assert throttle.allow()

    def test_interval_measured_from_last_allowed(self) -> None:
        clock = _FakeClock()
        throttle = PositionThrottle(0.05, clock=clock)
        throttle.allow()  # t=0
        clock.now += 0.04
        throttle.allow()  # dropped, does not move the window
        clock.now += 0.02  # t=0.06
        assert throttle.allow()

    def test_zero_interval_allows_everything(self) -> None:
        throttle = PositionThrottle(0.0, clock=_FakeClock())
        assert all(throttle.allow() for _ in range(10))

    def test_reset(self) -> None:
        clock = _FakeClock()
        throttle = PositionThrottle(0.05, clock=clock)
        throttle.allow()
        assert not throttle.allow()
        throttle.reset()
        assert throttle.dropped == 0
        assert throttle.allow()

    def test_negative_interval_raises(self) -> None:
        with pytest.raises(ValueError):
            PositionThrottle(-0.1)

    def test_concurrent_callers_single_winner(self) -> None:
        clock = _FakeClock()
        throttle = PositionThrottle(1.0, clock=clock)
        results: list[bool] = []
        lock = threading.Lock()

        def worker() -> None:
            allowed = throttle.allow()
            with lock:
                results.append(allowed)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 1
        assert throttle.dropped == 15
