"""
Tests for ingestion/analyzer.py — WavAnalyzer.

Test organisation:
    TestWavAnalyzerInit          — config defaults
    TestAnalyzeFile              — end-to-end over real temp files
    TestAnalyzeFileErrors        — I/O and decode failures reach the listener
    TestReanalyze                — live spectrum via the analyzer
    TestLiveViewIntegration      — throttle + history driven by playback ticks
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import numpy as np
import pytest

from core.analysis import CollectingListener
from core.config import DEFAULT_CONFIG, AnalysisConfig, RAW_SPECTRUM_CONFIG
from core.errors import ErrorKind, NotWaveError, WavIOError
from infrastructure.spectrogram_history import SpectrogramHistory
from infrastructure.throttle import PositionThrottle
from ingestion.analyzer import WavAnalyzer


class TestWavAnalyzerInit:
    def test_default_config(self):
        assert WavAnalyzer().config is DEFAULT_CONFIG

    def test_custom_config(self):
        config = AnalysisConfig(spectrum_fft_size=4096)
        assert WavAnalyzer(config).config is config


class TestAnalyzeFile:
    def test_round_trip_sine_file(self, sine_wav_file):
        result = WavAnalyzer().analyze_file(sine_wav_file)
        assert result.metadata.sample_rate == 8000
        assert result.metadata.duration_sec == pytest.approx(1.0)
        assert abs(result.spectrum.peak_bin - round(440 * 2048 / 8000)) <= 1
        assert result.source == str(sine_wav_file)

    def test_listener_receives_all_products(self, sine_wav_file):
        listener = CollectingListener()
        WavAnalyzer().analyze_file(sine_wav_file, listener=listener)
        assert listener.events == ["metadata", "waveform", "spectrum", "spectrogram"]

    def test_logs_summary(self, sine_wav_file, caplog):
        with caplog.at_level(logging.INFO, logger="ingestion.analyzer"):
            WavAnalyzer().analyze_file(sine_wav_file)
        assert "SR: 8000 Hz" in caplog.text

    def test_elapsed_time_uses_monotonic_clock(self, sine_wav_file, caplog):
        with patch("ingestion.analyzer.time.monotonic", side_effect=[10.0, 10.25]):
            with caplog.at_level(logging.INFO, logger="ingestion.analyzer"):
                WavAnalyzer().analyze_file(sine_wav_file)
        assert "in 250.0 ms" in caplog.text

    def test_stereo_8bit_file(self, tmp_path, make_wav):
        pcm = bytes([128, 128] * 4000)
        path = tmp_path / "silence.wav"
        path.write_bytes(make_wav(pcm, bits=8, channels=2))
        result = WavAnalyzer().analyze_file(path)
        assert result.metadata.channels == 2
        assert len(result.waveform) == 4000
        assert not result.waveform.samples.any()


class TestAnalyzeFileErrors:
    def test_missing_file_reports_and_raises(self, tmp_path):
        listener = CollectingListener()
        with pytest.raises(WavIOError) as excinfo:
            WavAnalyzer().analyze_file(tmp_path / "missing.wav", listener=listener)
        assert excinfo.value.kind is ErrorKind.IO_ERROR
        assert listener.events == ["error"]
        assert "missing.wav" in listener.errors[0]

    def test_decode_error_reports_and_raises(self, tmp_path, make_wav):
        path = tmp_path / "video.wav"
        path.write_bytes(make_wav(b"\x00\x00", form_type=b"AVI "))
        listener = CollectingListener()
        with pytest.raises(NotWaveError):
            WavAnalyzer().analyze_file(path, listener=listener)
        assert listener.events == ["error"]


class TestReanalyze:
    def test_uses_buffer_sample_rate(self, sine_wav_file):
        analyzer = WavAnalyzer()
        result = analyzer.analyze_file(sine_wav_file)
        spectrum = analyzer.reanalyze_around_position(result.waveform, 0.5)
        assert spectrum is not None
        assert spectrum.sample_rate == 8000
        assert abs(spectrum.peak_bin - 113) <= 1

    def test_past_end_is_none(self, sine_wav_file):
        analyzer = WavAnalyzer()
        result = analyzer.analyze_file(sine_wav_file)
        assert analyzer.reanalyze_around_position(result.waveform, 1.0) is None

    def test_config_fft_size_and_mode(self, sine_wav_file):
        analyzer = WavAnalyzer(RAW_SPECTRUM_CONFIG)
        result = analyzer.analyze_file(sine_wav_file)
        spectrum = analyzer.reanalyze_around_position(result.waveform, 0.1)
        assert spectrum.decibels is False
        assert len(spectrum) == RAW_SPECTRUM_CONFIG.spectrum_fft_size // 2

    def test_explicit_fft_size(self, sine_wav_file):
        analyzer = WavAnalyzer()
        result = analyzer.analyze_file(sine_wav_file)
        assert len(analyzer.reanalyze_around_position(result.waveform, 0.1, 256)) == 128


class TestLiveViewIntegration:
    def test_throttled_ticks_feed_bounded_history(self, sine_wav_file):
        """Simulated 10 ms playback ticks: only every 5th passes the 50 ms gate."""
        config = AnalysisConfig(history_max_frames=8)
        analyzer = WavAnalyzer(config)
        result = analyzer.analyze_file(sine_wav_file)

        now = [0.0]
        throttle = PositionThrottle(config.position_update_interval, clock=lambda: now[0])
        history = SpectrogramHistory(config.history_max_frames)

        for tick in range(100):
            now[0] = tick * 0.01
            if not throttle.allow():
                continue
            spectrum = analyzer.reanalyze_around_position(result.waveform, now[0])
            if spectrum is None:
                break
            history.append(spectrum.frequencies_hz, np.power(10.0, spectrum.amplitudes / 20.0))

        assert len(history) == 8
        assert history.bin_count == 1024
        assert throttle.dropped > 0
