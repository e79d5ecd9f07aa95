"""Infrastructure layer — thread-safe runtime helpers for live analysis views.

Modules:
    spectrogram_history  Bounded, lock-protected ring buffer of spectrum slices.
    throttle             Minimum-interval gate for playback-position updates.
"""
