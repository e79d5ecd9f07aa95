"""
core/wav/downmix.py — Channel downmix and normalization.

Turns the sum of a frame's per-channel integer values into one float in
[-1.0, 1.0]. Both 16-bit input and 8-bit input (already rescaled to the
16-bit range by the decoder) share the same full-scale reference.
"""

from __future__ import annotations

from typing import TypeVar

import numpy as np

FULL_SCALE = 32768.0
"""Full-scale reference for 16-bit signed samples."""

T = TypeVar("T", float, np.ndarray)


def downmix(sum_of_channel_values: T, channel_count: int) -> T:
    """Average a frame's channels and normalize to [-1.0, 1.0].

    Works on a single float or elementwise on a numpy array of per-frame sums.

    Args:
        sum_of_channel_values: Sum of the channel values of one frame (or an
            array of such sums).
        channel_count: Number of channels summed. The decoder guarantees >= 1.

    Returns:
        (sum / channel_count) / 32768.0
    """
    return (sum_of_channel_values / channel_count) / FULL_SCALE
