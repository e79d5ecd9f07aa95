"""Minimum-interval throttle for playback-driven re-analysis.

A media player reports its position far more often than a spectrum view
needs redrawing. PositionThrottle lets through at most one update per
``min_interval_seconds`` (50 ms by default) and drops the rest.

Usage::

    from infrastructure.throttle import PositionThrottle

    throttle = PositionThrottle()

    def on_position_changed(ms: int) -> None:
        if throttle.allow():
            spectrum = analyzer.reanalyze_around_position(buffer, ms / 1000)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

_DEFAULT_INTERVAL = 0.05  # seconds


class PositionThrottle:
    """Thread-safe gate allowing one call per interval.

    Args:
        min_interval_seconds: Minimum spacing between allowed calls
            (default: 0.05). Zero allows every call.
        clock: Monotonic time source in seconds. Injected in tests.
    """

    def __init__(
        self,
        min_interval_seconds: float = _DEFAULT_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize with no call recorded, so the first call is allowed."""
        if min_interval_seconds < 0:
            raise ValueError(
                f"min_interval_seconds must be non-negative, got {min_interval_seconds}"
            )
        self._interval = min_interval_seconds
        self._clock = clock
        self._last: float | None = None
        self._dropped = 0
        self._lock = threading.Lock()

    @property
    def dropped(self) -> int:
        """Number of calls rejected since construction or the last reset()."""
        with self._lock:
            return self._dropped

    def allow(self) -> bool:
        """Return True and record the call if the interval has elapsed.

        Returns:
            True if the caller should proceed, False if it should skip this tick.
        """
        now = self._clock()
        with self._lock:
            if self._last is not None and now - self._last < self._interval:
                self._dropped += 1
                return False
            self._last = now
            return True

    def reset(self) -> None:
        """Forget the last call, e.g. after a seek or a new file."""
        with self._lock:
            if self._dropped:
                logger.debug("PositionThrottle reset after dropping %d updates", self._dropped)
            self._last = None
            self._dropped = 0
