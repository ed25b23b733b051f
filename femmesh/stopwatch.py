"""Wall-clock stopwatch reporting elapsed milliseconds."""

from __future__ import annotations

import time
from typing import Callable


class Stopwatch:
    """Measures time since construction or the last reset.

    The clock returns nanoseconds from a monotonic source.
    """

    def __init__(self, clock: Callable[[], int] = time.perf_counter_ns) -> None:
        self._clock = clock
        self._last = clock()

    def reset(self) -> None:
        """Restart measuring from now."""
        self._last = self._clock()

    def millis(self, reset: bool = False) -> float:
        """Return elapsed milliseconds, at microsecond resolution.

        With reset, the stopwatch also restarts from this moment.
        """
        now = self._clock()
        micros = (now - self._last) // 1000
        if reset:
            self._last = now
        return micros / 1000.0