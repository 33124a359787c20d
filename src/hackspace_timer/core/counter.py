"""Shared countdown of the time the space is expected to stay occupied.

The counter is the only mutable state shared between request handlers and
the decay worker. Request handlers may run on the event loop or in the
threadpool, so every operation holds a single lock for its whole
read-modify-write.
"""

from __future__ import annotations

import logging
import threading

from hackspace_timer.core.settings import settings

logger = logging.getLogger(__name__)


class CountdownCounter:
    """Non-negative millisecond countdown with a reset-on-overflow ceiling."""

    def __init__(self, ceiling_ms: int, initial_ms: int = 0) -> None:
        if ceiling_ms <= 0:
            raise ValueError("ceiling_ms must be positive")
        if not 0 <= initial_ms <= ceiling_ms:
            raise ValueError("initial_ms must be between 0 and ceiling_ms")
        self.ceiling_ms = ceiling_ms
        self._remaining_ms = initial_ms
        self._lock = threading.Lock()

    def extend(self, by_ms: int) -> int:
        """Add ``by_ms`` and return the new value.

        A sum above the ceiling resets the countdown to zero instead. The add
        and the ceiling check happen under the same lock, so no caller can
        observe a value above the ceiling.
        """
        if by_ms < 0:
            raise ValueError("by_ms must not be negative")
        with self._lock:
            remaining = self._remaining_ms + by_ms
            if remaining > self.ceiling_ms:
                logger.info(
                    "Countdown %d ms exceeds ceiling %d ms; resetting to 0",
                    remaining,
                    self.ceiling_ms,
                )
                remaining = 0
            self._remaining_ms = remaining
            return remaining

    def load(self) -> int:
        """Return the current remaining time in milliseconds."""
        with self._lock:
            return self._remaining_ms

    def tick_decrement(self, by_ms: int) -> int:
        """Remove ``by_ms`` if any time remains and return the new value.

        Returns 0 when nothing was left to decrement. A decrement larger than
        the remaining time sets the countdown to exactly zero.
        """
        if by_ms < 0:
            raise ValueError("by_ms must not be negative")
        with self._lock:
            if self._remaining_ms == 0:
                return 0
            if self._remaining_ms <= by_ms:
                self._remaining_ms = 0
            else:
                self._remaining_ms -= by_ms
            return self._remaining_ms


class _CountdownCounterSingleton:
    """Singleton wrapper for the process-wide CountdownCounter."""

    _instance: CountdownCounter | None = None

    @classmethod
    def get_instance(cls) -> CountdownCounter:
        """Get or create the singleton CountdownCounter instance."""
        if cls._instance is None:
            cls._instance = CountdownCounter(ceiling_ms=settings.ceiling_ms)
        return cls._instance


def get_countdown_counter() -> CountdownCounter:
    """Return the process-wide countdown counter."""
    return _CountdownCounterSingleton.get_instance()
