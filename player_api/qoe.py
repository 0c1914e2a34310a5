"""
QoE Timer - named timestamps for quality-of-experience metrics.

Usage:
    timer = QoETimer()
    timer.tick("setup")
    ...
    timer.tick("ready")
    timer.between("setup", "ready")   # elapsed ms
    timer.dump()                      # {"counts": {...}, "events": {...}}
"""

from __future__ import annotations

import time
from typing import Callable


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class QoETimer:
    """Records the latest timestamp per label and how often it was ticked."""

    def __init__(self, clock: Callable[[], float] | None = None):
        """
        Args:
            clock: Returns the current time in milliseconds.
                Defaults to a monotonic clock.
        """
        self._clock = clock or _monotonic_ms
        self._events: dict[str, float] = {}
        self._counts: dict[str, int] = {}

    def tick(self, label: str) -> float:
        """Record the current time under ``label``."""
        now = self._clock()
        self._events[label] = now
        self._counts[label] = self._counts.get(label, 0) + 1
        return now

    def clear(self, label: str) -> None:
        """Forget the timestamp recorded under ``label``."""
        self._events.pop(label, None)

    def get(self, label: str) -> float | None:
        return self._events.get(label)

    def between(self, start: str, end: str) -> float | None:
        """Elapsed ms from ``start`` to ``end``, or None if either is missing."""
        if start not in self._events or end not in self._events:
            return None
        return self._events[end] - self._events[start]

    def dump(self) -> dict[str, dict]:
        """Snapshot of tick counts and latest timestamps."""
        return {
            "counts": dict(self._counts),
            "events": dict(self._events),
        }
