"""
Clock adapters.

The publication filter never reads the wall clock itself; callers take
`now_ms` from one of these adapters and thread it through `FilterEnv`.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime


class SystemClock:
    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000

    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """
    Clock that returns a fixed instant.

    Useful for deterministic testing and for reproducible builds
    (`paperbuild build --now ...`).
    """

    def __init__(self, now_ms: int) -> None:
        self._now_ms = now_ms

    @classmethod
    def from_datetime(cls, value: datetime) -> FrozenClock:
        """Freeze at `value`; naive datetimes are taken as UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return cls(int(value.timestamp() * 1000))

    def now_ms(self) -> int:
        return self._now_ms

    def now_utc(self) -> datetime:
        return datetime.fromtimestamp(self._now_ms / 1000, UTC)

    def advance(self, delta_ms: int) -> None:
        """Advance frozen time by delta_ms (for testing)."""
        self._now_ms += delta_ms
