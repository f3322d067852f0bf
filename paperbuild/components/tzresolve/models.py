"""
Timezone resolver input/output models.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

# Wall-clock value as authored in frontmatter.
LocalDateTimeLike = str | datetime | date

DegradeReason = Literal["unparseable", "utc_fallback", "unknown_timezone", "no_convergence"]


# --- Field Model ---


@dataclass(frozen=True)
class LocalFields:
    """The six wall-clock fields of a local date/time."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int

    @classmethod
    def from_datetime(cls, value: datetime) -> LocalFields:
        return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)

    def to_naive(self) -> datetime:
        """Build a naive datetime. Raises ValueError for impossible dates (e.g. Feb 30)."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute, self.second)

    def naive_ms(self) -> int:
        """Epoch milliseconds obtained by reading the fields as if they were UTC."""
        return calendar.timegm(self.to_naive().timetuple()) * 1000

    def isoformat(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )


# --- Result Model ---


@dataclass(frozen=True)
class ResolvedInstant:
    """
    UTC instant whose wall clock in the requested zone equals the input.

    `ok` is False when the value had to be degraded; `utc_ms` is usable
    either way.
    """

    utc_ms: int
    ok: bool = True
    reason: DegradeReason | None = None
    iterations: int = 0


# --- Validation Error ---


@dataclass(frozen=True)
class TzResolveValidationError:
    """Non-fatal resolution problem."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ResolveInput:
    """Input for resolving a wall-clock value to a UTC instant."""

    local_datetime: LocalDateTimeLike
    timezone: str


@dataclass(frozen=True)
class FormatInput:
    """Input for formatting a UTC instant as wall clock in a zone."""

    utc_ms: int
    timezone: str


# --- Output Models ---


@dataclass(frozen=True)
class ResolveOutput:
    """Output for resolve operation."""

    instant: ResolvedInstant
    errors: list[TzResolveValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class FormatOutput:
    """Output for format operation."""

    fields: LocalFields | None
    errors: list[TzResolveValidationError] = field(default_factory=list)
    success: bool = True
