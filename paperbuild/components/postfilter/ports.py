"""Publication filter port definitions - protocols for dependencies."""

from typing import Protocol

from paperbuild.components.tzresolve import LocalDateTimeLike


class PublishableRecord(Protocol):
    """Anything carrying a draft flag and a wall-clock publish time."""

    @property
    def draft(self) -> bool: ...

    @property
    def pub_datetime(self) -> LocalDateTimeLike: ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now_ms(self) -> int:
        """Return current UTC time in epoch milliseconds."""
        ...


class ScheduleRulesPort(Protocol):
    """Site rules consumed when building a filter env."""

    @property
    def timezone(self) -> str: ...

    @property
    def scheduled_post_margin(self) -> int: ...
