"""
Publication filter input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from paperbuild.components.tzresolve import LocalDateTimeLike

DecisionReason = Literal["draft", "development", "scheduled", "due", "unparseable"]


@dataclass(frozen=True)
class PublishRecord:
    """Minimal record the filter needs: draft flag and wall-clock publish time."""

    draft: bool
    pub_datetime: LocalDateTimeLike


@dataclass(frozen=True)
class FilterEnv:
    """
    Everything the filter reads besides the record.

    `now_ms` is injected by the caller; the filter never consults a clock.
    """

    is_development_mode: bool
    timezone: str
    margin_ms: int
    now_ms: int

    def __post_init__(self) -> None:
        if self.margin_ms < 0:
            raise ValueError("margin_ms must be non-negative")


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of evaluating one record."""

    published: bool
    reason: DecisionReason
    publish_utc_ms: int | None = None
    threshold_ms: int | None = None
