"""
Publication filter component - decides whether a post is visible now.

Consumed by listings, RSS and sitemap generation; all of them only see
the boolean result.

Invariants:
- I1: Drafts are never published, in any mode
- I2: Development mode publishes every non-draft immediately
- I3: Production publishes once now_ms > publish_utc_ms - margin_ms
- I4: Never raises; unparseable publish times err toward publishing
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar

from paperbuild.components.tzresolve import resolve_instant

from .models import FilterDecision, FilterEnv
from .ports import ClockPort, PublishableRecord, ScheduleRulesPort

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=PublishableRecord)


def evaluate(record: PublishableRecord, env: FilterEnv) -> FilterDecision:
    """
    Evaluate one record against the filter env.

    Args:
        record: Object with `draft` and `pub_datetime`.
        env: Mode, zone, margin and injected current time.

    Returns:
        FilterDecision with the boolean result and the reason for it.
    """
    if record.draft:
        return FilterDecision(published=False, reason="draft")

    if env.is_development_mode:
        return FilterDecision(published=True, reason="development")

    instant = resolve_instant(record.pub_datetime, env.timezone, fallback_ms=env.now_ms)
    if instant.reason == "unparseable":
        # A missed schedule check costs less than a post that never appears.
        logger.warning(f"Publishing record with unparseable date {record.pub_datetime!r}")
        return FilterDecision(published=True, reason="unparseable")

    threshold_ms = instant.utc_ms - env.margin_ms
    published = env.now_ms > threshold_ms
    return FilterDecision(
        published=published,
        reason="due" if published else "scheduled",
        publish_utc_ms=instant.utc_ms,
        threshold_ms=threshold_ms,
    )


def is_published(record: PublishableRecord, env: FilterEnv) -> bool:
    """True if `record` should appear in listings, feeds and sitemaps."""
    return evaluate(record, env).published


def filter_published(records: Iterable[R], env: FilterEnv) -> list[R]:
    """Keep the records that are published under `env`, preserving order."""
    return [record for record in records if is_published(record, env)]


def make_filter_env(
    rules: ScheduleRulesPort,
    *,
    clock: ClockPort,
    is_development_mode: bool,
) -> FilterEnv:
    """Thread site rules and the current time into an explicit filter env."""
    return FilterEnv(
        is_development_mode=is_development_mode,
        timezone=rules.timezone,
        margin_ms=rules.scheduled_post_margin,
        now_ms=clock.now_ms(),
    )
