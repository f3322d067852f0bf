"""
Publish-time resolver - wall clock in an IANA zone to UTC epoch milliseconds.

Key behaviors:
- No offset table: the zone is only ever used to *format* a candidate UTC
  instant back into wall-clock fields, and the guess is corrected until
  those fields equal the target (fixed-point iteration).
- Spring-forward gap: the local time does not exist, iteration settles
  into a two-cycle and the forward candidate is returned.
- Fall-back overlap: two UTC instants format to the target; the later one
  (standard time) is returned so content is never published early.
- Never raises. Bad input or an unknown zone degrades to a UTC reading.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .models import LocalDateTimeLike, LocalFields, ResolvedInstant

logger = logging.getLogger(__name__)

# Upper bound on formatter round trips. Real zones converge in two or three;
# only a DST gap exhausts the loop (or is cut short by cycle detection).
MAX_ITERATIONS = 25

DAY_MS = 24 * 60 * 60 * 1000

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# Anything after the seconds (fraction, "Z", offset) is ignored: the value
# is wall clock in the configured zone.
_LOCAL_DATETIME_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2})(?::(\d{2}))?")


# --- Zone / formatter ---


def load_zone(name: str) -> ZoneInfo | None:
    """Return the zone, or None if the platform does not know it."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        return None


def format_in_timezone(utc_ms: int, tz: ZoneInfo) -> LocalFields:
    """Wall-clock fields of `utc_ms` in `tz`."""
    local = (_EPOCH + timedelta(milliseconds=utc_ms)).astimezone(tz)
    return LocalFields.from_datetime(local)


# --- Parsing ---


def parse_local_fields(value: LocalDateTimeLike, tz: ZoneInfo | None = None) -> LocalFields | None:
    """
    Extract the target wall-clock fields.

    Aware datetimes are first moved into `tz` (or UTC when no zone is
    known). Returns None when the value does not describe a real date.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz or UTC)
        return LocalFields.from_datetime(value)

    if isinstance(value, date):
        return LocalFields(value.year, value.month, value.day, 0, 0, 0)

    match = _LOCAL_DATETIME_RE.search(str(value))
    if not match:
        return None

    year, month, day, hour, minute, second = (int(g or 0) for g in match.groups())
    fields = LocalFields(year, month, day, hour, minute, second)
    try:
        # Feb 29 in a non-leap year must not roll over into March.
        fields.to_naive()
    except ValueError:
        return None
    return fields


def _utc_fallback_ms(value: LocalDateTimeLike) -> int | None:
    """Read a string the wall-clock parser rejected as a UTC instant."""
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp() * 1000)


# --- Fixed-point iteration ---


def _delta_ms(formatted: LocalFields, target: LocalFields) -> int:
    return (formatted.to_naive() - target.to_naive()) // timedelta(milliseconds=1)


def _is_better(delta: int, best_delta: int) -> bool:
    """Smaller miss wins; on a tie prefer the guess that lands after the target."""
    if abs(delta) != abs(best_delta):
        return abs(delta) < abs(best_delta)
    return delta > 0 > best_delta


def iterate_to_instant(target: LocalFields, tz: ZoneInfo) -> tuple[int, bool, int]:
    """
    Find the UTC instant that formats to `target` in `tz`.

    Returns:
        Tuple of (utc_ms, converged, iterations). When not converged,
        utc_ms is the best guess seen.
    """
    guess = target.naive_ms()
    best_guess, best_delta = guess, None
    seen: set[int] = set()
    iterations = 0

    while iterations < MAX_ITERATIONS:
        iterations += 1
        delta = _delta_ms(format_in_timezone(guess, tz), target)
        if delta == 0:
            return guess, True, iterations

        if best_delta is None or _is_better(delta, best_delta):
            best_guess, best_delta = guess, delta

        seen.add(guess)
        guess -= delta
        if guess in seen:
            # Two-cycle across a gap: the wall-clock time does not exist.
            break

    return best_guess, False, iterations


def _prefer_later_occurrence(utc_ms: int, target: LocalFields, tz: ZoneInfo) -> int:
    """Return the later of the UTC instants that format to `target`."""
    naive_ms = target.naive_ms()
    candidates = {utc_ms}
    for probe in (utc_ms - DAY_MS, utc_ms + DAY_MS):
        offset_ms = format_in_timezone(probe, tz).naive_ms() - probe
        candidate = naive_ms - offset_ms
        if candidate not in candidates and format_in_timezone(candidate, tz) == target:
            candidates.add(candidate)
    return max(candidates)


# --- Public API ---


def _system_now_ms() -> int:
    return time.time_ns() // 1_000_000


def _resolve(
    local_datetime: LocalDateTimeLike,
    timezone: str,
    fallback_ms: int | None,
) -> ResolvedInstant:
    tz = load_zone(timezone)
    target = parse_local_fields(local_datetime, tz)

    if target is None:
        utc_ms = _utc_fallback_ms(local_datetime)
        if utc_ms is None:
            logger.warning(f"Unparseable publish datetime {local_datetime!r}; using fallback")
            return ResolvedInstant(
                utc_ms=_system_now_ms() if fallback_ms is None else fallback_ms,
                ok=False,
                reason="unparseable",
            )
        logger.warning(f"Publish datetime {local_datetime!r} is not wall clock; read as UTC")
        return ResolvedInstant(utc_ms=utc_ms, ok=False, reason="utc_fallback")

    if tz is None:
        logger.warning(f"Unknown timezone {timezone!r}; reading {target.isoformat()} as UTC")
        return ResolvedInstant(utc_ms=target.naive_ms(), ok=False, reason="unknown_timezone")

    utc_ms, converged, iterations = iterate_to_instant(target, tz)
    if not converged:
        logger.debug(
            f"{target.isoformat()} does not exist in {timezone} "
            f"(DST gap); resolved to nearest instant after {iterations} iterations"
        )
        return ResolvedInstant(
            utc_ms=utc_ms, ok=False, reason="no_convergence", iterations=iterations
        )

    return ResolvedInstant(
        utc_ms=_prefer_later_occurrence(utc_ms, target, tz),
        iterations=iterations,
    )


def resolve_instant(
    local_datetime: LocalDateTimeLike,
    timezone: str,
    *,
    fallback_ms: int | None = None,
) -> ResolvedInstant:
    """
    Resolve a wall-clock value in `timezone` to a UTC instant.

    Args:
        local_datetime: "YYYY-MM-DDTHH:mm:ss" string, datetime or date.
        timezone: IANA zone name, e.g. "America/New_York".
        fallback_ms: Returned for unparseable input (default: current time).

    Returns:
        ResolvedInstant; never raises.
    """
    try:
        return _resolve(local_datetime, timezone, fallback_ms)
    except (ValueError, OverflowError, OSError) as e:
        logger.warning(f"Could not resolve {local_datetime!r} in {timezone!r}: {e}")
        return ResolvedInstant(
            utc_ms=_system_now_ms() if fallback_ms is None else fallback_ms,
            ok=False,
            reason="unparseable",
        )


def resolve_utc_millis(local_datetime: LocalDateTimeLike, timezone: str) -> int:
    """UTC epoch milliseconds for a wall-clock value in `timezone`."""
    return resolve_instant(local_datetime, timezone).utc_ms
