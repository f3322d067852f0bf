"""
Timezone resolver component - scheduled publish time resolution.

Invariants:
- I1: Formatting a resolved instant back into the zone reproduces the
  six input fields, except inside a DST gap
- I2: Same input always yields the same output
- I3: Never raises; degraded results are flagged, not thrown
"""

from __future__ import annotations

from ._impl import format_in_timezone, load_zone, resolve_instant
from .models import (
    FormatInput,
    FormatOutput,
    ResolveInput,
    ResolveOutput,
    TzResolveValidationError,
)

_REASON_MESSAGES = {
    "unparseable": "Publish datetime could not be parsed; current time used",
    "utc_fallback": "Publish datetime is not a wall-clock value; read as UTC",
    "unknown_timezone": "Timezone is unknown; wall clock read as UTC",
    "no_convergence": "Wall-clock time does not exist in this zone (DST gap)",
}

_REASON_FIELDS = {
    "unparseable": "local_datetime",
    "utc_fallback": "local_datetime",
    "unknown_timezone": "timezone",
    "no_convergence": "local_datetime",
}


def run_resolve(inp: ResolveInput) -> ResolveOutput:
    """
    Resolve a wall-clock publish time to UTC milliseconds.

    Args:
        inp: Input containing the local datetime and IANA zone name.

    Returns:
        ResolveOutput; `instant.utc_ms` is usable even when success is False.
    """
    instant = resolve_instant(inp.local_datetime, inp.timezone)
    if instant.ok:
        return ResolveOutput(instant=instant)

    reason = instant.reason or "unparseable"
    error = TzResolveValidationError(
        code=reason.upper(),
        message=_REASON_MESSAGES[reason],
        field=_REASON_FIELDS[reason],
    )
    return ResolveOutput(instant=instant, errors=[error], success=False)


def run_format(inp: FormatInput) -> FormatOutput:
    """Format a UTC instant as wall-clock fields in a zone."""
    tz = load_zone(inp.timezone)
    if tz is None:
        return FormatOutput(
            fields=None,
            errors=[
                TzResolveValidationError(
                    code="UNKNOWN_TIMEZONE",
                    message=f"Unknown timezone: {inp.timezone}",
                    field="timezone",
                )
            ],
            success=False,
        )

    try:
        fields = format_in_timezone(inp.utc_ms, tz)
    except (OverflowError, ValueError) as e:
        return FormatOutput(
            fields=None,
            errors=[TzResolveValidationError(code="OUT_OF_RANGE", message=str(e), field="utc_ms")],
            success=False,
        )
    return FormatOutput(fields=fields)


def run(inp: ResolveInput | FormatInput) -> ResolveOutput | FormatOutput:
    """
    Main entry point for the timezone resolver component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, ResolveInput):
        return run_resolve(inp)
    elif isinstance(inp, FormatInput):
        return run_format(inp)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
