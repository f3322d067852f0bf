"""
Timezone resolver component - wall-clock publish times to UTC instants.
"""

from ._impl import (
    MAX_ITERATIONS,
    format_in_timezone,
    iterate_to_instant,
    load_zone,
    parse_local_fields,
    resolve_instant,
    resolve_utc_millis,
)
from .component import run, run_format, run_resolve
from .models import (
    FormatInput,
    FormatOutput,
    LocalDateTimeLike,
    LocalFields,
    ResolvedInstant,
    ResolveInput,
    ResolveOutput,
    TzResolveValidationError,
)

__all__ = [
    # Entry points
    "run",
    "run_format",
    "run_resolve",
    # Functions
    "format_in_timezone",
    "iterate_to_instant",
    "load_zone",
    "parse_local_fields",
    "resolve_instant",
    "resolve_utc_millis",
    "MAX_ITERATIONS",
    # Input models
    "FormatInput",
    "ResolveInput",
    # Output models
    "FormatOutput",
    "LocalFields",
    "ResolvedInstant",
    "ResolveOutput",
    "TzResolveValidationError",
    "LocalDateTimeLike",
]
