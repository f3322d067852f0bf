"""Publication filter component - draft, schedule and margin checks."""

from paperbuild.components.postfilter.component import (
    evaluate,
    filter_published,
    is_published,
    make_filter_env,
)
from paperbuild.components.postfilter.models import FilterDecision, FilterEnv, PublishRecord
from paperbuild.components.postfilter.ports import ClockPort, PublishableRecord, ScheduleRulesPort

__all__ = [
    # Entry points
    "evaluate",
    "filter_published",
    "is_published",
    "make_filter_env",
    # Models
    "FilterDecision",
    "FilterEnv",
    "PublishRecord",
    # Ports
    "ClockPort",
    "PublishableRecord",
    "ScheduleRulesPort",
]
