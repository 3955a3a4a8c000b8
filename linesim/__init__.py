"""Core package for production line throughput planning.

Exports the data model, the schedule builder and the shift composers.
"""

from linesim.builder import build_schedule  # noqa: F401
from linesim.events import project_events  # noqa: F401
from linesim.models import (  # noqa: F401
    DurationMode,
    FeedPolicy,
    JobStageRecord,
    LinePlan,
    Schedule,
    ShiftSummary,
    Stage,
    TimelineEvent,
)
from linesim.shifts import (  # noqa: F401
    compose_continuous_horizon,
    compose_independent_shifts,
    compose_shifts,
)

__all__ = [
    "DurationMode",
    "FeedPolicy",
    "JobStageRecord",
    "LinePlan",
    "Schedule",
    "ShiftSummary",
    "Stage",
    "TimelineEvent",
    "build_schedule",
    "compose_continuous_horizon",
    "compose_independent_shifts",
    "compose_shifts",
    "project_events",
]
