"""Event projection: stage completions in chronological order."""

from __future__ import annotations

from .models import Schedule, TimelineEvent


def project_events(schedule: Schedule) -> list[TimelineEvent]:
    """Return one event per record, sorted by finish time.

    ``sorted`` is stable, so records finishing together keep their schedule
    order (job ascending, then stage ascending).
    """
    events = [
        TimelineEvent(time=r.finish, job_id=r.job_id, stage_index=r.stage_index)
        for r in schedule.records
    ]
    return sorted(events, key=lambda e: e.time)
