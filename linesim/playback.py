"""Playback cursor over a plan's event stream.

Holds a simulated clock in minutes. Advancing the clock releases every
event whose time has been reached, in stream order, and prepends a line per
event to a bounded log (newest first). Rendering is left to the caller:
``active_jobs`` exposes what is on the line right now and how far along
each visit is.
"""

from __future__ import annotations

from collections import deque
from typing import Optional, Sequence

from .events import project_events
from .models import JobStageRecord, LinePlan, Stage, TimelineEvent

TICK_MINUTES = 0.03
MIN_SPEED = 0.1
DEFAULT_LOG_SIZE = 400


class Playback:
    """Replay a ``LinePlan`` against a moving clock.

    Args:
        plan: Composed plan to replay.
        stages: Topology used for stage names in log lines.
        log_size: Maximum number of retained log lines.
    """

    def __init__(
        self,
        plan: LinePlan,
        stages: Sequence[Stage] = (),
        log_size: int = DEFAULT_LOG_SIZE,
    ):
        self.plan = plan
        self.stages = list(stages)
        self.events: list[TimelineEvent] = project_events(plan.schedule)
        self.log: deque[str] = deque(maxlen=log_size)
        self.clock = 0.0
        self._pointer = 0

    @property
    def pending(self) -> int:
        return len(self.events) - self._pointer

    @property
    def finished(self) -> bool:
        return self.clock > self.plan.horizon_minutes + 1

    def reset(self) -> None:
        self.clock = 0.0
        self._pointer = 0
        self.log.clear()

    def stage_name(self, stage_index: int) -> str:
        if 0 <= stage_index < len(self.stages):
            return self.stages[stage_index].name
        return f"Stage {stage_index + 1}"

    def format_event(self, event: TimelineEvent) -> str:
        return (
            f"t={event.time:.1f} min: job #{event.job_id + 1} "
            f"passed {self.stage_name(event.stage_index)}"
        )

    def advance(self, minutes: float) -> list[TimelineEvent]:
        """Move the clock forward and return the events released by the move."""
        self.clock += max(0.0, minutes)
        released: list[TimelineEvent] = []
        while self._pointer < len(self.events) and self.events[self._pointer].time <= self.clock:
            event = self.events[self._pointer]
            released.append(event)
            self.log.appendleft(self.format_event(event))
            self._pointer += 1
        return released

    def tick(self, speed: float = 1.0) -> list[TimelineEvent]:
        """Advance by one 30 ms timer tick scaled by ``speed`` (at least 0.1)."""
        return self.advance(TICK_MINUTES * max(MIN_SPEED, speed))

    def active_jobs(
        self, at: Optional[float] = None
    ) -> list[tuple[JobStageRecord, float]]:
        """Records in progress at ``at`` (default: the clock) with progress in [0, 1]."""
        t = self.clock if at is None else at
        active = []
        for rec in self.plan.schedule.records:
            if t < rec.start or t > rec.finish:
                continue
            if rec.finish > rec.start:
                progress = min(1.0, max(0.0, (t - rec.start) / (rec.finish - rec.start)))
            else:
                progress = 1.0
            active.append((rec, progress))
        return active
