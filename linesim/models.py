"""Core data structures for production line throughput planning.

This module defines:
    Stage          -- one processing station (duration range, parallel servers).
    DurationMode   -- how a stage's service duration is chosen.
    FeedPolicy     -- when the builder stops admitting jobs.
    JobStageRecord -- one job's visit to one stage on one server.
    Schedule       -- immutable ordered collection of records.
    ShiftSummary   -- completed jobs in one shift.
    TimelineEvent  -- stage completion, used for playback.
    LinePlan       -- composed multi-shift result.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class DurationMode(str, Enum):
    """Service duration policy.

    ``RANDOM_PER_JOB`` draws per (job, stage) pair; ``RANDOM_PER_RUN`` draws
    once per stage at the beginning of a build and reuses the value for every
    job of that build.
    """

    MIN = "min"
    MAX = "max"
    RANDOM_PER_JOB = "random"
    RANDOM_PER_RUN = "random_per_run"


class FeedPolicy(str, Enum):
    """Stop condition evaluated after each fully scheduled job."""

    CUTOFF = "cutoff"
    CONTINUOUS = "continuous"


@dataclass(frozen=True)
class Stage:
    """Immutable stage definition.

    Attributes:
        name: Display name.
        min_duration: Lower bound of service time in minutes (>= 0).
        max_duration: Upper bound of service time in minutes (>= min_duration).
        server_count: Number of parallel servers, clamped to at least 1.

    Raises:
        ValueError: If the duration range is negative or inverted.
    """

    name: str
    min_duration: float
    max_duration: float
    server_count: int = 1

    def __post_init__(self) -> None:
        if self.min_duration < 0:
            raise ValueError(f"Stage {self.name!r}: min_duration must be >= 0")
        if self.max_duration < self.min_duration:
            raise ValueError(
                f"Stage {self.name!r}: max_duration {self.max_duration} "
                f"< min_duration {self.min_duration}"
            )
        object.__setattr__(self, "server_count", max(1, int(self.server_count)))


@dataclass(frozen=True)
class JobStageRecord:
    """Single scheduled (job, stage) visit.

    Fields:
        job_id: Job identifier (0-based, ascending in admission order).
        stage_index: Index of the stage in the topology.
        server_index: Server lane inside the stage.
        start: Start time in minutes.
        finish: Completion time (start + duration).
    """

    job_id: int
    stage_index: int
    server_index: int
    start: float
    finish: float

    @property
    def duration(self) -> float:
        return self.finish - self.start

    def shifted(self, time_offset: float, job_offset: int) -> "JobStageRecord":
        """Return a copy moved by ``time_offset`` minutes and ``job_offset`` ids."""
        return replace(
            self,
            job_id=self.job_id + job_offset,
            start=self.start + time_offset,
            finish=self.finish + time_offset,
        )


@dataclass(frozen=True)
class Schedule:
    """Ordered records of one build (job ascending, then stage ascending).

    Fields:
        records: All scheduled (job, stage) visits.
        stages_number: Number of stages in the topology that produced it.
    """

    records: tuple[JobStageRecord, ...]
    stages_number: int

    @property
    def makespan(self) -> float:
        return max((r.finish for r in self.records), default=0.0)

    @property
    def jobs_number(self) -> int:
        return len({r.job_id for r in self.records})

    def exits(self) -> list[JobStageRecord]:
        """Last-stage records in insertion order (one per fully routed job)."""
        last = self.stages_number - 1
        return [r for r in self.records if r.stage_index == last]


@dataclass(frozen=True)
class ShiftSummary:
    shift_index: int
    completed_count: int


@dataclass(frozen=True)
class TimelineEvent:
    time: float
    job_id: int
    stage_index: int


@dataclass(frozen=True)
class LinePlan:
    """Multi-shift composition result.

    Fields:
        schedule: Combined schedule on the global time axis.
        summaries: One entry per shift, ascending shift index.
        shift_minutes: Shift length used for composition.
        composition: ``"independent"`` or ``"continuous"``.
    """

    schedule: Schedule
    summaries: tuple[ShiftSummary, ...]
    shift_minutes: float
    composition: str

    @property
    def shifts(self) -> int:
        return len(self.summaries)

    @property
    def horizon_minutes(self) -> float:
        return self.shift_minutes * self.shifts

    @property
    def total_completed(self) -> int:
        return sum(s.completed_count for s in self.summaries)
