"""Shift composition: covering a multi-shift horizon with builder runs.

Two strategies:

independent
    One ``CUTOFF`` build per shift from an empty line, seeded
    ``base_seed + shift_index``. Records are moved onto the global axis by
    ``shift_index * shift_minutes`` and renumbered after the previous shift's
    highest job id. Each build's own completed count is that shift's summary.

continuous
    A single ``CONTINUOUS`` build over ``shift_minutes * shifts``. Exits are
    bucketed afterwards into ``(i * L, (i + 1) * L]`` so a job finishing
    exactly on a boundary counts for the earlier shift. The first bucket also
    takes exits at exactly 0 (zero-duration lines).
"""

from __future__ import annotations

import bisect
import logging
from typing import Optional, Sequence

from .builder import DEFAULT_MAX_JOBS, DEFAULT_SEED, build_schedule
from .models import (
    DurationMode,
    FeedPolicy,
    JobStageRecord,
    LinePlan,
    Schedule,
    ShiftSummary,
    Stage,
)

INDEPENDENT = "independent"
CONTINUOUS = "continuous"
COMPOSITIONS = (INDEPENDENT, CONTINUOUS)

DEFAULT_INDEPENDENT_SHIFTS = 1
DEFAULT_CONTINUOUS_SHIFTS = 2

logger = logging.getLogger("linesim.shifts")


def _check_shifts(shifts: int) -> None:
    if shifts < 1:
        raise ValueError(f"shifts must be >= 1, got {shifts}")


def compose_independent_shifts(
    stages: Sequence[Stage],
    shift_minutes: float,
    mode: DurationMode,
    shifts: int = DEFAULT_INDEPENDENT_SHIFTS,
    base_seed: Optional[int] = DEFAULT_SEED,
    max_jobs: int = DEFAULT_MAX_JOBS,
) -> LinePlan:
    """Simulate every shift separately, without work in progress carried over.

    Raises:
        ValueError: If ``shifts`` is smaller than 1.
    """
    _check_shifts(shifts)
    combined: list[JobStageRecord] = []
    summaries: list[ShiftSummary] = []
    job_offset = 0

    for i in range(shifts):
        seed = base_seed + i if base_seed is not None else None
        schedule, completed = build_schedule(
            stages,
            shift_minutes,
            mode,
            max_jobs=max_jobs,
            horizon=shift_minutes,
            feed_policy=FeedPolicy.CUTOFF,
            seed=seed,
        )
        summaries.append(ShiftSummary(shift_index=i, completed_count=completed))
        time_offset = i * shift_minutes
        combined.extend(r.shifted(time_offset, job_offset) for r in schedule.records)
        if schedule.records:
            job_offset += max(r.job_id for r in schedule.records) + 1
        logger.debug(
            "Shift %d: jobs=%d completed=%d seed=%s",
            i,
            schedule.jobs_number,
            completed,
            seed,
        )

    plan = LinePlan(
        schedule=Schedule(records=tuple(combined), stages_number=len(stages)),
        summaries=tuple(summaries),
        shift_minutes=shift_minutes,
        composition=INDEPENDENT,
    )
    logger.info(
        "Independent shifts=%d shift_minutes=%s mode=%s completed=%s",
        shifts,
        shift_minutes,
        mode.value,
        [s.completed_count for s in plan.summaries],
    )
    return plan


def bucket_completions(
    schedule: Schedule, shift_minutes: float, shifts: int
) -> list[ShiftSummary]:
    """Count job exits per shift window ``(i * L, (i + 1) * L]``.

    Exits are compared against the boundaries themselves, so an exit equal to
    a boundary lands in the earlier shift and an exit at 0 in the first.
    Exits after the horizon are not counted.
    """
    _check_shifts(shifts)
    boundaries = [(i + 1) * shift_minutes for i in range(shifts)]
    counts = [0] * shifts
    for rec in schedule.exits():
        index = bisect.bisect_left(boundaries, rec.finish)
        if index < shifts:
            counts[index] += 1
    return [ShiftSummary(shift_index=i, completed_count=c) for i, c in enumerate(counts)]


def compose_continuous_horizon(
    stages: Sequence[Stage],
    shift_minutes: float,
    mode: DurationMode,
    shifts: Optional[int] = None,
    seed: Optional[int] = DEFAULT_SEED,
    max_jobs: int = DEFAULT_MAX_JOBS,
) -> LinePlan:
    """Run one pipeline across all shifts and bucket the exits per shift.

    Args:
        shifts: Number of shifts; ``None`` uses the builder's default
            horizon of two shifts.

    Raises:
        ValueError: If ``shifts`` is smaller than 1.
    """
    if shifts is None:
        shifts = DEFAULT_CONTINUOUS_SHIFTS
    _check_shifts(shifts)
    schedule, completed = build_schedule(
        stages,
        shift_minutes,
        mode,
        max_jobs=max_jobs,
        horizon=shift_minutes * shifts,
        feed_policy=FeedPolicy.CONTINUOUS,
        seed=seed,
    )
    summaries = bucket_completions(schedule, shift_minutes, shifts)
    logger.debug(
        "Continuous build: jobs=%d completed in first shift=%d",
        schedule.jobs_number,
        completed,
    )
    plan = LinePlan(
        schedule=schedule,
        summaries=tuple(summaries),
        shift_minutes=shift_minutes,
        composition=CONTINUOUS,
    )
    logger.info(
        "Continuous shifts=%d shift_minutes=%s mode=%s completed=%s",
        shifts,
        shift_minutes,
        mode.value,
        [s.completed_count for s in plan.summaries],
    )
    return plan


def compose_shifts(
    stages: Sequence[Stage],
    shift_minutes: float,
    mode: DurationMode,
    composition: str = INDEPENDENT,
    shifts: Optional[int] = None,
    seed: Optional[int] = DEFAULT_SEED,
    max_jobs: int = DEFAULT_MAX_JOBS,
) -> LinePlan:
    """Dispatch to the selected composition strategy.

    ``shifts=None`` falls back to the strategy default (1 independent shift,
    2 continuous shifts).

    Raises:
        ValueError: On unknown ``composition``.
    """
    if composition == INDEPENDENT:
        return compose_independent_shifts(
            stages,
            shift_minutes,
            mode,
            shifts=shifts if shifts is not None else DEFAULT_INDEPENDENT_SHIFTS,
            base_seed=seed,
            max_jobs=max_jobs,
        )
    if composition == CONTINUOUS:
        return compose_continuous_horizon(
            stages, shift_minutes, mode, shifts=shifts, seed=seed, max_jobs=max_jobs
        )
    raise ValueError(f"Unknown composition: {composition}")
