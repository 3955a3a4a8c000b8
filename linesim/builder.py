"""Schedule builder: greedy flow of identical jobs through a stage line.

Jobs are admitted one after another; each job visits every stage in
topology order and takes the server of that stage that frees up first.
Nothing is ever rescheduled, so a build is O(jobs * stages * servers).
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from .durations import draw_duration, draw_run_durations
from .models import DurationMode, FeedPolicy, JobStageRecord, Schedule, Stage

DEFAULT_MAX_JOBS = 200_000
DEFAULT_SEED = 12345

logger = logging.getLogger("linesim")


def _earliest_server(next_free: list[float]) -> int:
    best_idx = 0
    best = next_free[0]
    for i in range(1, len(next_free)):
        if next_free[i] < best:  # strict: ties keep the lowest index
            best = next_free[i]
            best_idx = i
    return best_idx


def build_schedule(
    stages: Sequence[Stage],
    shift_minutes: float,
    mode: DurationMode,
    max_jobs: int = DEFAULT_MAX_JOBS,
    horizon: Optional[float] = None,
    feed_policy: FeedPolicy = FeedPolicy.CONTINUOUS,
    seed: Optional[int] = DEFAULT_SEED,
) -> tuple[Schedule, int]:
    """Build the job/stage timeline of one run with all servers idle at 0.

    A job counts as completed when its last-stage finish is within
    ``shift_minutes``. Generation stops on the feed policy condition
    (checked after each job, the triggering job is kept) or when
    ``max_jobs`` jobs have been admitted, whichever comes first.

    Args:
        stages: Topology, read only.
        shift_minutes: Reporting window length in minutes.
        mode: Duration policy.
        max_jobs: Hard cap on admitted jobs.
        horizon: Feed cutoff for ``FeedPolicy.CONTINUOUS``; defaults to
            ``2 * shift_minutes``.
        feed_policy: ``CUTOFF`` stops once a job exits after the shift,
            ``CONTINUOUS`` stops once a job enters stage 0 after ``horizon``.
        seed: Seed of the build's private generator, defaults to 12345;
            pass ``None`` for a system-seeded generator.

    Returns:
        Tuple ``(schedule, completed)``.

    Raises:
        ValueError: If ``max_jobs`` or ``shift_minutes`` is negative.
    """
    if max_jobs < 0:
        raise ValueError(f"max_jobs must be >= 0, got {max_jobs}")
    if shift_minutes < 0:
        raise ValueError(f"shift_minutes must be >= 0, got {shift_minutes}")

    stages = list(stages)
    if not stages:
        return Schedule(records=(), stages_number=0), 0

    rng = random.Random(seed) if seed is not None else random.Random()
    feed_until = horizon if horizon is not None else shift_minutes * 2.0
    run_durations = (
        draw_run_durations(stages, rng) if mode is DurationMode.RANDOM_PER_RUN else None
    )

    # next free time per server, one fixed-size list per stage
    next_free = [[0.0] * stage.server_count for stage in stages]
    records: list[JobStageRecord] = []
    completed = 0
    stopped = False

    for job in range(max_jobs):
        arrival = 0.0
        entry = 0.0
        for s, stage in enumerate(stages):
            duration = draw_duration(stage, mode, rng, run_durations, s)
            server = _earliest_server(next_free[s])
            start = max(arrival, next_free[s][server])
            finish = start + duration
            next_free[s][server] = finish
            if s == 0:
                entry = start
            records.append(
                JobStageRecord(
                    job_id=job,
                    stage_index=s,
                    server_index=server,
                    start=start,
                    finish=finish,
                )
            )
            arrival = finish

        if arrival <= shift_minutes:
            completed += 1

        if feed_policy is FeedPolicy.CUTOFF:
            if arrival > shift_minutes:
                stopped = True
                break
        elif entry > feed_until:
            stopped = True
            break

    if not stopped and max_jobs > 0:
        logger.debug("Build truncated at max_jobs=%d (%s feed)", max_jobs, feed_policy.value)
    return Schedule(records=tuple(records), stages_number=len(stages)), completed


def check_no_server_overlap(schedule: Schedule) -> bool:
    """Ensure no two records overlap on the same (stage, server) lane.

    Returns:
        True if no overlaps are found.

    Raises:
        AssertionError: On the first detected overlap.
    """
    by_lane: dict[tuple[int, int], list[JobStageRecord]] = {}
    for rec in schedule.records:
        by_lane.setdefault((rec.stage_index, rec.server_index), []).append(rec)
    for (stage, server), lane in by_lane.items():
        lane.sort(key=lambda r: (r.start, r.finish))
        prev_end = float("-inf")
        for r in lane:
            if r.start < prev_end:
                raise AssertionError(
                    f"Overlap on stage {stage} server {server} "
                    f"between end {prev_end} and start {r.start}"
                )
            prev_end = r.finish
    return True
