"""Duration policy: service time of one job at one stage.

Random modes draw integers uniformly from the inclusive range
``[round(min), round(max)]``. A degenerate range (``min == max``) returns the
fixed value without touching the generator, so a random build over fixed
stages consumes no randomness at all.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from .models import DurationMode, Stage


def _draw_uniform(stage: Stage, rng: random.Random) -> float:
    if stage.min_duration == stage.max_duration:
        return stage.min_duration
    return float(rng.randint(round(stage.min_duration), round(stage.max_duration)))


def draw_duration(
    stage: Stage,
    mode: DurationMode,
    rng: random.Random,
    run_durations: Optional[Sequence[float]] = None,
    stage_index: int = 0,
) -> float:
    """Return one service duration for ``stage``.

    Args:
        stage: Stage being visited.
        mode: Active duration policy.
        rng: Generator owned by the current build.
        run_durations: Per-stage values drawn up front, required for
            ``DurationMode.RANDOM_PER_RUN``.
        stage_index: Index of ``stage``, used to look up ``run_durations``.

    Returns:
        Duration in minutes.
    """
    if mode is DurationMode.MIN:
        return stage.min_duration
    if mode is DurationMode.MAX:
        return stage.max_duration
    if mode is DurationMode.RANDOM_PER_RUN:
        if run_durations is None:
            raise ValueError("RANDOM_PER_RUN requires durations drawn per run")
        return run_durations[stage_index]
    return _draw_uniform(stage, rng)


def draw_run_durations(stages: Sequence[Stage], rng: random.Random) -> list[float]:
    """Draw one duration per stage, in stage order, for ``RANDOM_PER_RUN``."""
    return [_draw_uniform(stage, rng) for stage in stages]
