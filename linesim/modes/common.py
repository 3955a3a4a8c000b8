"""Shared primitives used by execution modes.

``LineParams`` bundles everything a plan needs besides the topology, and
``params_from_config`` turns a loaded config mapping into it, applying the
same fallbacks an interactive caller would (bad numbers become defaults).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from linesim.builder import DEFAULT_MAX_JOBS, DEFAULT_SEED
from linesim.models import DurationMode, LinePlan, Stage
from linesim.parser import (
    DEFAULT_SHIFT_MINUTES,
    parse_duration_mode,
    parse_num_shifts,
    parse_shift_minutes,
    parse_stages,
)
from linesim.shifts import COMPOSITIONS, INDEPENDENT, compose_shifts
from linesim.topology import default_line


@dataclass(slots=True)
class LineParams:
    """Run parameters of one plan.

    ``shifts=None`` lets the composition pick its own default.
    """
    shift_minutes: float = DEFAULT_SHIFT_MINUTES
    shifts: Optional[int] = None
    mode: DurationMode = DurationMode.RANDOM_PER_JOB
    composition: str = INDEPENDENT
    seed: Optional[int] = DEFAULT_SEED
    max_jobs: int = DEFAULT_MAX_JOBS


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def params_from_config(cfg: dict[str, Any]) -> LineParams:
    """Read plan parameters from a config mapping.

    Raises:
        ValueError: On unknown duration mode or composition.
    """
    composition = str(cfg.get("composition", INDEPENDENT)).strip().lower()
    if composition not in COMPOSITIONS:
        raise ValueError(f"Unknown composition: {composition}")
    seed = cfg.get("seed", DEFAULT_SEED)
    max_jobs = _int_or(cfg.get("max_jobs"), DEFAULT_MAX_JOBS)
    return LineParams(
        shift_minutes=parse_shift_minutes(cfg.get("shift_minutes", DEFAULT_SHIFT_MINUTES)),
        shifts=parse_num_shifts(cfg.get("shifts"), default=None),
        mode=parse_duration_mode(cfg.get("duration_mode", DurationMode.RANDOM_PER_JOB.value)),
        composition=composition,
        seed=_int_or(seed, DEFAULT_SEED) if seed is not None else None,
        max_jobs=max_jobs if max_jobs >= 0 else DEFAULT_MAX_JOBS,
    )


def stages_from_config(cfg: dict[str, Any]) -> list[Stage]:
    """Configured stages, or the default six-stage line when none are given."""
    raw = cfg.get("stages")
    if raw is None:
        return default_line()
    return parse_stages(raw)


def run_plan(stages: Sequence[Stage], params: LineParams) -> LinePlan:
    return compose_shifts(
        stages,
        params.shift_minutes,
        params.mode,
        composition=params.composition,
        shifts=params.shifts,
        seed=params.seed,
        max_jobs=params.max_jobs,
    )
