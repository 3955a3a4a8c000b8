"""Topology editing and lane layout helpers.

A topology is a plain ``list[Stage]`` owned by the caller. Edits here return
new lists; after any edit the caller rebuilds the plan from scratch.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from .models import Stage

NEW_STAGE_NAME = "Stage"
NEW_STAGE_MIN = 10.0
NEW_STAGE_MAX = 15.0


def default_line() -> list[Stage]:
    """Six-stage tank-truck service line used when no stages are configured."""
    return [
        Stage("Gate in", 20, 40, 1),
        Stage("Tank cleaning", 120, 120, 6),
        Stage("QC #1", 30, 60, 2),
        Stage("Loading", 20, 20, 1),
        Stage("QC #2", 30, 60, 2),
        Stage("Gate out", 10, 20, 1),
    ]


def add_stage(stages: Sequence[Stage], stage: Optional[Stage] = None) -> list[Stage]:
    """Append ``stage`` (or a default 10-15 min single-server stage)."""
    if stage is None:
        stage = Stage(NEW_STAGE_NAME, NEW_STAGE_MIN, NEW_STAGE_MAX, 1)
    return [*stages, stage]


def remove_stage(stages: Sequence[Stage], index: Optional[int] = None) -> list[Stage]:
    """Remove the stage at ``index``, or the last one; empty input is a no-op.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    result = list(stages)
    if not result:
        return result
    if index is None:
        index = len(result) - 1
    if not (0 <= index < len(result)):
        raise IndexError(f"stage index {index} out of range")
    del result[index]
    return result


def update_stage(stages: Sequence[Stage], index: int, **changes) -> list[Stage]:
    """Return a copy of ``stages`` with ``stages[index]`` replaced by edited fields."""
    result = list(stages)
    result[index] = replace(result[index], **changes)
    return result


def lane_offsets(stages: Sequence[Stage]) -> list[int]:
    """First lane of every stage when all servers are stacked top to bottom."""
    offsets = []
    total = 0
    for stage in stages:
        offsets.append(total)
        total += stage.server_count
    return offsets


def lane_index(stages: Sequence[Stage], stage_index: int, server_index: int) -> int:
    return sum(s.server_count for s in stages[:stage_index]) + server_index


def lanes_number(stages: Sequence[Stage]) -> int:
    return sum(s.server_count for s in stages)
