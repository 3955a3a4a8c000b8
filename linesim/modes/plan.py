"""Plan mode execution logic.

Composes the configured horizon once, logs the per-shift summary and
persists the artefacts a viewer needs: a Gantt chart, a throughput chart and
a JSON file with the summaries and the head of the event stream.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Sequence

from linesim.events import project_events
from linesim.models import LinePlan, Stage
from linesim.visualization import next_unique_path, save_gantt_chart, save_throughput_chart
from .common import LineParams, run_plan

logger = logging.getLogger("linesim.plan")

EVENTS_IN_REPORT = 400


def run_plan_mode(
    stages: Sequence[Stage],
    params: LineParams,
    charts_dir: str,
    with_charts: bool = True,
) -> LinePlan:
    """Build the plan and write its artefacts under ``charts_dir``.

    Returns:
        The composed ``LinePlan``.
    """
    plan = run_plan(stages, params)
    for summary in plan.summaries:
        logger.info("Shift %d: %d completed", summary.shift_index + 1, summary.completed_count)
    logger.info(
        "Total completed over %d shift(s): %d (jobs admitted: %d)",
        plan.shifts,
        plan.total_completed,
        plan.schedule.jobs_number,
    )

    os.makedirs(charts_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    events = project_events(plan.schedule)
    payload = {
        "timestamp": stamp,
        "composition": plan.composition,
        "duration_mode": params.mode.value,
        "seed": params.seed,
        "shift_minutes": plan.shift_minutes,
        "shifts": plan.shifts,
        "stages": [
            {
                "name": s.name,
                "min": s.min_duration,
                "max": s.max_duration,
                "servers": s.server_count,
            }
            for s in stages
        ],
        "summaries": [
            {"shift": s.shift_index + 1, "completed": s.completed_count}
            for s in plan.summaries
        ],
        "total_completed": plan.total_completed,
        "events": [
            {"time": e.time, "job": e.job_id, "stage": e.stage_index}
            for e in events[:EVENTS_IN_REPORT]
        ],
    }
    results_path = next_unique_path(os.path.join(charts_dir, f"plan_{stamp}.json"))
    with open(results_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved plan JSON to %s", results_path)

    if with_charts:
        save_gantt_chart(
            plan,
            stages,
            next_unique_path(os.path.join(charts_dir, f"gantt_{plan.composition}_{stamp}.png")),
        )
        save_throughput_chart(
            plan.summaries,
            next_unique_path(os.path.join(charts_dir, f"throughput_{stamp}.png")),
        )
    return plan
