import logging
import os
from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from .models import LinePlan, ShiftSummary, Stage  # noqa: E402
from .topology import lane_index, lanes_number  # noqa: E402

logger = logging.getLogger("linesim.visualization")


def save_gantt_chart(
    plan: LinePlan,
    stages: Sequence[Stage],
    filepath: str,
    show_legend: Optional[bool] = None,
    title: Optional[str] = None,
) -> str:
    """Draw one horizontal lane per server and save the chart.

    - Lanes are stacked stage by stage, servers in index order.
    - Dashed vertical lines mark shift boundaries.
    - Legend is disabled automatically for many jobs unless forced.
    """
    lanes = max(1, lanes_number(stages))
    records = plan.schedule.records
    n_jobs = plan.schedule.jobs_number

    base_w, base_h = 10, 0.45 * lanes + 2
    fig, ax = plt.subplots(
        figsize=(min(base_w + n_jobs * 0.02, 18), min(base_h, 16)),
        constrained_layout=True,
    )
    cmap = matplotlib.colormaps["tab20"]
    for rec in records:
        lane = lane_index(stages, rec.stage_index, rec.server_index)
        ax.barh(
            lane,
            rec.duration,
            left=rec.start,
            height=0.8,
            color=cmap(rec.job_id % 20),
            alpha=0.85,
            edgecolor="black",
            linewidth=0.5,
        )
    for i in range(1, plan.shifts + 1):
        ax.axvline(x=i * plan.shift_minutes, color="red", linestyle="--", linewidth=1.0)

    labels = []
    for stage in stages:
        for c in range(stage.server_count):
            labels.append(f"{stage.name} #{c + 1}")
    ax.set_yticks(range(len(labels)))
    ax.set_yticklabels(labels, fontsize=8)
    ax.set_ylim(lanes - 0.5, -0.5)  # first stage on top
    ax.set_xlabel("Time [min]", fontsize=12)
    ax.set_ylabel("Server", fontsize=12)
    completed = plan.total_completed
    ax.set_title(
        title or f"Line plan ({plan.composition}) - completed = {completed}",
        fontsize=14,
        fontweight="bold",
    )
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)

    if show_legend is None:
        show_legend = 0 < n_jobs <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=cmap(j % 20), alpha=0.85, edgecolor="black", label=f"Job {j + 1}"
            )
            for j in range(n_jobs)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n_jobs <= 25 else 2,
        )

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    logger.info("Gantt chart saved as: %s", filepath)
    return filepath


def save_throughput_chart(
    summaries: Sequence[ShiftSummary],
    filepath: str,
    title: str = "Completed jobs per shift",
) -> str:
    """Bar chart of completed jobs per shift, annotated with the counts."""
    fig, ax = plt.subplots(figsize=(max(4, 1.2 * len(summaries) + 2), 5), constrained_layout=True)
    xs = [s.shift_index + 1 for s in summaries]
    ys = [s.completed_count for s in summaries]
    bars = ax.bar(xs, ys, color="#365fa0", alpha=0.85, edgecolor="black", linewidth=0.6)
    for bar, value in zip(bars, ys):
        ax.annotate(
            f"{value}",
            xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
            xytext=(0, 3),
            textcoords="offset points",
            ha="center",
            fontsize=9,
        )
    ax.set_xticks(xs)
    ax.set_xlabel("Shift", fontsize=12)
    ax.set_ylabel("Completed", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, axis="y", linestyle="--", linewidth=0.7)
    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    logger.info("Throughput chart saved as: %s", filepath)
    return filepath


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """If the file exists, append _1, _2 ... until a free name is found."""
    p = Path(path)
    if not p.exists():
        return str(p)
    stem = p.stem
    suffix = p.suffix
    parent = p.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}_{counter}{suffix}"
        if not candidate.exists():
            return str(candidate)
        counter += 1
