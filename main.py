#!/usr/bin/env python3


import argparse
import logging
from typing import Any, Dict

from linesim.modes.common import params_from_config, stages_from_config
from linesim.modes.compare import run_compare
from linesim.modes.plan import run_plan_mode
from linesim.parser import load_config
from linesim.shifts import DEFAULT_INDEPENDENT_SHIFTS

logger = logging.getLogger("linesim")


def main(cfg: Dict[str, Any]) -> None:
    charts_cfg = cfg.get("charts", {}) if isinstance(cfg.get("charts"), dict) else {}
    charts_dir = charts_cfg.get("dir", "charts")
    with_charts = bool(charts_cfg.get("enabled", True))

    stages = stages_from_config(cfg)
    params = params_from_config(cfg)
    logger.info(
        "Line: stages=%d servers=%d shift=%s min mode=%s composition=%s seed=%s",
        len(stages),
        sum(s.server_count for s in stages),
        params.shift_minutes,
        params.mode.value,
        params.composition,
        params.seed,
    )

    run_mode = cfg.get("mode", "plan")
    if run_mode == "plan":
        run_plan_mode(stages, params, charts_dir, with_charts=with_charts)
    elif run_mode == "compare":
        run_compare(
            stages,
            params.shift_minutes,
            params.shifts or DEFAULT_INDEPENDENT_SHIFTS,
            params.seed,
            charts_dir,
            max_jobs=params.max_jobs,
        )
    else:
        raise ValueError(f"Unknown mode: {run_mode}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Production line throughput planner (config only)")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to the YAML/JSON config file",
    )
    args = parser.parse_args()

    cfg = load_config(args.config)

    log_level = cfg.get("log_level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    main(cfg)
