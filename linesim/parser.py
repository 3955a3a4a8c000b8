"""Inbound parsing: numeric fields, duration modes, stage lists and config files.

Numeric fields coming from user input never raise; they fall back to
defaults. Structural problems (a stage without a duration range, a config
that is not a mapping) raise ``ValueError``.
"""

from __future__ import annotations

import json
import math
import os
from typing import Any, Optional

import yaml

from .models import DurationMode, Stage

DEFAULT_SHIFT_MINUTES = 720.0

_MODE_ALIASES = {
    "min": DurationMode.MIN,
    "max": DurationMode.MAX,
    "random": DurationMode.RANDOM_PER_JOB,
    "random_per_job": DurationMode.RANDOM_PER_JOB,
    "random_each_job": DurationMode.RANDOM_PER_JOB,
    "random_per_run": DurationMode.RANDOM_PER_RUN,
}


def parse_shift_minutes(value: Any, default: float = DEFAULT_SHIFT_MINUTES) -> float:
    """Parse a shift length in minutes; unparsable or negative input yields ``default``."""
    try:
        minutes = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    if math.isnan(minutes) or math.isinf(minutes) or minutes < 0:
        return default
    return minutes


def parse_num_shifts(value: Any, default: Optional[int] = 1) -> Optional[int]:
    """Parse a shift count.

    A positive integer is taken as is, a positive float is floored (at least
    1); anything else yields ``default``.
    """
    if value is None:
        return default
    text = str(value).strip()
    try:
        count = int(text)
    except ValueError:
        count = None
    if count is not None:
        return count if count > 0 else default
    try:
        as_float = float(text)
    except ValueError:
        return default
    if as_float > 0 and not math.isinf(as_float):
        return max(1, math.floor(as_float))
    return default


def parse_duration_mode(value: Any) -> DurationMode:
    """Map a mode name (case insensitive) to ``DurationMode``.

    Raises:
        ValueError: On unknown names.
    """
    if isinstance(value, DurationMode):
        return value
    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return _MODE_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown duration mode: {value}") from None


def parse_stages(raw: Any) -> list[Stage]:
    """Build stages from a list of ``{name, min, max, servers}`` mappings.

    ``max`` defaults to ``min``; ``servers`` defaults to 1 and is clamped.

    Raises:
        ValueError: If the list or any entry is malformed.
    """
    if not isinstance(raw, list):
        raise ValueError("'stages' must be a list")
    stages: list[Stage] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Stage #{idx + 1}: expected a mapping")
        name = str(item.get("name", f"Stage {idx + 1}"))
        if "min" not in item:
            raise ValueError(f"Stage {name!r}: missing 'min'")
        try:
            lo = float(item["min"])
            hi = float(item.get("max", item["min"]))
            servers = int(item.get("servers", 1))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Stage {name!r}: {e}") from e
        stages.append(Stage(name, lo, hi, servers))
    return stages


def load_config(path: str) -> dict[str, Any]:
    """Load a YAML (``.yml``/``.yaml``) or JSON config file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the document is not a mapping.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must contain a mapping")
    return cfg
