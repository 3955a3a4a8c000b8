"""Pytest tests for inbound parsing and config loading.

Config tests write temporary YAML/JSON files under ``tmp_path`` and assert
either successful loading or the correct exception.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from linesim.models import DurationMode, Stage
from linesim.parser import (
    load_config,
    parse_duration_mode,
    parse_num_shifts,
    parse_shift_minutes,
    parse_stages,
)


@pytest.mark.parametrize(
    "raw,expected",
    [("480", 480.0), (" 45.5 ", 45.5), (600, 600.0), ("abc", 720.0), ("", 720.0), (None, 720.0), ("-5", 720.0)],
)
def test_parse_shift_minutes(raw, expected):
    assert parse_shift_minutes(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("3", 3), (2, 2), ("2.7", 2), ("0.4", 1), ("0", 1), ("-1", 1), ("-2.5", 1), ("x", 1), (None, 1)],
)
def test_parse_num_shifts(raw, expected):
    assert parse_num_shifts(raw) == expected


def test_parse_num_shifts_custom_default():
    assert parse_num_shifts("bad", default=2) == 2
    assert parse_num_shifts(None, default=None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Min", DurationMode.MIN),
        ("MAX", DurationMode.MAX),
        ("random", DurationMode.RANDOM_PER_JOB),
        ("Random each job", DurationMode.RANDOM_PER_JOB),
        ("random-per-run", DurationMode.RANDOM_PER_RUN),
        (DurationMode.MAX, DurationMode.MAX),
    ],
)
def test_parse_duration_mode(raw, expected):
    assert parse_duration_mode(raw) is expected


def test_parse_duration_mode_unknown():
    with pytest.raises(ValueError):
        parse_duration_mode("sometimes")


def test_parse_stages_defaults_and_clamp():
    stages = parse_stages(
        [
            {"name": "Cut", "min": 5, "max": 8, "servers": 2},
            {"min": "4"},
            {"name": "Pack", "min": 1, "max": 1, "servers": 0},
        ]
    )
    assert stages == [
        Stage("Cut", 5.0, 8.0, 2),
        Stage("Stage 2", 4.0, 4.0, 1),
        Stage("Pack", 1.0, 1.0, 1),
    ]


@pytest.mark.parametrize(
    "raw",
    [
        {"name": "not a list"},
        ["not a mapping"],
        [{"name": "NoMin", "max": 3}],
        [{"name": "Text", "min": "ten"}],
        [{"name": "Inverted", "min": 10, "max": 5}],
        [{"name": "Negative", "min": -1, "max": 5}],
    ],
)
def test_parse_stages_errors(raw):
    with pytest.raises(ValueError):
        parse_stages(raw)


def test_load_yaml_config(tmp_path: Path) -> None:
    path = tmp_path / "line.yaml"
    path.write_text(
        "shift_minutes: 480\nstages:\n  - {name: A, min: 1, max: 2, servers: 1}\n",
        encoding="utf-8",
    )
    cfg = load_config(str(path))
    assert cfg["shift_minutes"] == 480
    assert parse_stages(cfg["stages"]) == [Stage("A", 1.0, 2.0, 1)]


def test_load_empty_yaml_is_empty_mapping(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == {}


def test_load_json_config(tmp_path: Path) -> None:
    path = tmp_path / "line.json"
    path.write_text(json.dumps({"shifts": 3}), encoding="utf-8")
    assert load_config(str(path)) == {"shifts": 3}


def test_load_config_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
