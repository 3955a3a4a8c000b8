"""Pytest configuration, shared fixtures & custom summary hook.

Also ensures the repository root is on sys.path for ``import linesim``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'import linesim.*' works
_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from linesim.models import Stage  # noqa: E402


@pytest.fixture
def single_stage() -> list[Stage]:
    """One fixed 10-minute stage with a single server."""
    return [Stage("Press", 10, 10, 1)]


@pytest.fixture
def two_stage_line() -> list[Stage]:
    """Fixed 10-minute stage A feeding a fixed 5-minute stage B with 2 servers."""
    return [Stage("A", 10, 10, 1), Stage("B", 5, 5, 2)]


@pytest.fixture
def random_line() -> list[Stage]:
    """Line with ranged durations and parallel servers."""
    return [
        Stage("Gate in", 20, 40, 1),
        Stage("Cleaning", 90, 150, 4),
        Stage("QC", 30, 60, 2),
        Stage("Gate out", 10, 20, 1),
    ]


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        f"Passed: {passed} | Failed: {failed} | Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
