"""Execution modes driven by ``main.py`` (plan, compare)."""
