"""Display and matching helpers shared by the PR and progression services."""

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_exercise_name(name: str) -> str:
    """'  Bench   PRESS ' -> 'bench press'. Used to match exercises across sessions by name."""
    return _WHITESPACE_RE.sub(" ", name.lower().strip())


def format_number(value: float, thousands: bool = False) -> str:
    """225.0 -> '225', 12.5 -> '12.5'; with thousands=True, 12345 -> '12,345'."""
    if float(value).is_integer():
        return f"{int(value):,}" if thousands else str(int(value))
    return f"{value:,}" if thousands else str(value)
