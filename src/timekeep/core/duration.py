"""Duration conversion and formatting for time entries."""

from __future__ import annotations

from typing import Literal

DURATION_PRESETS: tuple[float, ...] = (0.5, 1, 2, 4, 8)


def hours_to_minutes(hours: float) -> int:
    return round(hours * 60)


def minutes_to_hours(minutes: int) -> float:
    return minutes / 60


def _trim(value: float) -> str:
    # Plain decimal, whole hours without a trailing ".0".
    return str(int(value)) if value.is_integer() else str(value)


def format_duration(minutes: int, style: Literal["short", "long"] = "short") -> str:
    """Format minutes as ``"1.5 hrs"`` (short) or ``"1 hrs 30 mins"`` (long)."""
    if style == "short":
        return f"{_trim(minutes_to_hours(minutes))} hrs"

    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins} mins"
    if mins == 0:
        return f"{hours} hrs"
    return f"{hours} hrs {mins} mins"


def is_valid_duration_increment(hours: float) -> bool:
    """Durations are logged in quarter-hour steps."""
    return float(hours * 4).is_integer()
