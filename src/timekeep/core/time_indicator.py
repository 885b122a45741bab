"""Time-of-day indicator for the team compliance view."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

TimeIndicator = Literal["neutral", "warning"]

AFTER_HOURS_CUTOFF = 17


def is_after_cutoff(now: datetime | None = None, *, cutoff_hour: int = AFTER_HOURS_CUTOFF) -> bool:
    now = now or datetime.now()
    return now.hour >= cutoff_hour


def get_time_of_day_indicator(
    now: datetime | None = None, *, cutoff_hour: int = AFTER_HOURS_CUTOFF
) -> TimeIndicator:
    """``warning`` from the cutoff hour on (members who have not logged yet get flagged)."""
    if is_after_cutoff(now, cutoff_hour=cutoff_hour):
        return "warning"
    return "neutral"
