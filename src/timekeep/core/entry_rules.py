"""Edit window for time entries.

An entry stays editable on its own date and the following 7 days (8 calendar
days in total). Time of day is ignored on both sides.

- entry from today: 8 days remaining
- entry from 7 days ago: 1 day remaining (last day)
- entry from 8 days ago: 0 (locked)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from timekeep.models.result import ActionResult

logger = logging.getLogger(__name__)

EDIT_WINDOW_DAYS = 7

DateLike = date | datetime | str


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def _today(today: DateLike | None) -> date:
    return date.today() if today is None else _to_date(today)


def days_since_entry(entry_date: DateLike, *, today: DateLike | None = None) -> int:
    """Whole calendar days between the entry date and today (negative for future dates)."""
    return (_today(today) - _to_date(entry_date)).days


def can_edit_entry(
    entry_date: DateLike,
    *,
    today: DateLike | None = None,
    window_days: int = EDIT_WINDOW_DAYS,
) -> bool:
    """Check if an entry is still inside its edit window."""
    cutoff = _today(today) - timedelta(days=window_days)
    return _to_date(entry_date) >= cutoff


def get_days_until_locked(
    entry_date: DateLike,
    *,
    today: DateLike | None = None,
    window_days: int = EDIT_WINDOW_DAYS,
) -> int:
    """Days left before the entry locks, 0 once it is locked."""
    remaining = window_days + 1 - days_since_entry(entry_date, today=today)
    return max(0, remaining)


def edit_window_notice(
    entry_date: DateLike,
    *,
    today: DateLike | None = None,
    window_days: int = EDIT_WINDOW_DAYS,
) -> str | None:
    """Short message shown next to an entry that is about to lock or already locked."""
    if not can_edit_entry(entry_date, today=today, window_days=window_days):
        return f"Cannot edit entries older than {window_days} days"
    remaining = get_days_until_locked(entry_date, today=today, window_days=window_days)
    if remaining == 1:
        return "Last day to edit this entry"
    if remaining <= 2:
        return f"{remaining} days left to edit"
    return None


def ensure_entry_editable(
    entry_date: DateLike,
    *,
    today: DateLike | None = None,
    window_days: int = EDIT_WINDOW_DAYS,
) -> ActionResult:
    """Gate an edit or delete action on the edit window.

    Returns a failed ActionResult carrying the locked-entry message instead of
    raising, so actions can hand it straight back to the form.
    """
    if can_edit_entry(entry_date, today=today, window_days=window_days):
        return ActionResult.ok()
    logger.info("Rejected mutation of locked entry dated %s", _to_date(entry_date))
    return ActionResult.fail(f"Cannot edit entries older than {window_days} days")
