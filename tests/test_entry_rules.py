"""Tests for the entry edit window."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from timekeep.core.entry_rules import (
    EDIT_WINDOW_DAYS,
    can_edit_entry,
    days_since_entry,
    edit_window_notice,
    ensure_entry_editable,
    get_days_until_locked,
)

TODAY = date(2026, 3, 18)


def _ago(days: int) -> date:
    return TODAY - timedelta(days=days)


class TestCanEditEntry:
    def test_today(self) -> None:
        assert can_edit_entry(TODAY, today=TODAY)

    def test_last_editable_day(self) -> None:
        assert can_edit_entry(_ago(7), today=TODAY)

    def test_locked_after_window(self) -> None:
        assert not can_edit_entry(_ago(8), today=TODAY)

    def test_future_entry(self) -> None:
        assert can_edit_entry(TODAY + timedelta(days=1), today=TODAY)

    def test_iso_strings(self) -> None:
        assert can_edit_entry("2026-03-11", today="2026-03-18")
        assert not can_edit_entry("2026-03-10", today="2026-03-18")

    def test_time_of_day_ignored(self) -> None:
        entry = datetime(2026, 3, 11, 23, 59)
        now = datetime(2026, 3, 18, 0, 1)
        assert can_edit_entry(entry, today=now)

    def test_month_boundary(self) -> None:
        assert can_edit_entry("2026-02-22", today="2026-03-01")
        assert not can_edit_entry("2026-02-21", today="2026-03-01")

    def test_defaults_to_local_today(self) -> None:
        assert can_edit_entry(date.today())
        assert not can_edit_entry(date.today() - timedelta(days=30))


class TestDaysUntilLocked:
    @pytest.mark.parametrize(
        ("days_ago", "expected"),
        [(0, 8), (1, 7), (6, 2), (7, 1), (8, 0), (30, 0)],
    )
    def test_countdown(self, days_ago: int, expected: int) -> None:
        assert get_days_until_locked(_ago(days_ago), today=TODAY) == expected

    def test_never_negative(self) -> None:
        for days_ago in range(0, 400, 7):
            assert get_days_until_locked(_ago(days_ago), today=TODAY) >= 0

    def test_locked_entry_agrees(self) -> None:
        entry = _ago(EDIT_WINDOW_DAYS + 1)
        assert not can_edit_entry(entry, today=TODAY)
        assert get_days_until_locked(entry, today=TODAY) == 0

    def test_custom_window(self) -> None:
        assert get_days_until_locked(TODAY, today=TODAY, window_days=3) == 4
        assert not can_edit_entry(_ago(4), today=TODAY, window_days=3)

    def test_days_since_entry(self) -> None:
        assert days_since_entry(_ago(5), today=TODAY) == 5


class TestNotices:
    def test_no_notice_early_in_window(self) -> None:
        assert edit_window_notice(TODAY, today=TODAY) is None

    def test_two_days_left(self) -> None:
        assert edit_window_notice(_ago(6), today=TODAY) == "2 days left to edit"

    def test_last_day(self) -> None:
        assert edit_window_notice(_ago(7), today=TODAY) == "Last day to edit this entry"

    def test_locked(self) -> None:
        assert edit_window_notice(_ago(8), today=TODAY) == "Cannot edit entries older than 7 days"


class TestEnsureEditable:
    def test_editable_entry_passes(self) -> None:
        result = ensure_entry_editable(_ago(3), today=TODAY)
        assert result.success
        assert result.error is None

    def test_locked_entry_is_rejected_with_message(self) -> None:
        result = ensure_entry_editable(_ago(8), today=TODAY)
        assert not result.success
        assert result.error == "Cannot edit entries older than 7 days"
        assert not result.is_auth_error
