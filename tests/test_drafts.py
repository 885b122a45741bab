"""Tests for form draft persistence."""

from __future__ import annotations

import pytest

from timekeep.client.drafts import (
    DRAFT_EXPIRY_MS,
    DRAFT_KEYS,
    DRAFT_SAVE_DEBOUNCE_MS,
    DraftAutoSaver,
    DraftStore,
)


class Clock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def storage() -> dict[str, str]:
    return {}


@pytest.fixture
def drafts(storage, clock) -> DraftStore:
    return DraftStore(storage, now_ms=clock)


def test_keys() -> None:
    assert DRAFT_KEYS.entry == "draft-entry"
    assert DRAFT_KEYS.edit_entry("abc-123") == "draft-entry-abc-123"
    assert DRAFT_KEYS.edit_entry("1") != DRAFT_KEYS.edit_entry("2")


def test_constants() -> None:
    assert DRAFT_EXPIRY_MS == 24 * 60 * 60 * 1000
    assert DRAFT_SAVE_DEBOUNCE_MS == 2000


def test_save_and_load(drafts, clock) -> None:
    drafts.save(DRAFT_KEYS.entry, {"hours": 1.5, "notes": "review"})
    draft = drafts.load(DRAFT_KEYS.entry)
    assert draft is not None
    assert draft.data == {"hours": 1.5, "notes": "review"}
    assert draft.saved_at == clock.now
    assert draft.version == 1


def test_expired_draft_is_removed(drafts, storage, clock) -> None:
    drafts.save(DRAFT_KEYS.entry, {"hours": 2})
    clock.now += DRAFT_EXPIRY_MS + 1
    assert drafts.load(DRAFT_KEYS.entry) is None
    assert DRAFT_KEYS.entry not in storage


def test_draft_at_expiry_boundary_survives(drafts, clock) -> None:
    drafts.save(DRAFT_KEYS.entry, {"hours": 2})
    clock.now += DRAFT_EXPIRY_MS
    assert drafts.load(DRAFT_KEYS.entry) is not None


def test_corrupt_draft_is_removed(drafts, storage) -> None:
    storage[DRAFT_KEYS.entry] = "{not json"
    assert drafts.load(DRAFT_KEYS.entry) is None
    assert not drafts.has_draft(DRAFT_KEYS.entry)


def test_draft_age_in_minutes(drafts, clock) -> None:
    assert drafts.get_draft_age(DRAFT_KEYS.entry) is None
    drafts.save(DRAFT_KEYS.entry, {})
    clock.now += 5 * 60_000 + 59_000
    assert drafts.get_draft_age(DRAFT_KEYS.entry) == 5


def test_cleanup_expired_drafts(drafts, storage, clock) -> None:
    drafts.save(DRAFT_KEYS.entry, {"a": 1})
    drafts.save(DRAFT_KEYS.edit_entry("old"), {"a": 2})
    clock.now += DRAFT_EXPIRY_MS + 1
    drafts.save(DRAFT_KEYS.edit_entry("fresh"), {"a": 3})
    storage["draft-entry-broken"] = "garbage"
    storage["theme"] = "dark"

    removed = drafts.cleanup_expired_drafts()

    assert sorted(removed) == ["draft-entry", "draft-entry-broken", "draft-entry-old"]
    assert set(storage) == {"draft-entry-fresh", "theme"}


def test_auto_saver_debounces(drafts, storage, scheduler) -> None:
    saver = DraftAutoSaver(drafts, DRAFT_KEYS.entry, scheduler=scheduler)
    saver.on_change({"hours": 1})
    scheduler.advance(1000)
    saver.on_change({"hours": 2})
    scheduler.advance(DRAFT_SAVE_DEBOUNCE_MS - 1)
    assert DRAFT_KEYS.entry not in storage
    scheduler.advance(1)
    assert saver.restore() == {"hours": 2}


def test_auto_saver_clear_drops_pending(drafts, storage, scheduler) -> None:
    saver = DraftAutoSaver(drafts, DRAFT_KEYS.entry, scheduler=scheduler)
    saver.on_change({"hours": 1})
    saver.flush()
    saver.on_change({"hours": 3})
    saver.clear()
    scheduler.advance(DRAFT_SAVE_DEBOUNCE_MS)
    assert storage == {}
    assert saver.restore() is None
