"""Form draft persistence with expiry.

Drafts live in session storage (any ``MutableMapping[str, str]``) as JSON
``{"data": ..., "saved_at": <epoch ms>, "version": 1}``. Drafts older than
``DRAFT_EXPIRY_MS`` and drafts that fail to parse are removed on read.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, MutableMapping
from typing import Any

from pydantic import ValidationError

from timekeep.client.debounce import Debouncer
from timekeep.client.scheduler import Scheduler
from timekeep.models.draft import FormDraft

logger = logging.getLogger(__name__)

DRAFT_EXPIRY_MS = 24 * 60 * 60 * 1000
DRAFT_SAVE_DEBOUNCE_MS = 2000


class DraftKeys:
    entry = "draft-entry"

    def edit_entry(self, entry_id: str) -> str:
        return f"{self.entry}-{entry_id}"


DRAFT_KEYS = DraftKeys()


def _now_ms() -> int:
    return int(time.time() * 1000)


class DraftStore:
    """Reads and writes drafts in a string key/value store."""

    def __init__(
        self,
        storage: MutableMapping[str, str],
        *,
        expiry_ms: int = DRAFT_EXPIRY_MS,
        now_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._storage = storage
        self._expiry_ms = expiry_ms
        self._now_ms = now_ms

    def save(self, key: str, data: dict[str, Any]) -> FormDraft:
        draft = FormDraft(data=data, saved_at=self._now_ms())
        self._storage[key] = draft.model_dump_json()
        return draft

    def _read(self, key: str) -> FormDraft | None:
        raw = self._storage.get(key)
        if raw is None:
            return None
        try:
            return FormDraft.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable draft %s", key)
            self._storage.pop(key, None)
            return None

    def load(self, key: str) -> FormDraft | None:
        """Return the draft for ``key`` unless it is missing, corrupt or expired."""
        draft = self._read(key)
        if draft is None:
            return None
        if draft.age_ms(self._now_ms()) > self._expiry_ms:
            self._storage.pop(key, None)
            return None
        return draft

    def clear(self, key: str) -> None:
        self._storage.pop(key, None)

    def has_draft(self, key: str) -> bool:
        return key in self._storage

    def get_draft_age(self, key: str) -> int | None:
        """Age of the stored draft in whole minutes."""
        raw = self._storage.get(key)
        if raw is None:
            return None
        try:
            draft = FormDraft.model_validate_json(raw)
        except ValidationError:
            return None
        return draft.age_ms(self._now_ms()) // 60_000

    def cleanup_expired_drafts(self) -> list[str]:
        """Remove expired or corrupt entry drafts; returns the removed keys."""
        keys = [k for k in self._storage if k.startswith(DRAFT_KEYS.entry)]
        removed = []
        for key in keys:
            if self.load(key) is None:
                removed.append(key)
        if removed:
            logger.debug("Removed %d expired drafts", len(removed))
        return removed


class DraftAutoSaver:
    """Saves form values a short while after the last change."""

    def __init__(
        self,
        store: DraftStore,
        key: str,
        *,
        scheduler: Scheduler,
        delay_ms: int = DRAFT_SAVE_DEBOUNCE_MS,
    ) -> None:
        self.store = store
        self.key = key
        self._debouncer = Debouncer(scheduler, delay_ms, self._save)

    def restore(self) -> dict[str, Any] | None:
        draft = self.store.load(self.key)
        return draft.data if draft else None

    def on_change(self, values: dict[str, Any]) -> None:
        self._debouncer(dict(values))

    def clear(self) -> None:
        """Drop any pending save and the stored draft (after a successful submit)."""
        self._debouncer.cancel()
        self.store.clear(self.key)

    def flush(self) -> None:
        self._debouncer.flush()

    def _save(self, values: dict[str, Any]) -> None:
        self.store.save(self.key, values)
