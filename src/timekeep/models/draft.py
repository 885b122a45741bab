"""Form draft model persisted in session storage."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class FormDraft(BaseModel):
    """Snapshot of unsaved form values."""

    data: dict[str, Any] = Field(default_factory=dict)
    saved_at: int
    version: int = 1

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.saved_at
