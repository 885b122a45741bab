"""Result envelope returned by mutation actions."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ActionResult(BaseModel):
    """Either ``success`` with ``data`` or a failure with a user-facing ``error``."""

    success: bool
    data: Any = None
    error: str | None = None
    auth_error: bool = False

    @classmethod
    def ok(cls, data: Any = None) -> ActionResult:
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, *, auth_error: bool = False) -> ActionResult:
        return cls(success=False, error=error, auth_error=auth_error)

    @property
    def is_auth_error(self) -> bool:
        return not self.success and self.auth_error
