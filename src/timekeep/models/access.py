"""Access-check results handed to page-level guards."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from timekeep.models.user import Role


class ManagerAccessResult(BaseModel):
    """Capabilities of the current user on the team pages."""

    model_config = ConfigDict(frozen=True)

    can_access: bool
    user_id: str
    role: Role
    is_admin: bool


class RouteDecision(BaseModel):
    """Outcome of gating a request path."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    redirect_to: str | None = None
    reason: str | None = None
    # The caller must end the session before following the redirect.
    sign_out: bool = False

    @classmethod
    def allow(cls) -> RouteDecision:
        return cls(allowed=True)

    @classmethod
    def redirect(cls, redirect_to: str, reason: str, *, sign_out: bool = False) -> RouteDecision:
        return cls(allowed=False, redirect_to=redirect_to, reason=reason, sign_out=sign_out)
