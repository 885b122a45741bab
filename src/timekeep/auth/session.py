"""Collaborator interfaces for the current session and role lookups."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from timekeep.auth.jwt import TokenExpiredError, TokenInvalidError, verify_token
from timekeep.models.user import AuthUser, Department, UserProfile

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised to abort a request and send the user to the login page."""

    def __init__(self, redirect_to: str = "/login") -> None:
        super().__init__(f"Authentication required, redirecting to {redirect_to}")
        self.redirect_to = redirect_to


@runtime_checkable
class SessionProvider(Protocol):
    async def get_user(self) -> AuthUser | None:
        """Return the signed-in user, or None for anonymous requests."""
        ...


@runtime_checkable
class RoleLookup(Protocol):
    async def get_role(self, user_id: str) -> str | None:
        """Return the stored role for a user id, or None if there is no row."""
        ...


@runtime_checkable
class ProfileLookup(Protocol):
    async def get_user(self, user_id: str) -> UserProfile | None:
        ...


class StaticSessionProvider:
    """Session provider returning a fixed user (or none)."""

    def __init__(self, user: AuthUser | None) -> None:
        self._user = user

    async def get_user(self) -> AuthUser | None:
        return self._user


class JWTSessionProvider:
    """Resolves the current user from a bearer token."""

    def __init__(self, token: str | None, secret: str) -> None:
        self._token = token
        self._secret = secret
        self.expired = False

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    async def get_user(self) -> AuthUser | None:
        if not self._token:
            return None
        try:
            payload = verify_token(self._token, self._secret)
        except TokenExpiredError:
            self.expired = True
            return None
        except TokenInvalidError:
            return None
        return AuthUser(id=payload["sub"], email=payload.get("email"))


@runtime_checkable
class DepartmentLookup(Protocol):
    async def list_departments(self) -> list[Department]:
        ...

    async def list_manager_departments(self, user_id: str) -> list[Department]:
        ...
