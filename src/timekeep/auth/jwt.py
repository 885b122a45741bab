"""JWT session tokens for Timekeep."""

from __future__ import annotations

import logging
import time
from typing import Any

import jwt

from timekeep.models.user import Role

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenExpiredError(Exception):
    """Raised when a JWT token has expired."""


class TokenInvalidError(Exception):
    """Raised when a JWT token is invalid."""


def create_token(
    user_id: str,
    *,
    secret: str,
    exp_minutes: int = 60,
    email: str | None = None,
    role: Role | None = None,
) -> str:
    """Create a signed session token for a user."""
    now = int(time.time())
    payload: dict[str, Any] = {
        "sub": user_id,
        "iat": now,
        "exp": now + (exp_minutes * 60),
    }
    if email:
        payload["email"] = email
    if role:
        payload["role"] = str(role)
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str) -> dict[str, Any]:
    """Verify and decode a session token."""
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        logger.warning("Token expired: %s", e)
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token: %s", e)
        raise TokenInvalidError("Token is invalid") from e
    if not payload.get("sub"):
        raise TokenInvalidError("Token missing user ID")
    return payload
