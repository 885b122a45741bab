"""Per-request capability checks for the team and admin pages."""

from __future__ import annotations

import logging

from timekeep.auth.permissions import is_admin_or_above, is_manager_or_above, parse_role
from timekeep.auth.routes import Routes
from timekeep.auth.session import DepartmentLookup, LoginRequired, RoleLookup, SessionProvider
from timekeep.models.access import ManagerAccessResult
from timekeep.models.result import ActionResult
from timekeep.models.user import AuthUser, Role

logger = logging.getLogger(__name__)

SESSION_EXPIRED = "Session expired"


async def require_auth(sessions: SessionProvider) -> AuthUser:
    """Return the signed-in user or abort with a redirect to the expired-session login."""
    user = await sessions.get_user()
    if user is None:
        raise LoginRequired(f"{Routes.LOGIN}?expired=true")
    return user


async def get_auth_user(sessions: SessionProvider) -> ActionResult:
    """Like ``require_auth`` but reports a missing session as a failed result."""
    try:
        user = await sessions.get_user()
    except Exception:
        logger.exception("Session lookup failed")
        return ActionResult.fail(SESSION_EXPIRED, auth_error=True)
    if user is None:
        return ActionResult.fail(SESSION_EXPIRED, auth_error=True)
    return ActionResult.ok(user)


async def resolve_role(user_id: str, roles: RoleLookup) -> Role:
    """Look up a user's role, falling back to staff on any failure."""
    try:
        stored = await roles.get_role(user_id)
    except Exception:
        logger.exception("Failed to fetch role for user %s", user_id)
        return Role.STAFF

    role = parse_role(stored)
    if role is None:
        if stored is not None:
            logger.warning("Unknown role %r for user %s, treating as staff", stored, user_id)
        return Role.STAFF
    return role


async def check_manager_access(sessions: SessionProvider, roles: RoleLookup) -> ManagerAccessResult:
    """Work out whether the current user may see the team pages.

    Raises:
        LoginRequired: If there is no signed-in user.
    """
    user = await sessions.get_user()
    if user is None:
        raise LoginRequired(Routes.LOGIN)

    role = await resolve_role(user.id, roles)
    return ManagerAccessResult(
        can_access=is_manager_or_above(role),
        user_id=user.id,
        role=role,
        is_admin=is_admin_or_above(role),
    )


async def get_manager_departments(
    user_id: str, is_admin: bool, store: DepartmentLookup
) -> ActionResult:
    """Departments a manager oversees; admins see every department."""
    try:
        if is_admin:
            departments = await store.list_departments()
        else:
            departments = await store.list_manager_departments(user_id)
    except Exception as e:
        logger.exception("Failed to load departments for user %s", user_id)
        return ActionResult.fail(str(e))
    return ActionResult.ok(departments)
