"""Request gate run in front of every page.

Public pages bounce signed-in users to quick entry, protected pages require a
session, an active account and a role allowed by the route matrix.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from timekeep.auth.routes import (
    Routes,
    can_access_route,
    get_access_denied_redirect,
    get_default_route_for_role,
    is_protected_route,
    is_public_route,
)
from timekeep.auth.session import ProfileLookup, SessionProvider
from timekeep.models.access import RouteDecision
from timekeep.models.user import Role, UserProfile

logger = logging.getLogger(__name__)

LOGIN_MESSAGE = "Please login to continue"


def _with_query(path: str, **params: str) -> str:
    return f"{path}?{urlencode(params)}"


async def _load_profile(user_id: str, profiles: ProfileLookup) -> UserProfile | None:
    try:
        return await profiles.get_user(user_id)
    except Exception:
        logger.exception("Failed to fetch user role for %s", user_id)
        return None


async def evaluate_request(
    pathname: str,
    sessions: SessionProvider,
    profiles: ProfileLookup,
    *,
    had_session: bool = False,
    allow_unknown: bool = False,
) -> RouteDecision:
    """Decide whether a request for ``pathname`` proceeds or is redirected.

    Args:
        pathname: Request path, without query string.
        sessions: Source of the signed-in user.
        profiles: Lookup for the user's role and active flag.
        had_session: The request carried auth cookies that no longer resolve
            to a user, i.e. the session expired rather than never existed.
        allow_unknown: Passed through to ``can_access_route``.
    """
    user = await sessions.get_user()

    if is_public_route(pathname):
        if user is not None and pathname != "/confirm":
            return RouteDecision.redirect(get_default_route_for_role(None), "authenticated")
        return RouteDecision.allow()

    if not is_protected_route(pathname):
        return RouteDecision.allow()

    if user is None:
        if had_session:
            return RouteDecision.redirect(_with_query(Routes.LOGIN, expired="true"), "session_expired")
        return RouteDecision.redirect(_with_query(Routes.LOGIN, message=LOGIN_MESSAGE), "unauthenticated")

    profile = await _load_profile(user.id, profiles)
    if profile is not None and not profile.is_active:
        logger.info("Deactivated user %s tried to open %s", user.id, pathname)
        return RouteDecision.redirect(
            _with_query(Routes.LOGIN, error="account_deactivated"), "account_deactivated", sign_out=True
        )

    # Missing or unreadable profiles fall back to staff, never to an elevated role.
    role = profile.role if profile else Role.STAFF
    if not can_access_route(role, pathname, allow_unknown=allow_unknown):
        logger.info("Denied %s (role=%s) access to %s", user.id, role, pathname)
        return RouteDecision.redirect(
            _with_query(get_access_denied_redirect(role), access="denied"), "access_denied"
        )

    return RouteDecision.allow()
