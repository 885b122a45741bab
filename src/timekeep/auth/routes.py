"""Route table, route permission matrix and admin navigation helpers.

Route permission matrix::

    | Route      | staff | manager | admin | super_admin |
    |------------|-------|---------|-------|-------------|
    | /welcome   |  yes  |   yes   |  yes  |     yes     |
    | /entry     |  yes  |   yes   |  yes  |     yes     |
    | /dashboard |  yes  |   yes   |  yes  |     yes     |
    | /team      |  no   |   yes   |  yes  |     yes     |
    | /admin/*   |  no   |   no    |  yes  |     yes     |
"""

from __future__ import annotations

from types import MappingProxyType
from typing import NamedTuple

from timekeep.models.user import Role


class Routes:
    LOGIN = "/login"
    SIGN_UP = "/sign-up"
    FORGOT_PASSWORD = "/forgot-password"
    UPDATE_PASSWORD = "/update-password"
    WELCOME = "/welcome"
    ENTRY = "/entry"
    DASHBOARD = "/dashboard"
    TEAM = "/team"
    ADMIN = "/admin"
    ADMIN_USERS = "/admin/users"
    ADMIN_MASTER_DATA = "/admin/master-data"


PUBLIC_ROUTES: tuple[str, ...] = (
    Routes.LOGIN,
    Routes.SIGN_UP,
    Routes.FORGOT_PASSWORD,
    Routes.UPDATE_PASSWORD,
    "/sign-up-success",
    "/error",
    "/confirm",
)

_ALL_ROLES = frozenset(Role)

ROUTE_PERMISSIONS: MappingProxyType[str, frozenset[Role]] = MappingProxyType(
    {
        Routes.WELCOME: _ALL_ROLES,
        Routes.ENTRY: _ALL_ROLES,
        Routes.DASHBOARD: _ALL_ROLES,
        Routes.TEAM: frozenset({Role.MANAGER, Role.ADMIN, Role.SUPER_ADMIN}),
        Routes.ADMIN: frozenset({Role.ADMIN, Role.SUPER_ADMIN}),
    }
)


def _matches(pathname: str, route: str) -> bool:
    return pathname == route or pathname.startswith(f"{route}/")


def _lookup(pathname: str) -> frozenset[Role] | None:
    for route, allowed in ROUTE_PERMISSIONS.items():
        if _matches(pathname, route):
            return allowed
    return None


def can_access_route(role: Role | str | None, pathname: str, *, allow_unknown: bool = False) -> bool:
    """Check whether ``role`` may open ``pathname``.

    Anonymous users (``role is None``) are denied everywhere. Paths outside the
    permission matrix are denied unless ``allow_unknown`` is set.
    """
    if not role:
        return False
    try:
        role = Role(role)
    except ValueError:
        return False

    allowed = _lookup(pathname)
    if allowed is None:
        return allow_unknown
    return role in allowed


def is_public_route(pathname: str) -> bool:
    """Login, sign-up and password pages that need no session."""
    return any(_matches(pathname, route) for route in PUBLIC_ROUTES)


def is_protected_route(pathname: str) -> bool:
    """Paths that require a signed-in user."""
    return _lookup(pathname) is not None


def get_default_route_for_role(role: Role | None) -> str:
    # Every role lands on quick entry after login.
    return Routes.ENTRY


def get_access_denied_redirect(role: Role | None) -> str:
    return Routes.ENTRY


class AdminNavItem(NamedTuple):
    href: str
    label: str


ADMIN_NAV_ITEMS: tuple[AdminNavItem, ...] = (
    AdminNavItem(Routes.ADMIN_MASTER_DATA, "Master Data"),
    AdminNavItem(Routes.ADMIN_USERS, "Users"),
)


def is_active_admin_route(pathname: str, href: str) -> bool:
    """Whether the admin sidebar item ``href`` is highlighted for ``pathname``.

    ``/admin`` redirects to master data, so that item is also active on the
    landing page.
    """
    if href == Routes.ADMIN_MASTER_DATA:
        return pathname in (Routes.ADMIN_MASTER_DATA, Routes.ADMIN)
    return _matches(pathname, href)
