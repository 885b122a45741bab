"""Role hierarchy and role-assignment checks."""

from __future__ import annotations

from types import MappingProxyType
from typing import NamedTuple

from timekeep.models.user import Role, RoleOption


class RoleInfo(NamedTuple):
    label: str
    level: int


ROLE_HIERARCHY: MappingProxyType[Role, RoleInfo] = MappingProxyType(
    {
        Role.STAFF: RoleInfo("Staff", 1),
        Role.MANAGER: RoleInfo("Manager", 2),
        Role.ADMIN: RoleInfo("Admin", 3),
        Role.SUPER_ADMIN: RoleInfo("Super Admin", 4),
    }
)

# Roles every admin-level user may hand out; super_admin is appended only for super admins.
_ASSIGNABLE_ROLES = (Role.STAFF, Role.MANAGER, Role.ADMIN)


def parse_role(value: str | Role | None) -> Role | None:
    """Coerce a stored role string to a Role, or None if it is not one."""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def get_role_level(role: Role) -> int:
    """Return the numeric privilege level (1-4) of a role."""
    return ROLE_HIERARCHY[Role(role)].level


def check_permission(role: str | Role | None, required_role: str | Role) -> bool:
    """Check if a role is at least as privileged as ``required_role``."""
    actual = parse_role(role)
    required = parse_role(required_role)
    if actual is None or required is None:
        return False
    return get_role_level(actual) >= get_role_level(required)


def is_manager_or_above(role: str | Role | None) -> bool:
    return check_permission(role, Role.MANAGER)


def is_admin_or_above(role: str | Role | None) -> bool:
    return check_permission(role, Role.ADMIN)


def get_role_options(acting_role: Role) -> list[RoleOption]:
    """Role choices offered to ``acting_role`` in the role picker, lowest first."""
    options = [RoleOption(value=r, label=ROLE_HIERARCHY[r].label) for r in _ASSIGNABLE_ROLES]
    if acting_role == Role.SUPER_ADMIN:
        options.append(RoleOption(value=Role.SUPER_ADMIN, label=ROLE_HIERARCHY[Role.SUPER_ADMIN].label))
    return options


def can_assign_role(acting_role: Role, target_role: Role) -> bool:
    """Check whether ``acting_role`` may assign ``target_role``.

    Only guards elevation to super_admin. Whether the acting user may manage
    users at all is decided by the route and page guards in front of this call.
    """
    if target_role == Role.SUPER_ADMIN and acting_role != Role.SUPER_ADMIN:
        return False
    return True
