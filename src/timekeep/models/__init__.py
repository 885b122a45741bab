"""Timekeep data models."""

from timekeep.models.access import ManagerAccessResult, RouteDecision
from timekeep.models.draft import FormDraft
from timekeep.models.result import ActionResult
from timekeep.models.user import AuthUser, Department, Role, RoleOption, UserProfile

__all__ = [
    "ActionResult",
    "AuthUser",
    "Department",
    "FormDraft",
    "ManagerAccessResult",
    "Role",
    "RoleOption",
    "RouteDecision",
    "UserProfile",
]
