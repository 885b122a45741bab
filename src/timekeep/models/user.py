"""User, role and department models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Role(StrEnum):
    """User roles in ascending order of privilege."""

    STAFF = "staff"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class AuthUser(BaseModel):
    """The authenticated principal behind a request."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str | None = None


class UserProfile(BaseModel):
    """A row from the users table."""

    id: str
    email: str
    display_name: str | None = None
    role: Role = Role.STAFF
    is_active: bool = True
    department_id: str | None = None


class Department(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class RoleOption(BaseModel):
    """An entry in the role picker of the user-management screens."""

    model_config = ConfigDict(frozen=True)

    value: Role
    label: str
