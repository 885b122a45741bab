"""SQLite store for users, roles and manager departments."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from timekeep.auth.permissions import parse_role
from timekeep.models.user import Department, Role, UserProfile

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS departments (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    display_name TEXT,
    role TEXT NOT NULL DEFAULT 'staff'
        CHECK (role IN ('staff', 'manager', 'admin', 'super_admin')),
    is_active INTEGER NOT NULL DEFAULT 1,
    department_id TEXT REFERENCES departments(id) ON DELETE SET NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS manager_departments (
    manager_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    department_id TEXT NOT NULL REFERENCES departments(id) ON DELETE CASCADE,
    created_at TEXT NOT NULL,
    PRIMARY KEY (manager_id, department_id)
);
"""


class SQLiteUserStore:
    """User profile store; also serves as the role and department lookup."""

    def __init__(self, db_path: Path, *, wal_mode: bool = True) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Create database and apply schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self.db_path))
        self._db.row_factory = aiosqlite.Row

        if self.wal_mode:
            await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.execute("PRAGMA foreign_keys=ON")

        await self._db.executescript(_SCHEMA)
        await self._db.commit()
        logger.info("Initialized user store at %s", self.db_path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Store not initialized. Call initialize() first.")
        return self._db

    # --- Users ---

    async def create_user(
        self,
        email: str,
        *,
        user_id: str | None = None,
        display_name: str | None = None,
        role: Role = Role.STAFF,
        department_id: str | None = None,
    ) -> UserProfile:
        profile = UserProfile(
            id=user_id or str(uuid.uuid4()),
            email=email,
            display_name=display_name,
            role=Role(role),
            department_id=department_id,
        )
        await self.db.execute(
            """INSERT INTO users (id, email, display_name, role, is_active, department_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                profile.id,
                profile.email,
                profile.display_name,
                str(profile.role),
                True,
                profile.department_id,
                _now(),
            ),
        )
        await self.db.commit()
        logger.info("Created user %s (role=%s)", profile.id, profile.role)
        return profile

    async def get_user(self, user_id: str) -> UserProfile | None:
        cursor = await self.db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = await cursor.fetchone()
        return _row_to_profile(row) if row else None

    async def get_user_by_email(self, email: str) -> UserProfile | None:
        cursor = await self.db.execute("SELECT * FROM users WHERE email = ?", (email,))
        row = await cursor.fetchone()
        return _row_to_profile(row) if row else None

    async def list_users(self) -> list[UserProfile]:
        cursor = await self.db.execute("SELECT * FROM users ORDER BY created_at, email")
        rows = await cursor.fetchall()
        return [_row_to_profile(row) for row in rows]

    async def get_role(self, user_id: str) -> str | None:
        cursor = await self.db.execute("SELECT role FROM users WHERE id = ?", (user_id,))
        row = await cursor.fetchone()
        return row["role"] if row else None

    async def set_role(self, user_id: str, role: Role | str) -> UserProfile | None:
        """Change a user's role. Returns the updated profile or None if missing."""
        parsed = parse_role(role)
        if parsed is None:
            raise ValueError(f"Unknown role: {role!r}")
        return await self._update(user_id, {"role": str(parsed)})

    async def set_active(self, user_id: str, active: bool) -> UserProfile | None:
        return await self._update(user_id, {"is_active": active})

    async def _update(self, user_id: str, updates: dict[str, Any]) -> UserProfile | None:
        updates = {**updates, "updated_at": _now()}
        set_clauses = ", ".join(f"{key} = ?" for key in updates)
        cursor = await self.db.execute(
            f"UPDATE users SET {set_clauses} WHERE id = ?",
            (*updates.values(), user_id),
        )
        await self.db.commit()
        if cursor.rowcount == 0:
            return None
        return await self.get_user(user_id)

    # --- Departments ---

    async def create_department(self, name: str, *, department_id: str | None = None) -> Department:
        department = Department(id=department_id or str(uuid.uuid4()), name=name)
        await self.db.execute(
            "INSERT INTO departments (id, name, created_at) VALUES (?, ?, ?)",
            (department.id, department.name, _now()),
        )
        await self.db.commit()
        return department

    async def assign_manager_department(self, manager_id: str, department_id: str) -> None:
        await self.db.execute(
            """INSERT OR IGNORE INTO manager_departments (manager_id, department_id, created_at)
               VALUES (?, ?, ?)""",
            (manager_id, department_id, _now()),
        )
        await self.db.commit()

    async def list_departments(self) -> list[Department]:
        cursor = await self.db.execute("SELECT id, name FROM departments ORDER BY name")
        rows = await cursor.fetchall()
        return [Department(id=row["id"], name=row["name"]) for row in rows]

    async def list_manager_departments(self, user_id: str) -> list[Department]:
        cursor = await self.db.execute(
            """SELECT d.id, d.name FROM manager_departments md
               JOIN departments d ON d.id = md.department_id
               WHERE md.manager_id = ?
               ORDER BY d.name""",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [Department(id=row["id"], name=row["name"]) for row in rows]


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _row_to_profile(row: aiosqlite.Row) -> UserProfile:
    data = dict(row)
    return UserProfile(
        id=data["id"],
        email=data["email"],
        display_name=data["display_name"],
        role=parse_role(data["role"]) or Role.STAFF,
        is_active=bool(data["is_active"]),
        department_id=data["department_id"],
    )
