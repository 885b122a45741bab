"""Tests for the SQLite user store."""

from __future__ import annotations

import sqlite3

import pytest

from timekeep.models.user import Role
from timekeep.storage.sqlite_store import SQLiteUserStore


async def test_initialize_creates_db(tmp_path):
    db_path = tmp_path / "nested" / "users.db"
    store = SQLiteUserStore(db_path)
    await store.initialize()
    assert db_path.exists()
    await store.close()


async def test_double_initialize(tmp_path):
    store = SQLiteUserStore(tmp_path / "users.db")
    await store.initialize()
    await store.initialize()
    await store.close()


async def test_uninitialized_store_raises(tmp_path):
    store = SQLiteUserStore(tmp_path / "users.db")
    with pytest.raises(RuntimeError):
        _ = store.db


async def test_create_and_get_user(store: SQLiteUserStore):
    created = await store.create_user("bob@example.com", display_name="Bob", role=Role.MANAGER)
    fetched = await store.get_user(created.id)
    assert fetched == created
    assert fetched.is_active


async def test_get_user_by_email(store: SQLiteUserStore):
    created = await store.create_user("bob@example.com", user_id="u-bob")
    assert (await store.get_user_by_email("bob@example.com")).id == "u-bob"
    assert created.role is Role.STAFF


async def test_get_missing_user(store: SQLiteUserStore):
    assert await store.get_user("missing") is None
    assert await store.get_role("missing") is None


async def test_duplicate_email(store: SQLiteUserStore):
    await store.create_user("bob@example.com")
    with pytest.raises(sqlite3.IntegrityError):
        await store.create_user("bob@example.com")


async def test_set_role(store: SQLiteUserStore):
    user = await store.create_user("bob@example.com")
    updated = await store.set_role(user.id, "admin")
    assert updated.role is Role.ADMIN
    assert await store.get_role(user.id) == "admin"


async def test_set_role_rejects_unknown(store: SQLiteUserStore):
    user = await store.create_user("bob@example.com")
    with pytest.raises(ValueError):
        await store.set_role(user.id, "owner")


async def test_set_role_missing_user(store: SQLiteUserStore):
    assert await store.set_role("missing", Role.MANAGER) is None


async def test_set_active(store: SQLiteUserStore):
    user = await store.create_user("bob@example.com")
    updated = await store.set_active(user.id, False)
    assert updated.is_active is False


async def test_list_users(store: SQLiteUserStore):
    await store.create_user("a@example.com")
    await store.create_user("b@example.com")
    emails = {u.email for u in await store.list_users()}
    assert emails == {"a@example.com", "b@example.com"}


async def test_manager_departments(store: SQLiteUserStore):
    manager = await store.create_user("m@example.com", role=Role.MANAGER)
    tax = await store.create_department("Tax", department_id="d-tax")
    audit = await store.create_department("Audit", department_id="d-audit")
    await store.assign_manager_department(manager.id, tax.id)
    await store.assign_manager_department(manager.id, audit.id)
    await store.assign_manager_department(manager.id, audit.id)

    assert await store.list_manager_departments(manager.id) == [audit, tax]
    assert await store.list_manager_departments("someone-else") == []
