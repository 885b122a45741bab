"""Timekeep storage layer."""

from timekeep.storage.sqlite_store import SQLiteUserStore

__all__ = ["SQLiteUserStore"]
