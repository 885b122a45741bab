"""Shared test fixtures for Timekeep."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from timekeep.client.visibility import VisibilitySignal
from timekeep.config import Config
from timekeep.storage.sqlite_store import SQLiteUserStore

EPOCH = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual-time scheduler; time only moves on ``advance``."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._seq = itertools.count()
        self._timers: list[tuple[int, int, FakeHandle, Callable[[], object]]] = []

    def time(self) -> float:
        return self.now_ms / 1000

    def clock(self) -> datetime:
        return EPOCH + timedelta(milliseconds=self.now_ms)

    def call_later(self, delay: float, callback: Callable[[], object]) -> FakeHandle:
        handle = FakeHandle()
        when = self.now_ms + round(delay * 1000)
        heapq.heappush(self._timers, (when, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _ in self._timers if not h.cancelled)

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while self._timers and self._timers[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._timers)
            if handle.cancelled:
                continue
            self.now_ms = when
            callback()
        self.now_ms = target


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def visibility() -> VisibilitySignal:
    return VisibilitySignal()


@pytest.fixture
async def store(tmp_path: Path) -> SQLiteUserStore:
    s = SQLiteUserStore(tmp_path / "users.db")
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(data_path=tmp_path)
