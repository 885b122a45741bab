"""Timer abstraction used by polling and debounce."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay.

    ``asyncio.AbstractEventLoop`` already satisfies this protocol.
    """

    def time(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle:
        ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def time(self) -> float:
        return self._loop.time()

    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle:
        return self._loop.call_later(delay, callback)
