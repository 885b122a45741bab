"""Trailing-edge debounce on top of a Scheduler."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from timekeep.client.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs ``fn`` with the latest arguments once calls stop for ``delay_ms``."""

    def __init__(self, scheduler: Scheduler, delay_ms: int, fn: Callable[..., Any]) -> None:
        self._scheduler = scheduler
        self._delay = delay_ms / 1000
        self._fn = fn
        self._handle: TimerHandle | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._pending = (args, kwargs)
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self._scheduler.call_later(self._delay, self.flush)

    def flush(self) -> None:
        """Run the pending call now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._pending is None:
            return
        args, kwargs = self._pending
        self._pending = None
        try:
            self._fn(*args, **kwargs)
        except Exception:
            logger.exception("Debounced call to %r failed", self._fn)

    def cancel(self) -> None:
        """Drop the pending call."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None
