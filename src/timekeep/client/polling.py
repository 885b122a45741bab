"""Polling session with visibility-based pause and resume.

- Calls ``on_poll`` every ``interval_ms`` while the tab is visible.
- Pauses when the tab is hidden.
- Polls immediately and restarts the countdown when the tab comes back.
- ``reset()`` polls immediately and restarts the countdown from any state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum

from timekeep.client.scheduler import Scheduler, TimerHandle
from timekeep.client.visibility import VisibilitySignal

logger = logging.getLogger(__name__)

POLLING_INTERVAL_MS = 30_000


class PollingState(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"


class PollingSession:
    """Owns one repeating timer for a view; call ``close()`` when the view goes away."""

    def __init__(
        self,
        on_poll: Callable[[], object],
        interval_ms: int = POLLING_INTERVAL_MS,
        *,
        scheduler: Scheduler,
        visibility: VisibilitySignal,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._on_poll = on_poll
        self._interval = interval_ms / 1000
        self._scheduler = scheduler
        self._visibility = visibility
        self._clock = clock or (lambda: datetime.now(UTC))
        self._handle: TimerHandle | None = None
        self._state = PollingState.ACTIVE
        self.last_updated: datetime = self._clock()

        self._arm()
        visibility.subscribe(self._on_visibility_change)

    @property
    def state(self) -> PollingState:
        return self._state

    @property
    def is_polling(self) -> bool:
        return self._state is PollingState.ACTIVE

    def reset(self) -> None:
        """Poll now and restart the countdown."""
        if self._state is PollingState.CLOSED:
            return
        self._cancel()
        self._poll()
        self._arm()

    def close(self) -> None:
        """Cancel the timer and stop listening for visibility changes."""
        if self._state is PollingState.CLOSED:
            return
        self._cancel()
        self._visibility.unsubscribe(self._on_visibility_change)
        self._state = PollingState.CLOSED

    def __enter__(self) -> PollingSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _on_visibility_change(self, hidden: bool) -> None:
        if hidden:
            if self._state is PollingState.ACTIVE:
                self._cancel()
                self._state = PollingState.PAUSED
        elif self._state is PollingState.PAUSED:
            self._poll()
            self._arm()

    def _arm(self) -> None:
        self._cancel()
        self._handle = self._scheduler.call_later(self._interval, self._tick)
        self._state = PollingState.ACTIVE

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        if self._state is not PollingState.ACTIVE:
            return
        # Re-arm first so the next tick is scheduled even if on_poll calls reset().
        self._arm()
        self._poll()

    def _poll(self) -> None:
        try:
            self._on_poll()
        except Exception:
            # Keep showing the previous data; the next tick tries again.
            logger.exception("Polling callback failed")
            return
        self.last_updated = self._clock()
