"""Tab visibility signal."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

VisibilityListener = Callable[[bool], None]


class VisibilitySignal:
    """Holds the hidden/visible state and notifies subscribers when it flips."""

    def __init__(self, *, hidden: bool = False) -> None:
        self._hidden = hidden
        self._listeners: list[VisibilityListener] = []

    @property
    def hidden(self) -> bool:
        return self._hidden

    def subscribe(self, listener: VisibilityListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: VisibilityListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def set_hidden(self, hidden: bool) -> None:
        """Update the state; listeners only hear about actual changes."""
        if hidden == self._hidden:
            return
        self._hidden = hidden
        for listener in list(self._listeners):
            try:
                listener(hidden)
            except Exception:
                logger.exception("Error in visibility listener")
