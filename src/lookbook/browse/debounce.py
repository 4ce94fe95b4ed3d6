"""Debounced value for free-text search input."""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

log = structlog.get_logger()


class Debouncer[T]:
    """A value that trails its input by a fixed delay.

    Each ``push`` restarts the timer, so only the last value of a burst
    settles. Timers run on the current asyncio loop; a pending update is
    dropped by a newer push, by ``cancel()`` or by ``close()``.
    """

    def __init__(
        self,
        initial: T,
        delay: float = 0.5,
        on_settle: Callable[[T], None] | None = None,
    ) -> None:
        """
        Args:
            initial: Value exposed before any input settles.
            delay: Quiet period in seconds before a pushed value settles.
            on_settle: Called with each settled value that differs from the last.
        """
        self._value = initial
        self._latest = initial
        self._delay = delay
        self._on_settle = on_settle
        self._handle: asyncio.TimerHandle | None = None
        self._closed = False

    @property
    def value(self) -> T:
        """The settled (lagging) value."""
        return self._value

    @property
    def latest(self) -> T:
        """The most recent raw input."""
        return self._latest

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        """Record new input and restart the delay."""
        if self._closed:
            return
        self._latest = value
        self.cancel()
        if self._delay <= 0:
            self._settle(value)
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._settle, value)

    def flush(self) -> None:
        """Settle the latest input now instead of waiting out the delay."""
        if self._handle is not None:
            self.cancel()
            self._settle(self._latest)

    def reset(self, value: T) -> None:
        """Set input and settled value together, bypassing the delay."""
        self.cancel()
        self._latest = value
        self._value = value

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        """Drop any pending update and ignore later input."""
        self.cancel()
        self._closed = True

    def _settle(self, value: T) -> None:
        self._handle = None
        if self._closed:
            return
        changed = value != self._value
        self._value = value
        if changed and self._on_settle is not None:
            log.debug("debounced_value_settled", value=value)
            self._on_settle(value)
