"""Loading progress for primary fetches."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class LoadingProgress:
    """Percentage of the current primary fetch, for a progress bar.

    Fetch handlers call ``start()``, report stages with ``advance()``, and
    finish with ``complete()`` on success and failure alike. Listeners get
    ``(progress, loading)`` after every change.
    """

    progress: int = 0
    loading: bool = False
    listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def start(self) -> None:
        self.loading = True
        self.progress = 0
        self._notify()

    def advance(self, value: int) -> None:
        self.progress = min(100, max(0, value))
        self._notify()

    def complete(self) -> None:
        self.progress = 100
        self.loading = False
        self._notify()

    def subscribe(self, listener: Callable[[int, bool], None]) -> None:
        self.listeners.append(listener)

    def _notify(self) -> None:
        for listener in self.listeners:
            listener(self.progress, self.loading)
