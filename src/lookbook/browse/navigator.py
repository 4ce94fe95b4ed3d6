"""Sequential detail navigation and neighbour prefetching."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

log = structlog.get_logger()

UNSET = -1


class SequentialNavigator:
    """Position of the displayed item inside the unfiltered ordered collection.

    The index is found by slug, never trusted from a previous list. When a
    refreshed collection no longer contains the current slug the last known
    index is kept, so the item on screen does not change under the user.
    """

    def __init__(self) -> None:
        self._slugs: list[str] = []
        self.current_index = UNSET

    @property
    def slugs(self) -> list[str]:
        return list(self._slugs)

    def __len__(self) -> int:
        return len(self._slugs)

    def sync(self, slugs: Sequence[str], current_slug: str | None) -> int:
        """Adopt a freshly loaded collection and locate ``current_slug`` in it."""
        self._slugs = list(slugs)
        if current_slug is not None:
            try:
                self.current_index = self._slugs.index(current_slug)
            except ValueError:
                log.debug(
                    "navigator_slug_absent",
                    slug=current_slug,
                    retained_index=self.current_index,
                )
        return self.current_index

    def reset(self) -> None:
        self.current_index = UNSET

    @property
    def can_go_previous(self) -> bool:
        return 0 < self.current_index <= len(self._slugs)

    @property
    def can_go_next(self) -> bool:
        return 0 <= self.current_index < len(self._slugs) - 1

    @property
    def previous_slug(self) -> str | None:
        return self._slugs[self.current_index - 1] if self.can_go_previous else None

    @property
    def next_slug(self) -> str | None:
        return self._slugs[self.current_index + 1] if self.can_go_next else None

    def neighbours(self) -> list[str]:
        """Slugs immediately before and after the current one."""
        return [slug for slug in (self.next_slug, self.previous_slug) if slug is not None]


class Prefetcher:
    """Fire-and-forget warming of neighbour records.

    ``schedule`` waits out a settle delay (so the primary detail fetch goes
    first) and then fetches each slug concurrently. Rescheduling or
    ``cancel()`` drops a timer that has not fired yet; fetches already
    started are left to finish. Failures are logged at debug level only.
    """

    def __init__(self, fetch: Callable[[str], Awaitable[Any]], delay: float = 0.3) -> None:
        self._fetch = fetch
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None or bool(self._tasks)

    def schedule(self, slugs: Sequence[str]) -> None:
        self.cancel()
        targets = [slug for slug in slugs if slug]
        if not targets:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._launch, targets)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for started prefetches; used by tests and shutdown."""
        if self._tasks:
            await asyncio.wait(set(self._tasks))

    def _launch(self, slugs: list[str]) -> None:
        self._handle = None
        for slug in slugs:
            task = asyncio.get_running_loop().create_task(self._prefetch(slug))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _prefetch(self, slug: str) -> None:
        try:
            await self._fetch(slug)
        except Exception as e:
            log.debug("prefetch_failed", slug=slug, error=str(e))
        else:
            log.debug("prefetched", slug=slug)
