"""Tests for sequential detail navigation and prefetching."""

import asyncio

import pytest

from lookbook.browse.navigator import UNSET, Prefetcher, SequentialNavigator

SLUGS = ["a", "b", "x", "d", "e"]


class TestSequentialNavigator:
    """Index tracking by slug."""

    def test_locates_slug(self) -> None:
        nav = SequentialNavigator()
        assert nav.sync(SLUGS, "x") == 2
        assert nav.previous_slug == "b"
        assert nav.next_slug == "d"
        assert nav.neighbours() == ["d", "b"]

    def test_unknown_before_first_sync(self) -> None:
        nav = SequentialNavigator()
        assert nav.current_index == UNSET
        assert not nav.can_go_next
        assert not nav.can_go_previous

    def test_first_item_has_no_previous(self) -> None:
        nav = SequentialNavigator()
        nav.sync(SLUGS, "a")
        assert not nav.can_go_previous
        assert nav.can_go_next

    def test_last_item_has_no_next(self) -> None:
        nav = SequentialNavigator()
        nav.sync(SLUGS, "e")
        assert not nav.can_go_next
        assert nav.previous_slug == "d"

    def test_absent_slug_keeps_last_index(self) -> None:
        """A refreshed list without the current slug leaves the index where it was."""
        nav = SequentialNavigator()
        nav.sync(SLUGS, "x")
        nav.sync(["a", "b", "d", "e", "f"], "x")
        assert nav.current_index == 2
        assert nav.next_slug == "e"

    def test_direction_rules(self) -> None:
        nav = SequentialNavigator()
        for i, slug in enumerate(SLUGS):
            nav.sync(SLUGS, slug)
            assert nav.can_go_next == (0 <= i < len(SLUGS) - 1)
            assert nav.can_go_previous == (i > 0)

    def test_single_item(self) -> None:
        nav = SequentialNavigator()
        nav.sync(["only"], "only")
        assert nav.neighbours() == []


class TestPrefetcher:
    """Background warming of neighbours."""

    @pytest.mark.asyncio
    async def test_fetches_after_delay(self) -> None:
        fetched: list[str] = []

        async def fetch(slug: str) -> None:
            fetched.append(slug)

        prefetcher = Prefetcher(fetch, delay=0.01)
        prefetcher.schedule(["b", "d"])
        assert fetched == []
        await asyncio.sleep(0.03)
        await prefetcher.drain()
        assert sorted(fetched) == ["b", "d"]

    @pytest.mark.asyncio
    async def test_cancel_before_delay(self) -> None:
        fetched: list[str] = []

        async def fetch(slug: str) -> None:
            fetched.append(slug)

        prefetcher = Prefetcher(fetch, delay=0.05)
        prefetcher.schedule(["b"])
        prefetcher.cancel()
        await asyncio.sleep(0.08)
        assert fetched == []
        assert not prefetcher.pending

    @pytest.mark.asyncio
    async def test_reschedule_replaces_targets(self) -> None:
        fetched: list[str] = []

        async def fetch(slug: str) -> None:
            fetched.append(slug)

        prefetcher = Prefetcher(fetch, delay=0.02)
        prefetcher.schedule(["old"])
        prefetcher.schedule(["new"])
        await asyncio.sleep(0.05)
        await prefetcher.drain()
        assert fetched == ["new"]

    @pytest.mark.asyncio
    async def test_failures_are_swallowed(self) -> None:
        async def fetch(slug: str) -> None:
            raise RuntimeError("offline")

        prefetcher = Prefetcher(fetch, delay=0)
        prefetcher.schedule(["b"])
        await asyncio.sleep(0.01)
        await prefetcher.drain()
        assert not prefetcher.pending
