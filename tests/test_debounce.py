"""Tests for the debounced search value."""

import asyncio

import pytest

from lookbook.browse.debounce import Debouncer


class TestDebouncer:
    """Only the last value of a burst settles."""

    @pytest.mark.asyncio
    async def test_value_lags_input(self) -> None:
        debouncer = Debouncer("", delay=0.05)
        debouncer.push("a")
        assert debouncer.latest == "a"
        assert debouncer.value == ""
        assert debouncer.pending
        await asyncio.sleep(0.1)
        assert debouncer.value == "a"
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_burst_settles_once_with_last_value(self) -> None:
        settled: list[str] = []
        debouncer = Debouncer("", delay=0.05, on_settle=settled.append)
        for text in ("a", "ad", "ada"):
            debouncer.push(text)
        await asyncio.sleep(0.1)
        assert settled == ["ada"]

    @pytest.mark.asyncio
    async def test_unchanged_value_does_not_notify(self) -> None:
        settled: list[str] = []
        debouncer = Debouncer("ada", delay=0.01, on_settle=settled.append)
        debouncer.push("ad")
        debouncer.push("ada")
        await asyncio.sleep(0.05)
        assert settled == []

    @pytest.mark.asyncio
    async def test_zero_delay_settles_immediately(self) -> None:
        settled: list[str] = []
        debouncer = Debouncer("", delay=0, on_settle=settled.append)
        debouncer.push("go")
        assert debouncer.value == "go"
        assert settled == ["go"]

    @pytest.mark.asyncio
    async def test_flush(self) -> None:
        debouncer = Debouncer("", delay=10)
        debouncer.push("rust")
        debouncer.flush()
        assert debouncer.value == "rust"
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_close_drops_pending_update(self) -> None:
        settled: list[str] = []
        debouncer = Debouncer("", delay=0.01, on_settle=settled.append)
        debouncer.push("late")
        debouncer.close()
        debouncer.push("later")
        await asyncio.sleep(0.05)
        assert settled == []
        assert debouncer.value == ""
        assert debouncer.closed

    @pytest.mark.asyncio
    async def test_reset_bypasses_delay(self) -> None:
        debouncer = Debouncer("", delay=0.01)
        debouncer.push("typed")
        debouncer.reset("from-url")
        await asyncio.sleep(0.05)
        assert debouncer.value == "from-url"
        assert debouncer.latest == "from-url"
