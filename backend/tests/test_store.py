"""Tests for the monitor store."""

from __future__ import annotations

import asyncio

import pytest

from vigilant.schemas.monitor import HistoryEntry, MonitorState
from vigilant.services.recorder import HistoryRecorder
from vigilant.services.store import MonitorNotFoundError, MonitorStore

from conftest import START_MS


def new_monitor(monitor_id: str = "m1", **overrides) -> MonitorState:
    fields = dict(id=monitor_id, name="Example", url="https://example.com")
    fields.update(overrides)
    return MonitorState(**fields)


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, store: MonitorStore) -> None:
        created = await store.create(new_monitor())
        assert created.status == "PENDING"
        assert created.history == []
        assert created.last_checked is None

        fetched = await store.get("m1")
        assert fetched == created

    @pytest.mark.asyncio
    async def test_get_missing(self, store: MonitorStore) -> None:
        with pytest.raises(MonitorNotFoundError):
            await store.get("nope")

    @pytest.mark.asyncio
    async def test_list(self, store: MonitorStore) -> None:
        await store.create(new_monitor("a"))
        await store.create(new_monitor("b"))
        assert [m.id for m in await store.list()] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_delete(self, store: MonitorStore) -> None:
        await store.create(new_monitor(history=[
            HistoryEntry(id="h1", timestamp=START_MS, latency=10, status="UP"),
        ]))
        assert await store.delete("m1") is True
        assert await store.delete("m1") is False
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_mutate_missing(self, store: MonitorStore) -> None:
        with pytest.raises(MonitorNotFoundError):
            await store.mutate("nope", lambda s: s)


class TestMutate:
    @pytest.mark.asyncio
    async def test_history_round_trip_keeps_order(self, store: MonitorStore) -> None:
        await store.create(new_monitor())
        entries = [
            HistoryEntry(id=f"h{i}", timestamp=START_MS, latency=i, status="UP")
            for i in range(3)
        ]
        await store.mutate("m1", lambda s: s.model_copy(update={"history": entries, "status": "UP"}))

        fetched = await store.get("m1")
        assert [h.id for h in fetched.history] == ["h0", "h1", "h2"]
        assert fetched.status == "UP"

    @pytest.mark.asyncio
    async def test_dropped_entries_are_deleted(self, store: MonitorStore) -> None:
        recorder = HistoryRecorder(limit=2)
        await store.create(new_monitor())
        for i in range(4):
            entry = HistoryEntry(id=f"h{i}", timestamp=START_MS + i, latency=1, status="UP")
            await store.mutate("m1", lambda s: recorder.append(s, entry))

        fetched = await store.get("m1")
        assert [h.id for h in fetched.history] == ["h3", "h2"]

    @pytest.mark.asyncio
    async def test_concurrent_mutations_do_not_lose_updates(self, store: MonitorStore) -> None:
        recorder = HistoryRecorder()
        await store.create(new_monitor())

        async def add(i: int) -> None:
            entry = HistoryEntry(id=f"h{i}", timestamp=START_MS + i, latency=1, status="UP")
            await store.mutate("m1", lambda s: recorder.append(s, entry))

        await asyncio.gather(*[add(i) for i in range(60)])

        fetched = await store.get("m1")
        assert len(fetched.history) == 50
        assert len({h.id for h in fetched.history}) == 50
        assert len(store._locks) == 0


class TestSeed:
    @pytest.mark.asyncio
    async def test_seeds_empty_store(self, store: MonitorStore) -> None:
        await store.ensure_seed()
        monitors = await store.list()
        assert [m.name for m in monitors] == ["Google Search", "Vigilant API"]
        google, api = monitors
        assert google.status == "UP"
        assert len(google.history) == 3
        assert google.last_checked == START_MS
        assert api.status == "DOWN"
        assert api.history[0].message == "DNS Resolution Error"

    @pytest.mark.asyncio
    async def test_seed_only_once(self, store: MonitorStore) -> None:
        await store.ensure_seed()
        await store.ensure_seed()
        assert len(await store.list()) == 2

    @pytest.mark.asyncio
    async def test_no_seed_when_populated(self, store: MonitorStore) -> None:
        await store.create(new_monitor())
        await store.ensure_seed()
        assert [m.id for m in await store.list()] == ["m1"]
