"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import itertools

import httpx
import pytest
import pytest_asyncio

from vigilant.database import close_db, create_engine, create_session_factory, init_db
from vigilant.services.classifier import FailureClassifier
from vigilant.services.engine import MonitorEngine
from vigilant.services.prober import Prober
from vigilant.services.recorder import HistoryRecorder
from vigilant.services.store import MonitorStore

START_MS = 1_700_000_000_000


class FakeClock:
    """Deterministic epoch-ms clock; optionally moves forward on every read."""

    def __init__(self, now: int = START_MS, step: int = 0) -> None:
        self.now = now
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeEndpoints:
    """httpx.MockTransport handler serving a fixed set of fake hosts."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.cancelled: list[str] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host in ("ok.test", "example.com"):
            return httpx.Response(200, html="<html><h1>All good</h1></html>")
        if host == "fake.test":
            return httpx.Response(200, html="<html><h1>Site Under Maintenance</h1></html>")
        if host == "json-fake.test":
            return httpx.Response(200, json={"detail": "database error"})
        if host == "broken.test":
            return httpx.Response(500)
        if host == "missing.test":
            return httpx.Response(404)
        if host == "redirect.test":
            return httpx.Response(302, headers={"location": "https://ok.test/landing"})
        if host == "refused.test":
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        if host == "silent.test":
            raise httpx.ConnectError("", request=request)
        if host == "timeout.test":
            raise httpx.ReadTimeout("timed out", request=request)
        if host == "slow.test":
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                self.cancelled.append(host)
                raise
            return httpx.Response(200, html="too late")
        raise httpx.ConnectError(f"Name or service not known: {host}", request=request)

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"entry-{next(counter)}"


@pytest.fixture
def endpoints() -> FakeEndpoints:
    return FakeEndpoints()


@pytest.fixture
def transport(endpoints: FakeEndpoints) -> httpx.MockTransport:
    return httpx.MockTransport(endpoints)


@pytest.fixture
def prober(transport: httpx.MockTransport) -> Prober:
    return Prober(timeout=10, transport=transport)


@pytest.fixture
def db_engine(tmp_path):
    return create_engine(f"sqlite+aiosqlite:///{tmp_path / 'vigilant.db'}")


@pytest_asyncio.fixture
async def store(db_engine, clock: FakeClock):
    await init_db(db_engine)
    yield MonitorStore(create_session_factory(db_engine), clock=clock)
    await close_db(db_engine)


@pytest.fixture
def engine(store: MonitorStore, prober: Prober, clock: FakeClock, id_factory) -> MonitorEngine:
    return MonitorEngine(
        store,
        prober=prober,
        classifier=FailureClassifier(clock=clock, id_factory=id_factory),
        recorder=HistoryRecorder(),
        clock=clock,
    )
