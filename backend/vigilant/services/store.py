"""Monitor store - persistence for monitors and their history.

Every read-modify-write on a monitor runs under a per-id lock, so a manual
check and a sweep touching the same monitor never interleave their writes.
"""
import logging
from typing import Callable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from ..models import Monitor, MonitorHistory
from ..schemas.monitor import HistoryEntry, MonitorState
from ..utils.clock import Clock, epoch_ms
from ..utils.db_utils import retry_on_lock
from ..utils.locks import KeyedLock

logger = logging.getLogger(__name__)

Mutation = Callable[[MonitorState], MonitorState]


class MonitorNotFoundError(LookupError):
    """Raised when a monitor id does not exist."""

    def __init__(self, monitor_id: str):
        super().__init__(f"Monitor not found: {monitor_id}")
        self.monitor_id = monitor_id


def seed_monitors(now: int) -> List[MonitorState]:
    """Demo monitors inserted into an empty store."""
    return [
        MonitorState(
            id="mon-1",
            name="Google Search",
            url="https://www.google.com",
            interval=1,
            status="UP",
            last_checked=now,
            history=[
                HistoryEntry(id="h1", timestamp=now - 300000, latency=120, status="UP"),
                HistoryEntry(id="h2", timestamp=now - 600000, latency=145, status="UP"),
                HistoryEntry(id="h3", timestamp=now - 900000, latency=110, status="UP"),
            ],
        ),
        MonitorState(
            id="mon-2",
            name="Vigilant API",
            url="https://api.vigilant.io/health",
            interval=5,
            status="DOWN",
            last_checked=now,
            history=[
                HistoryEntry(id="h4", timestamp=now - 300000, latency=0, status="DOWN", message="DNS Resolution Error"),
                HistoryEntry(id="h5", timestamp=now - 600000, latency=450, status="UP"),
            ],
        ),
    ]


class MonitorStore:
    """Async store exposing get/list/create/mutate/delete per monitor."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], clock: Clock = epoch_ms):
        self.session_factory = session_factory
        self.clock = clock
        self._locks = KeyedLock()

    async def _load(self, session: AsyncSession, monitor_id: str) -> Monitor:
        result = await session.execute(
            select(Monitor)
            .options(selectinload(Monitor.history))
            .where(Monitor.id == monitor_id)
        )
        monitor = result.scalar_one_or_none()
        if monitor is None:
            raise MonitorNotFoundError(monitor_id)
        return monitor

    async def get(self, monitor_id: str) -> MonitorState:
        async with self.session_factory() as session:
            return MonitorState.model_validate(await self._load(session, monitor_id))

    async def list(self) -> List[MonitorState]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Monitor)
                .options(selectinload(Monitor.history))
                .order_by(Monitor.created_at, Monitor.id)
            )
            return [MonitorState.model_validate(m) for m in result.scalars().all()]

    async def count(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(select(func.count(Monitor.id)))
            return result.scalar() or 0

    async def create(self, initial: MonitorState) -> MonitorState:
        async def insert():
            async with self.session_factory() as session:
                monitor = Monitor(
                    id=initial.id,
                    name=initial.name,
                    url=initial.url,
                    interval=initial.interval,
                    status=initial.status,
                    last_checked=initial.last_checked,
                )
                _apply_history(monitor, initial.history, {})
                session.add(monitor)
                await session.commit()

        async with self._locks.hold(initial.id):
            await retry_on_lock(insert, initial.id)
        return await self.get(initial.id)

    async def mutate(self, monitor_id: str, fn: Mutation) -> MonitorState:
        """Apply fn to the current state and persist the result atomically per id."""
        async def apply() -> MonitorState:
            async with self.session_factory() as session:
                monitor = await self._load(session, monitor_id)
                updated = fn(MonitorState.model_validate(monitor))

                monitor.name = updated.name
                monitor.url = updated.url
                monitor.interval = updated.interval
                monitor.status = updated.status
                monitor.last_checked = updated.last_checked
                existing = {h.id: h for h in monitor.history}
                _apply_history(monitor, updated.history, existing)

                await session.commit()
                return updated

        async with self._locks.hold(monitor_id):
            return await retry_on_lock(apply, monitor_id)

    async def delete(self, monitor_id: str) -> bool:
        async def remove() -> bool:
            async with self.session_factory() as session:
                try:
                    monitor = await self._load(session, monitor_id)
                except MonitorNotFoundError:
                    return False
                await session.delete(monitor)
                await session.commit()
                return True

        async with self._locks.hold(monitor_id):
            return await retry_on_lock(remove, monitor_id)

    async def ensure_seed(self) -> None:
        """Insert demo monitors when the store is empty."""
        async with self._locks.hold("__seed__"):
            if await self.count():
                return
            for monitor in seed_monitors(self.clock()):
                await self.create(monitor)
            logger.info("Seeded demo monitors")


def _apply_history(monitor: Monitor, entries: List[HistoryEntry], existing: dict) -> None:
    """Replace the ORM history with entries, reusing rows that already exist."""
    rows = []
    for position, entry in enumerate(entries):
        row = existing.get(entry.id)
        if row is None:
            row = MonitorHistory(
                id=entry.id,
                timestamp=entry.timestamp,
                latency=entry.latency,
                status=entry.status,
                message=entry.message,
                status_code=entry.status_code,
            )
        row.position = position
        rows.append(row)
    # Rows left out are removed by the delete-orphan cascade
    monitor.history = rows
