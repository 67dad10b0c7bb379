"""Monitor engine - runs checks and the global sweep.

Probing happens outside the store lock; the decision to write a full history
entry or only refresh last_checked is made inside store.mutate against the
state current at write time.
"""
import asyncio
import logging
from typing import List, Optional

from ..schemas.monitor import HistoryEntry, MonitorState, SweepResult
from ..utils.clock import Clock, epoch_ms
from .classifier import FailureClassifier
from .prober import Prober
from .recorder import HistoryRecorder
from .store import MonitorStore

logger = logging.getLogger(__name__)

MAX_CONCURRENT_CHECKS = 10


class MonitorEngine:
    """Prober -> classifier -> recorder pipeline over a monitor store."""

    def __init__(
        self,
        store: MonitorStore,
        prober: Optional[Prober] = None,
        classifier: Optional[FailureClassifier] = None,
        recorder: Optional[HistoryRecorder] = None,
        clock: Clock = epoch_ms,
        max_concurrent_checks: int = MAX_CONCURRENT_CHECKS,
    ):
        self.store = store
        self.prober = prober or Prober()
        self.classifier = classifier or FailureClassifier(clock=clock)
        self.recorder = recorder or HistoryRecorder()
        self.clock = clock
        self.max_concurrent_checks = max_concurrent_checks

    def is_due(self, monitor: MonitorState, now: int) -> bool:
        """Determine if a monitor is due for a scheduled check.

        Never-checked and PENDING monitors are always due; otherwise the
        configured interval (minutes) must have elapsed since last_checked.
        """
        if monitor.last_checked is None or monitor.status == "PENDING":
            return True
        return now - monitor.last_checked >= monitor.interval * 60_000

    async def run_single_check(self, monitor: MonitorState, simulate_failure: bool = False) -> HistoryEntry:
        """Probe a monitor and classify the result without persisting it."""
        outcome = await self.prober.probe(monitor.url, simulate_failure=simulate_failure)
        return self.classifier.classify(outcome)

    async def check_monitor(self, monitor_id: str, simulate_failure: bool = False) -> MonitorState:
        """Manual check: always probes and always writes a full history entry."""
        monitor = await self.store.get(monitor_id)
        entry = await self.run_single_check(monitor, simulate_failure=simulate_failure)
        updated = await self.store.mutate(
            monitor_id,
            lambda current: self.recorder.record(current, entry, entry.timestamp, suppress=False),
        )
        logger.info(f"Manual check {monitor.name}: {entry.status}")
        return updated

    async def sweep(self) -> List[SweepResult]:
        """Check every due monitor and report one result per monitor, in store order."""
        monitors = await self.store.list()
        now = self.clock()

        due = [m for m in monitors if self.is_due(m, now)]
        logger.debug(f"Checking {len(due)} due monitors out of {len(monitors)} total")

        semaphore = asyncio.Semaphore(self.max_concurrent_checks)

        async def check_with_limit(monitor: MonitorState) -> SweepResult:
            async with semaphore:
                return await self._sweep_one(monitor, now)

        checked = await asyncio.gather(*[check_with_limit(m) for m in due])
        by_id = {r.monitor_id: r for r in checked}

        return [
            by_id.get(m.id) or SweepResult(monitor_id=m.id, name=m.name, checked=False)
            for m in monitors
        ]

    async def _sweep_one(self, monitor: MonitorState, now: int) -> SweepResult:
        try:
            entry = await self.run_single_check(monitor)
            await self.store.mutate(
                monitor.id,
                lambda current: self.recorder.record(current, entry, now),
            )
        except Exception as e:
            logger.error(f"Error checking monitor {monitor.id}: {e}")
            return SweepResult(monitor_id=monitor.id, name=monitor.name, checked=True, error=str(e))

        logger.debug(f"Monitor {monitor.name}: {entry.status}")
        return SweepResult(
            monitor_id=monitor.id,
            name=monitor.name,
            checked=True,
            status=entry.status,
            latency=entry.latency,
        )
