"""Scheduler service - runs the global sweep periodically.

The engine recomputes which monitors are due from last_checked on every
tick, so the scheduler only needs a fixed tick shorter than the smallest
monitor interval (one minute).
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .engine import MonitorEngine

logger = logging.getLogger(__name__)

# Scheduler tick interval in seconds
SWEEP_INTERVAL_SECONDS = 60


class SchedulerService:
    """Service for scheduling the periodic sweep."""

    def __init__(self, engine: MonitorEngine, interval_seconds: int = SWEEP_INTERVAL_SECONDS):
        self.engine = engine
        self.interval_seconds = interval_seconds
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Start the scheduler."""
        if self._running:
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self._run_sweep,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id="run_sweep",
            replace_existing=True,
            max_instances=1,
            misfire_grace_time=self.interval_seconds,
        )
        self.scheduler.start()
        self._running = True
        logger.info(f"Scheduler started (tick={self.interval_seconds}s)")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler and self._running:
            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    async def _run_sweep(self):
        try:
            results = await self.engine.sweep()
            checked = sum(1 for r in results if r.checked)
            failed = sum(1 for r in results if r.error)
            logger.debug(f"Sweep finished: {checked}/{len(results)} checked, {failed} errors")
        except Exception as e:
            logger.error(f"Error running sweep: {e}")
