"""Tests for the periodic sweep scheduler."""

from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from vigilant.services.scheduler import SchedulerService


class StubEngine:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sweeps = 0

    async def sweep(self):
        self.sweeps += 1
        if self.error:
            raise self.error
        return []


class TestSchedulerService:
    @pytest.mark.asyncio
    async def test_start_registers_sweep_job(self) -> None:
        service = SchedulerService(StubEngine(), interval_seconds=30)
        service.start()
        try:
            assert service.running is True
            job = service.scheduler.get_job("run_sweep")
            assert job is not None
            assert job.trigger.interval == timedelta(seconds=30)
            assert job.max_instances == 1
        finally:
            service.stop()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_scheduler(self) -> None:
        service = SchedulerService(StubEngine())
        service.start()
        scheduler = service.scheduler
        service.start()
        try:
            assert service.scheduler is scheduler
            assert len(scheduler.get_jobs()) == 1
        finally:
            service.stop()

    @pytest.mark.asyncio
    async def test_stop(self) -> None:
        service = SchedulerService(StubEngine())
        service.start()
        service.stop()
        assert service.running is False
        # Stopping again is a no-op
        service.stop()

    def test_stop_before_start(self) -> None:
        service = SchedulerService(StubEngine())
        service.stop()
        assert service.running is False

    @pytest.mark.asyncio
    async def test_failed_sweep_is_logged_and_swallowed(self, caplog) -> None:
        engine = StubEngine(error=RuntimeError("store unavailable"))
        service = SchedulerService(engine)

        with caplog.at_level(logging.ERROR, logger="vigilant.services.scheduler"):
            await service._run_sweep()
            await service._run_sweep()

        assert engine.sweeps == 2
        assert "Error running sweep: store unavailable" in caplog.text
