"""
Unit tests for the fixed-interval scheduler loop.
"""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from ingest.providers.registry import ProviderConfigError
from scheduler.service import SchedulerService
from shared.config import Settings
from shared.models.domain import CycleReport


@pytest.fixture
def ingest() -> MagicMock:
    m = MagicMock()
    m.run_cycle = AsyncMock(return_value=CycleReport())
    return m


def _settings(interval: float) -> Settings:
    return Settings(poll_interval_s=interval, metrics_enabled=False)


@pytest.mark.asyncio
async def test_first_cycle_runs_immediately(ingest: MagicMock) -> None:
    scheduler = SchedulerService(ingest, _settings(60.0))
    scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert ingest.run_cycle.await_count == 1
    assert not scheduler.running


@pytest.mark.asyncio
async def test_cycles_repeat_at_interval(ingest: MagicMock) -> None:
    scheduler = SchedulerService(ingest, _settings(0.01))
    scheduler.start()
    await asyncio.sleep(0.1)
    await scheduler.stop()

    assert ingest.run_cycle.await_count >= 3
    assert scheduler.cycles == ingest.run_cycle.await_count


@pytest.mark.asyncio
async def test_start_is_idempotent(ingest: MagicMock) -> None:
    scheduler = SchedulerService(ingest, _settings(60.0))
    scheduler.start()
    scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert ingest.run_cycle.await_count == 1


@pytest.mark.asyncio
async def test_unexpected_error_keeps_loop_alive(ingest: MagicMock) -> None:
    ingest.run_cycle.side_effect = [RuntimeError("boom"), CycleReport(), CycleReport()]
    scheduler = SchedulerService(ingest, _settings(0.01))
    scheduler.start()
    await asyncio.sleep(0.05)
    await scheduler.stop()

    assert ingest.run_cycle.await_count >= 2


@pytest.mark.asyncio
async def test_config_error_stops_loop(ingest: MagicMock) -> None:
    ingest.run_cycle.side_effect = ProviderConfigError("no api key")
    scheduler = SchedulerService(ingest, _settings(0.01))

    with pytest.raises(ProviderConfigError):
        await scheduler.run()
    assert ingest.run_cycle.await_count == 1


@pytest.mark.asyncio
async def test_request_shutdown_ends_run(ingest: MagicMock) -> None:
    scheduler = SchedulerService(ingest, _settings(60.0))
    task = asyncio.create_task(scheduler.run())
    await asyncio.sleep(0.05)
    scheduler.request_shutdown()
    await asyncio.wait_for(task, timeout=1.0)

    assert scheduler.cycles == 1
