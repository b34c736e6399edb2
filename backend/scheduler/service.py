"""
Scheduler service for the live cricket predictor.
Drives fixed-interval poll cycles and owns the process lifecycle.
"""
from __future__ import annotations

import asyncio
import signal
import time
from typing import Optional

from shared.config import Settings, get_settings
from shared.utils.logging import get_logger, setup_logging
from shared.utils.metrics import start_metrics_server

from ingest.providers.registry import ProviderConfigError, get_provider
from ingest.publisher import LoggingPublisher
from ingest.service import IngestService
from ingest.tracking.registry import MatchRegistry
from ingest.transport import ProviderTransport

logger = get_logger(__name__)


class SchedulerService:
    """
    Fixed-rate poll loop.

    The first cycle runs immediately; later cycles start ``poll_interval_s``
    after the previous one started. A cycle that overruns the interval is
    followed straight away by the next one, never overlapped with it.
    """

    def __init__(self, ingest: IngestService, settings: Settings | None = None) -> None:
        self._ingest = ingest
        self._settings = settings or get_settings()
        self._shutdown = asyncio.Event()
        self._task: Optional[asyncio.Task[None]] = None
        self._cycles = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def cycles(self) -> int:
        return self._cycles

    def start(self) -> None:
        """Spawn the poll loop. No-op if it is already running."""
        if self.running:
            return
        self._shutdown.clear()
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Signal shutdown and wait for the in-flight cycle to finish."""
        self._shutdown.set()
        if self._task is not None:
            await self._task
            self._task = None

    def request_shutdown(self) -> None:
        self._shutdown.set()

    async def run(self) -> None:
        """Poll until shutdown is requested. Configuration errors end the loop."""
        interval = self._settings.poll_interval_s
        logger.info("scheduler_started", interval_s=interval)

        while not self._shutdown.is_set():
            started = time.monotonic()
            try:
                await self._ingest.run_cycle()
            except ProviderConfigError:
                logger.error("scheduler_config_error")
                raise
            except Exception as exc:
                logger.error("scheduler_cycle_error", error=str(exc), error_type=type(exc).__name__)
            self._cycles += 1

            elapsed = time.monotonic() - started
            wait_s = max(0.0, interval - elapsed)
            if elapsed > interval:
                logger.warning("poll_cycle_overrun", elapsed_s=round(elapsed, 3), interval_s=interval)
            try:
                await asyncio.wait_for(self._shutdown.wait(), timeout=wait_s)
            except asyncio.TimeoutError:
                pass

        logger.info("scheduler_stopped", cycles=self._cycles)


async def main() -> None:
    """Entry point for the poller process."""
    settings = get_settings()
    setup_logging("scheduler", extra_context={"provider": settings.provider}, settings=settings)
    start_metrics_server(settings)

    provider = get_provider(settings.provider)
    transport = ProviderTransport(provider.name, settings)
    registry = MatchRegistry()
    ingest = IngestService(transport, provider, registry, LoggingPublisher(), settings)
    scheduler = SchedulerService(ingest, settings)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, scheduler.request_shutdown)

    await transport.start()
    logger.info("poller_started", interval_s=settings.poll_interval_s)

    try:
        await scheduler.run()
    finally:
        await transport.close()
        logger.info("poller_shutdown", tracked_matches=len(registry))


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
