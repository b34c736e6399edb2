"""
Ingest service: one full poll cycle.

    fetch match list -> normalize -> reconcile registry
        -> per live match: fetch deliveries -> normalize -> apply -> predict -> publish

Failures are isolated per match; only configuration errors escape a cycle.
"""
from __future__ import annotations

import asyncio
import time
from typing import Literal

from shared.config import Settings, get_settings
from shared.models.domain import CycleReport, MatchUpdate, TrackedMatch
from shared.utils.logging import get_logger
from shared.utils.metrics import (
    CYCLE_DURATION,
    LIVE_MATCHES,
    MATCH_FAILURES,
    MATCH_UPDATES,
    POLL_CYCLES,
    TRACKED_MATCHES,
)

from ingest.providers.base import BaseProvider
from ingest.providers.registry import ProviderConfigError
from ingest.publisher import UpdatePublisher
from ingest.tracking.reconciliation import apply_deliveries
from ingest.tracking.registry import MatchRegistry
from ingest.transport import ProviderTransport
from prediction.heuristics import predict

logger = get_logger(__name__)

PollOutcome = Literal["updated", "unchanged", "failed"]


class IngestService:
    """
    Runs poll cycles against one provider.

    The registry is injected so its lifetime is owned by whoever starts the
    poller; the service itself keeps no match state.
    """

    def __init__(
        self,
        transport: ProviderTransport,
        provider: BaseProvider,
        registry: MatchRegistry,
        publisher: UpdatePublisher,
        settings: Settings | None = None,
    ) -> None:
        self._transport = transport
        self._provider = provider
        self._registry = registry
        self._publisher = publisher
        self._settings = settings or get_settings()
        self._semaphore = asyncio.Semaphore(self._settings.max_concurrent_polls)

    async def run_cycle(self) -> CycleReport:
        """
        Execute one poll cycle to completion.

        Raises:
            ProviderConfigError: On setup mistakes; everything else is logged.
        """
        start = time.perf_counter()
        report = CycleReport()

        try:
            raw_matches = await self._transport.fetch_matches()
        except ProviderConfigError:
            raise
        except Exception as exc:
            # Registry untouched: a failed list fetch must not end every match
            logger.error(
                "match_list_fetch_failed",
                provider=self._provider.name.value,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            POLL_CYCLES.labels(outcome="list_failed").inc()
            report.duration_s = time.perf_counter() - start
            return report

        summaries = self._provider.normalize_match_list(raw_matches)
        result = self._registry.reconcile(summaries)

        for match in result.new_matches:
            report.discovered.append(match.match_id)
            await self._publisher.match_discovered(match)
        for match in result.ended_matches:
            report.ended.append(match.match_id)
            await self._publisher.match_ended(match)

        outcomes = await asyncio.gather(
            *(self._poll_match(match) for match in result.live_matches)
        )
        for match, outcome in zip(result.live_matches, outcomes):
            getattr(report, outcome).append(match.match_id)

        TRACKED_MATCHES.set(len(self._registry))
        LIVE_MATCHES.set(len(result.live_matches))
        report.duration_s = time.perf_counter() - start
        CYCLE_DURATION.observe(report.duration_s)
        POLL_CYCLES.labels(outcome="failed_matches" if report.failed else "ok").inc()

        logger.info(
            "poll_cycle_complete",
            provider=self._provider.name.value,
            live=len(result.live_matches),
            discovered=len(report.discovered),
            ended=len(report.ended),
            updated=len(report.updated),
            failed=len(report.failed),
            duration_ms=round(report.duration_s * 1000, 2),
        )
        return report

    async def _poll_match(self, match: TrackedMatch) -> PollOutcome:
        async with self._semaphore:
            try:
                return await self._process_match(match)
            except Exception as exc:
                # Stale data stays on the card until the next successful poll
                MATCH_FAILURES.labels(provider=self._provider.name.value).inc()
                logger.error(
                    "match_poll_failed",
                    match_id=match.match_id,
                    provider=self._provider.name.value,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                return "failed"

    async def _process_match(self, match: TrackedMatch) -> PollOutcome:
        raw = await self._transport.fetch_deliveries(match.match_id)
        deliveries = self._provider.normalize_deliveries(raw)

        update = apply_deliveries(match, deliveries)
        if update is None:
            logger.debug("no_deliveries", match_id=match.match_id)
            return "unchanged"

        prediction = predict(match.meta, update)
        await self._publisher.match_updated(
            MatchUpdate(
                match_id=match.match_id,
                meta=match.meta,
                latest=update.latest,
                history=update.history,
                prediction=prediction,
                changed=update.changed,
            )
        )
        MATCH_UPDATES.labels(provider=self._provider.name.value).inc()
        return "updated" if update.changed else "unchanged"
