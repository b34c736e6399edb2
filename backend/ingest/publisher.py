"""
Publisher contract between the poll cycle and the presentation layer.
"""
from __future__ import annotations

import abc

from shared.models.domain import MatchUpdate, TrackedMatch
from shared.models.enums import PublishEvent
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class UpdatePublisher(abc.ABC):
    """Receives per-match notifications once per poll cycle."""

    @abc.abstractmethod
    async def match_discovered(self, match: TrackedMatch) -> None:
        """A new match card should be created."""
        ...

    @abc.abstractmethod
    async def match_updated(self, update: MatchUpdate) -> None:
        """Score, history and predictions changed for a match card."""
        ...

    @abc.abstractmethod
    async def match_ended(self, match: TrackedMatch) -> None:
        """A match dropped out of the live list; its card stays visible."""
        ...


class LoggingPublisher(UpdatePublisher):
    """Emits every notification as a structured log record."""

    async def match_discovered(self, match: TrackedMatch) -> None:
        logger.info(
            PublishEvent.MATCH_DISCOVERED.value,
            match_id=match.match_id,
            title=match.meta.title,
            status=match.meta.status,
            target=match.meta.target_score,
        )

    async def match_updated(self, update: MatchUpdate) -> None:
        latest = update.latest
        logger.info(
            PublishEvent.MATCH_UPDATED.value,
            match_id=update.match_id,
            score=latest.inning_score,
            over=latest.over,
            ball=latest.ball,
            wickets=latest.wickets,
            history=update.history,
            next_runs=update.prediction.next_runs_display,
            win_probability=update.prediction.win_probability_display,
            changed=update.changed,
        )

    async def match_ended(self, match: TrackedMatch) -> None:
        logger.info(PublishEvent.MATCH_ENDED.value, match_id=match.match_id, title=match.meta.title)
