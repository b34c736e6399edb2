"""
Match registry: the authoritative set of tracked matches for one poller.

The registry is created when the poller starts and passed explicitly to
whoever needs it. Entries are keyed by normalized match identifier and are
never removed; a match that drops out of the provider's live list is marked
ended and keeps its last state.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from shared.models.domain import MatchSummary, ReconcileResult, TrackedMatch
from shared.models.enums import MatchLifecycle
from shared.utils.logging import get_logger

from ingest.providers.base import normalize_match_id

logger = get_logger(__name__)


class MatchRegistry:
    """
    Owns every ``TrackedMatch``.

    Lifecycle per match::

        discovered -> live -> ended
                       ^        |
                       +--------+   (reappearing in a later list)

    ``reconcile`` only touches entries by key, so calling it back to back
    with the same summaries leaves the registry in the same state.
    """

    def __init__(self) -> None:
        self._matches: dict[str, TrackedMatch] = {}

    def __len__(self) -> int:
        return len(self._matches)

    def __contains__(self, match_id: object) -> bool:
        return normalize_match_id(match_id) in self._matches

    def __iter__(self) -> Iterator[TrackedMatch]:
        return iter(list(self._matches.values()))

    def get(self, match_id: object) -> Optional[TrackedMatch]:
        return self._matches.get(normalize_match_id(match_id))

    def snapshot(self) -> dict[str, MatchLifecycle]:
        """Lifecycle of every tracked match keyed by match id."""
        return {mid: m.lifecycle for mid, m in self._matches.items()}

    def reconcile(self, summaries: Iterable[MatchSummary]) -> ReconcileResult:
        """
        Reconcile the tracked set against the provider's current live list.

        Returns:
            ReconcileResult with newly discovered matches, matches that ended
            on this call, and every match present in ``summaries``.
        """
        current: dict[str, MatchSummary] = {}
        for summary in summaries:
            key = normalize_match_id(summary.match_id)
            if not key:
                logger.warning("match_summary_missing_id", team_a=summary.team_a, team_b=summary.team_b)
            if key != summary.match_id:
                summary = summary.model_copy(update={"match_id": key})
            # Duplicates within one list: last one wins
            current[key] = summary

        result = ReconcileResult()
        now = datetime.now(timezone.utc)

        for key, summary in current.items():
            tracked = self._matches.get(key)
            if tracked is None:
                tracked = TrackedMatch(meta=summary)
                self._matches[key] = tracked
                result.new_matches.append(tracked)
                logger.info("match_discovered", match_id=key, title=summary.title)
            elif tracked.ended:
                logger.info("match_resumed", match_id=key)
            tracked.meta = summary
            tracked.lifecycle = MatchLifecycle.LIVE
            tracked.updated_at = now
            result.live_matches.append(tracked)

        for key, tracked in self._matches.items():
            if key in current or tracked.ended:
                continue
            tracked.lifecycle = MatchLifecycle.ENDED
            tracked.meta = tracked.meta.model_copy(update={"status": "ended"})
            tracked.updated_at = now
            result.ended_matches.append(tracked)
            logger.info("match_ended", match_id=key, polls=tracked.polls)

        return result
