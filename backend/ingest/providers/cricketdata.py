"""
CricketData.org provider variant.
Match lists live under ``matches``; deliveries under ``deliveries``.
"""
from __future__ import annotations

from typing import Any

from shared.models.domain import Delivery, MatchSummary
from shared.models.enums import ProviderName

from ingest.providers.base import (
    BaseProvider,
    _as_records,
    _dig,
    _display_name,
    _first,
    _optional_target,
    _safe_int,
    normalize_match_id,
)


class CricketDataProvider(BaseProvider):
    """CricketData.org field mapping. Team names appear in three spellings."""

    name = ProviderName.CRICKETDATA

    def _match_records(self, raw: Any) -> list[Any]:
        return _as_records(_dig(raw, "matches"))

    def _parse_match(self, record: dict[str, Any]) -> MatchSummary:
        team_a = _first(record, ("teamA", "name"), "team_a_name", "teamAName")
        team_b = _first(record, ("teamB", "name"), "team_b_name", "teamBName")
        return MatchSummary(
            match_id=normalize_match_id(_first(record, "id", "match_id")),
            team_a=str(team_a) if team_a is not None else "Team A",
            team_b=str(team_b) if team_b is not None else "Team B",
            target_score=_optional_target(_first(record, "target", "target_score")),
            status=str(_first(record, "status") or "live"),
        )

    def _delivery_records(self, raw: Any) -> list[Any]:
        return _as_records(_dig(raw, "deliveries"))

    def _parse_delivery(self, record: dict[str, Any]) -> Delivery:
        return Delivery(
            over=_safe_int(_first(record, "overNumber", "over")),
            ball=_safe_int(_first(record, "ballNumber", "ball")),
            runs=max(0, _safe_int(record.get("runs"))),
            wickets=max(0, _safe_int(record.get("wicket"))),
            inning_score=max(0, _safe_int(record.get("score"))),
            batsman=_display_name(record.get("batsman")),
            bowler=_display_name(record.get("bowler")),
        )
