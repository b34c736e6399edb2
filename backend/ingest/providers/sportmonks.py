"""
Sportmonks provider variant.
Match lists and deliveries both arrive wrapped in a top-level ``data`` array.
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


class SportmonksProvider(BaseProvider):
    """Sportmonks cricket API field mapping."""

    name = ProviderName.SPORTMONKS

    def _match_records(self, raw: Any) -> list[Any]:
        return _as_records(_dig(raw, "data"))

    def _parse_match(self, record: dict[str, Any]) -> MatchSummary:
        team_a = _first(record, ("localteam", "data", "name"), "localteam_name")
        team_b = _first(record, ("visitorteam", "data", "name"), "visitorteam_name")
        return MatchSummary(
            match_id=normalize_match_id(record.get("id")),
            team_a=str(team_a) if team_a is not None else "Team A",
            team_b=str(team_b) if team_b is not None else "Team B",
            target_score=_optional_target(record.get("target")),
            status=str(_first(record, "status") or "live"),
        )

    def _delivery_records(self, raw: Any) -> list[Any]:
        return _as_records(_dig(raw, "data"))

    def _parse_delivery(self, record: dict[str, Any]) -> Delivery:
        # runs is either a plain number or an object carrying a total
        return Delivery(
            over=_safe_int(_first(record, "over", "inningOver")),
            ball=_safe_int(_first(record, "ball", "inningBall")),
            runs=max(0, _safe_int(_first(record, ("runs", "total"), "runs"))),
            wickets=max(0, _safe_int(record.get("wicket"))),
            inning_score=max(0, _safe_int(_first(record, "team_score", "inning_score"))),
            batsman=_display_name(record.get("batsman")),
            bowler=_display_name(record.get("bowler")),
        )
