"""
Custom endpoint provider variant.
The endpoint is expected to serve canonical records as a bare top-level array.
"""
from __future__ import annotations

from typing import Any

from shared.models.domain import Delivery, MatchSummary
from shared.models.enums import ProviderName

from ingest.providers.base import (
    BaseProvider,
    _as_records,
    _display_name,
    _first,
    _optional_target,
    _safe_int,
    normalize_match_id,
)


class CustomProvider(BaseProvider):
    name = ProviderName.CUSTOM

    def _match_records(self, raw: Any) -> list[Any]:
        return _as_records(raw)

    def _parse_match(self, record: dict[str, Any]) -> MatchSummary:
        team_a = _first(record, "team_a")
        team_b = _first(record, "team_b")
        return MatchSummary(
            match_id=normalize_match_id(record.get("match_id")),
            team_a=str(team_a) if team_a is not None else "Team A",
            team_b=str(team_b) if team_b is not None else "Team B",
            target_score=_optional_target(_first(record, "target_score", "target")),
            status=str(_first(record, "status") or "live"),
        )

    def _delivery_records(self, raw: Any) -> list[Any]:
        return _as_records(raw)

    def _parse_delivery(self, record: dict[str, Any]) -> Delivery:
        return Delivery(
            over=_safe_int(record.get("over")),
            ball=_safe_int(record.get("ball")),
            runs=max(0, _safe_int(record.get("runs"))),
            wickets=max(0, _safe_int(record.get("wickets"))),
            inning_score=max(0, _safe_int(record.get("inning_score"))),
            batsman=_display_name(record.get("batsman")),
            bowler=_display_name(record.get("bowler")),
        )
