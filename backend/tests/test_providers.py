"""
Unit tests for provider normalization: field mapping per variant, tolerant
parsing of partial records, and name-based dispatch.

Run: pytest backend/tests/test_providers.py -v
"""
from __future__ import annotations

import pytest

from ingest.providers.base import _safe_int, normalize_match_id
from ingest.providers.registry import (
    UnknownProviderError,
    get_provider,
    normalize_deliveries,
    normalize_match_list,
)
from shared.models.enums import ProviderName


# ── Helpers ─────────────────────────────────────────────────────────────

class TestSafeInt:

    def test_valid(self) -> None:
        assert _safe_int("3") == 3
        assert _safe_int(4.0) == 4
        assert _safe_int(" 12 ") == 12
        assert _safe_int("12.3") == 12

    def test_invalid_defaults_to_zero(self) -> None:
        assert _safe_int(None) == 0
        assert _safe_int("") == 0
        assert _safe_int("four") == 0
        assert _safe_int({"total": 4}) == 0
        assert _safe_int(float("nan")) == 0


class TestNormalizeMatchId:

    def test_int_and_string_agree(self) -> None:
        assert normalize_match_id(5) == normalize_match_id("5") == "5"

    def test_integral_float(self) -> None:
        assert normalize_match_id(5.0) == "5"

    def test_whitespace_and_leading_zeros(self) -> None:
        assert normalize_match_id(" 05 ") == "5"

    def test_non_numeric_kept(self) -> None:
        assert normalize_match_id("ipl-2024-12") == "ipl-2024-12"

    def test_missing(self) -> None:
        assert normalize_match_id(None) == ""


# ── Sportmonks ──────────────────────────────────────────────────────────

class TestSportmonks:

    def test_match_list(self) -> None:
        raw = {
            "data": [
                {
                    "id": 101,
                    "localteam": {"data": {"name": "India"}},
                    "visitorteam": {"data": {"name": "Australia"}},
                    "target": 181,
                    "status": "2nd Innings",
                },
                {"id": 102, "localteam_name": "Kent", "visitorteam_name": "Essex"},
            ]
        }
        matches = normalize_match_list(raw, "sportmonks")
        assert [m.match_id for m in matches] == ["101", "102"]
        assert matches[0].team_a == "India"
        assert matches[0].team_b == "Australia"
        assert matches[0].target_score == 181
        assert matches[0].status == "2nd Innings"
        assert matches[1].team_a == "Kent"
        assert matches[1].target_score is None
        assert matches[1].status == "live"

    def test_team_defaults(self) -> None:
        matches = normalize_match_list({"data": [{"id": 1}]}, "sportmonks")
        assert (matches[0].team_a, matches[0].team_b) == ("Team A", "Team B")

    def test_deliveries_runs_total_object(self) -> None:
        raw = {
            "data": [
                {"over": 3, "ball": 1, "runs": {"total": 4}, "wicket": 0, "team_score": 24},
                {"inningOver": 3, "inningBall": 2, "runs": 1, "wicket": 1, "inning_score": 25,
                 "batsman": "Kohli", "bowler": {"name": "Starc"}},
            ]
        }
        deliveries = normalize_deliveries(raw, ProviderName.SPORTMONKS)
        assert [d.runs for d in deliveries] == [4, 1]
        assert deliveries[1].over == 3
        assert deliveries[1].ball == 2
        assert deliveries[1].wickets == 1
        assert deliveries[1].inning_score == 25
        assert deliveries[1].batsman == "Kohli"
        assert deliveries[1].bowler == "Starc"

    def test_non_dict_payload(self) -> None:
        assert normalize_match_list([1, 2], "sportmonks") == []
        assert normalize_deliveries({"data": "oops"}, "sportmonks") == []


# ── CricketData ─────────────────────────────────────────────────────────

class TestCricketData:

    def test_match_list_name_spellings(self) -> None:
        raw = {
            "matches": [
                {"id": "a1", "teamA": {"name": "CSK"}, "teamB": {"name": "MI"}, "target": 200},
                {"match_id": 7, "team_a_name": "RR", "teamBName": "DC", "target_score": "150"},
            ]
        }
        matches = normalize_match_list(raw, "cricketdata")
        assert matches[0].match_id == "a1"
        assert matches[0].title == "CSK vs MI"
        assert matches[0].target_score == 200
        assert matches[1].match_id == "7"
        assert matches[1].title == "RR vs DC"
        assert matches[1].target_score == 150

    def test_missing_container(self) -> None:
        assert normalize_match_list({"data": []}, "cricketdata") == []
        assert normalize_match_list(None, "cricketdata") == []

    def test_deliveries(self) -> None:
        raw = {
            "deliveries": [
                {"overNumber": 0, "over": 0, "ballNumber": 1, "runs": 0, "score": 0},
                {"overNumber": 0, "ballNumber": 2, "runs": 6, "wicket": 0, "score": 6},
            ]
        }
        deliveries = normalize_deliveries(raw, "cricketdata")
        assert [(d.over, d.ball, d.runs, d.inning_score) for d in deliveries] == [
            (0, 1, 0, 0),
            (0, 2, 6, 6),
        ]


# ── Custom ──────────────────────────────────────────────────────────────

class TestCustom:

    def test_passthrough_shape(self) -> None:
        raw = [{"match_id": 9, "team_a": "X", "team_b": "Y", "target_score": 120}]
        matches = normalize_match_list(raw, "custom")
        assert matches[0].match_id == "9"
        assert matches[0].target_score == 120

    def test_not_an_array(self) -> None:
        assert normalize_match_list({"match_id": 9}, "custom") == []
        assert normalize_deliveries("garbage", "custom") == []

    def test_partial_records_kept_with_defaults(self) -> None:
        deliveries = normalize_deliveries([{"runs": 2}, {}, "skip-me", {"runs": -3}], "custom")
        assert len(deliveries) == 3
        assert deliveries[0].runs == 2
        assert (deliveries[1].over, deliveries[1].ball, deliveries[1].runs) == (0, 0, 0)
        assert deliveries[2].runs == 0

    def test_match_missing_id_still_included(self) -> None:
        matches = normalize_match_list([{"team_a": "X"}], "custom")
        assert len(matches) == 1
        assert matches[0].match_id == ""

    def test_zero_target_is_absent(self) -> None:
        matches = normalize_match_list([{"match_id": 1, "target_score": 0}], "custom")
        assert matches[0].target_score is None


# ── Dispatch ────────────────────────────────────────────────────────────

def test_get_provider_case_insensitive() -> None:
    assert get_provider("SportMonks").name == ProviderName.SPORTMONKS


def test_unknown_provider_raises() -> None:
    with pytest.raises(UnknownProviderError):
        normalize_match_list([], "espn")
