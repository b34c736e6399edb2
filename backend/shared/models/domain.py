"""
Pydantic v2 domain models shared across the ingest, prediction and scheduler layers.
These are the canonical internal representations of provider data.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models.enums import MatchLifecycle


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# ── Provider-normalized records ─────────────────────────────────────────
class MatchSummary(DomainModel):
    """One live match as reported by a provider at a point in time."""
    match_id: str
    team_a: str = "Team A"
    team_b: str = "Team B"
    target_score: Optional[int] = None
    status: str = "live"

    @property
    def title(self) -> str:
        return f"{self.team_a} vs {self.team_b}"


class Delivery(DomainModel):
    """One ball of the current innings, after normalization."""
    over: int = 0
    ball: int = 0
    runs: int = 0
    wickets: int = 0
    inning_score: int = 0
    batsman: Optional[str] = None
    bowler: Optional[str] = None


# ── Registry state ──────────────────────────────────────────────────────
class TrackedMatch(DomainModel):
    """Registry entry for a match seen at least once. Never deleted."""
    meta: MatchSummary
    lifecycle: MatchLifecycle = MatchLifecycle.DISCOVERED
    recent_history: list[int] = Field(default_factory=list)
    last_known_deliveries: list[Delivery] = Field(default_factory=list)
    latest: Optional[Delivery] = None
    polls: int = 0
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def match_id(self) -> str:
        return self.meta.match_id

    @property
    def ended(self) -> bool:
        return self.lifecycle == MatchLifecycle.ENDED


class ReconcileResult(DomainModel):
    new_matches: list[TrackedMatch] = Field(default_factory=list)
    ended_matches: list[TrackedMatch] = Field(default_factory=list)
    live_matches: list[TrackedMatch] = Field(default_factory=list)


class DeliveryUpdate(DomainModel):
    """Outcome of applying a non-empty delivery sequence to a tracked match."""
    latest: Delivery
    history: list[int]
    changed: bool = True
    wickets_lost: int = 0


# ── Prediction ──────────────────────────────────────────────────────────
class PredictionResult(DomainModel):
    """Recomputed every poll. ``win_probability_percent`` is None when undetermined."""
    expected_next_runs: float
    win_probability_percent: Optional[int] = None

    @property
    def next_runs_display(self) -> str:
        return f"{self.expected_next_runs:g} runs"

    @property
    def win_probability_display(self) -> str:
        if self.win_probability_percent is None:
            return "N/A"
        return f"{self.win_probability_percent}%"


# ── Presentation payloads ───────────────────────────────────────────────
class MatchUpdate(DomainModel):
    """Everything the presentation layer needs to refresh one match card."""
    match_id: str
    meta: MatchSummary
    latest: Delivery
    history: list[int]
    prediction: PredictionResult
    changed: bool = True


class CycleReport(DomainModel):
    discovered: list[str] = Field(default_factory=list)
    ended: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    duration_s: float = 0.0
    created_at: datetime = Field(default_factory=_utcnow)
