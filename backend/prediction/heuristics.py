"""
Deterministic live-match predictions.

Both metrics are simple bounded heuristics, not a validated model:

    next runs   = recency-window weighted mean of runs per ball
    win prob %  = 50 + 4 * wickets_in_hand - 0.5 * runs_required

Overs remaining are deliberately not part of the win-probability formula.
"""
from __future__ import annotations

import math
from typing import Sequence

from shared.models.domain import DeliveryUpdate, MatchSummary, PredictionResult

NEXT_RUNS_WINDOW = 6
NEXT_RUNS_DEFAULT = 1.0
NEXT_RUNS_DOT_THRESHOLD = 0.5
NEXT_RUNS_MAX = 6.0

WIN_PROB_BASE = 50.0
WIN_PROB_PER_WICKET = 4.0
WIN_PROB_PER_RUN = 0.5
WIN_PROB_MIN = 1
WIN_PROB_MAX = 99
WICKETS_PER_INNINGS = 10


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def predict_next_runs(history: Sequence[int]) -> float:
    """
    Expected runs off the next delivery.

    The last ``NEXT_RUNS_WINDOW`` balls are weighted by their distance from
    the end: the most recent ball has weight 1, the one before it weight 2,
    and so on. A raw mean under half a run is read as a run of dot balls and
    snaps to 0 before rounding.
    """
    if not history:
        return NEXT_RUNS_DEFAULT

    n = min(NEXT_RUNS_WINDOW, len(history))
    total = 0.0
    weight_sum = 0
    for i in range(n):
        weight = i + 1
        total += history[-1 - i] * weight
        weight_sum += weight

    avg = total / weight_sum
    if avg < NEXT_RUNS_DOT_THRESHOLD:
        avg = 0.0
    avg = _round_half_up(avg, 1)
    return max(0.0, min(NEXT_RUNS_MAX, avg))


def predict_win_probability(current_score: int, wickets_lost: int, target: int) -> int:
    """Chasing side's win probability in percent, clamped to [1, 99]."""
    remaining_runs = max(0, target - current_score)
    remaining_wickets = max(0, WICKETS_PER_INNINGS - wickets_lost)
    prob = WIN_PROB_BASE + remaining_wickets * WIN_PROB_PER_WICKET - remaining_runs * WIN_PROB_PER_RUN
    prob = int(_round_half_up(prob))
    return max(WIN_PROB_MIN, min(WIN_PROB_MAX, prob))


def predict(meta: MatchSummary, update: DeliveryUpdate) -> PredictionResult:
    """Both metrics for one match; win probability stays undetermined without a target."""
    win_prob = None
    if meta.target_score is not None:
        win_prob = predict_win_probability(
            update.latest.inning_score, update.wickets_lost, meta.target_score
        )
    return PredictionResult(
        expected_next_runs=predict_next_runs(update.history),
        win_probability_percent=win_prob,
    )
