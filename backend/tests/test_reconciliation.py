"""
Unit tests for applying full delivery sequences to tracked matches.
"""
from __future__ import annotations

from ingest.tracking.reconciliation import HISTORY_WINDOW, apply_deliveries
from shared.models.domain import Delivery, MatchSummary, TrackedMatch


def _tracked() -> TrackedMatch:
    return TrackedMatch(meta=MatchSummary(match_id="1", team_a="X", team_b="Y"))


def _deliveries(runs: list[int], wicket_at: int | None = None) -> list[Delivery]:
    out: list[Delivery] = []
    score = 0
    for idx, r in enumerate(runs):
        score += r
        out.append(Delivery(
            over=idx // 6,
            ball=idx % 6 + 1,
            runs=r,
            wickets=1 if idx == wicket_at else 0,
            inning_score=score,
        ))
    return out


def test_empty_sequence_is_no_update() -> None:
    tracked = _tracked()
    apply_deliveries(tracked, _deliveries([1, 2, 3]))
    before = tracked.model_copy(deep=True)

    assert apply_deliveries(tracked, []) is None
    assert tracked == before


def test_empty_sequence_on_fresh_match() -> None:
    tracked = _tracked()
    assert apply_deliveries(tracked, []) is None
    assert tracked.recent_history == []
    assert tracked.last_known_deliveries == []
    assert tracked.polls == 0


def test_history_bounded_to_last_eight() -> None:
    runs = [0, 1, 2, 3, 4, 6, 0, 1, 2, 4, 1]
    tracked = _tracked()
    update = apply_deliveries(tracked, _deliveries(runs))

    assert len(tracked.recent_history) == HISTORY_WINDOW
    assert tracked.recent_history == runs[-8:]
    assert update.history == runs[-8:]


def test_short_sequence_history_is_whole_sequence() -> None:
    tracked = _tracked()
    apply_deliveries(tracked, _deliveries([4, 0, 1]))
    assert tracked.recent_history == [4, 0, 1]


def test_latest_is_last_delivery() -> None:
    tracked = _tracked()
    deliveries = _deliveries([1, 1, 4])
    update = apply_deliveries(tracked, deliveries)

    assert update.latest == deliveries[-1]
    assert tracked.latest == deliveries[-1]
    assert update.latest.inning_score == 6


def test_full_resend_replaces_last_known() -> None:
    tracked = _tracked()
    apply_deliveries(tracked, _deliveries([1, 2, 3, 4]))
    shorter = _deliveries([6, 6])
    update = apply_deliveries(tracked, shorter)

    assert tracked.last_known_deliveries == shorter
    assert tracked.recent_history == [6, 6]
    assert update.changed is True


def test_identical_resend_is_unchanged() -> None:
    tracked = _tracked()
    apply_deliveries(tracked, _deliveries([1, 0, 4]))
    update = apply_deliveries(tracked, _deliveries([1, 0, 4]))

    assert update is not None
    assert update.changed is False
    assert tracked.polls == 2


def test_wickets_lost_sums_sequence() -> None:
    tracked = _tracked()
    update = apply_deliveries(tracked, _deliveries([1, 0, 0, 2], wicket_at=2))
    assert update.wickets_lost == 1
