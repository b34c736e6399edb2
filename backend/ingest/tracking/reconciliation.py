"""
Per-match delivery reconciliation.

Providers resend the full innings sequence on every poll, so the newest
sequence is treated as authoritative; no ball-by-ball delta tracking is done.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from shared.models.domain import Delivery, DeliveryUpdate, TrackedMatch

HISTORY_WINDOW = 8


def apply_deliveries(
    tracked: TrackedMatch, deliveries: Sequence[Delivery]
) -> Optional[DeliveryUpdate]:
    """
    Apply a freshly normalized delivery sequence to a tracked match.

    Returns:
        DeliveryUpdate with the latest delivery and rebuilt history, or None
        when ``deliveries`` is empty (nothing new this tick, nothing mutated).
    """
    if not deliveries:
        return None

    sequence = list(deliveries)
    changed = sequence != tracked.last_known_deliveries
    history = [d.runs for d in sequence[-HISTORY_WINDOW:]]
    latest = sequence[-1]

    tracked.last_known_deliveries = sequence
    tracked.recent_history = history
    tracked.latest = latest
    tracked.polls += 1
    tracked.updated_at = datetime.now(timezone.utc)

    return DeliveryUpdate(
        latest=latest,
        history=list(history),
        changed=changed,
        wickets_lost=sum(d.wickets for d in sequence),
    )
