"""Domain enumerations for the live cricket predictor."""
from __future__ import annotations

from enum import Enum


class ProviderName(str, Enum):
    SPORTMONKS = "sportmonks"
    CRICKETDATA = "cricketdata"
    CUSTOM = "custom"


class MatchLifecycle(str, Enum):
    """Per-match tracking state. Ended matches may become live again."""
    DISCOVERED = "discovered"
    LIVE = "live"
    ENDED = "ended"


class PublishEvent(str, Enum):
    MATCH_DISCOVERED = "match_discovered"
    MATCH_UPDATED = "match_updated"
    MATCH_ENDED = "match_ended"
