"""
Abstract base class for all cricket data providers.
Defines the normalization contract every provider variant must implement.

Providers are pure: they receive already-deserialized JSON and return
canonical records. They never fetch, and they never raise on payload shape.
"""
from __future__ import annotations

import abc
import math
import re
from typing import Any, Iterable, Optional, Union

from shared.models.domain import Delivery, MatchSummary
from shared.models.enums import ProviderName
from shared.utils.logging import get_logger

logger = get_logger(__name__)

FieldPath = Union[str, tuple[str, ...]]

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


# ── Tolerant field helpers ──────────────────────────────────────────────

def _dig(record: Any, path: FieldPath) -> Any:
    """Follow a key path through nested dicts. Returns None on any miss."""
    keys = (path,) if isinstance(path, str) else path
    current = record
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _first(record: Any, *paths: FieldPath) -> Any:
    """Return the first value that is present and non-empty along ``paths``."""
    for path in paths:
        value = _dig(record, path)
        if value is None or value == "":
            continue
        return value
    return None


def _safe_int(val: Any, default: int = 0) -> int:
    """Coerce ints, floats and numeric strings; anything else is ``default``."""
    if val is None or isinstance(val, (dict, list)):
        return default
    try:
        if isinstance(val, str):
            val = val.strip()
            if _INTEGER_RE.match(val):
                return int(val)
            val = float(val)
        if isinstance(val, float) and not math.isfinite(val):
            return default
        return int(val)
    except (ValueError, TypeError, OverflowError):
        return default


def _optional_target(val: Any) -> Optional[int]:
    """Targets of zero or below carry no run-chase information."""
    target = _safe_int(val)
    return target if target > 0 else None


def _display_name(val: Any) -> Optional[str]:
    if val is None or val == "":
        return None
    if isinstance(val, dict):
        name = _first(val, "name", "fullname", "fullName")
        return str(name) if name is not None else None
    return str(val)


def normalize_match_id(val: Any) -> str:
    """
    Canonical string form of a provider match identifier.

    ``5``, ``5.0``, ``"5"`` and ``" 05 "`` all map to ``"5"`` so that a provider
    flipping between numeric and string identifiers keeps hitting the same entry.
    """
    if val is None:
        return ""
    if isinstance(val, bool):
        return str(int(val))
    if isinstance(val, int):
        return str(val)
    if isinstance(val, float):
        if math.isfinite(val) and val.is_integer():
            return str(int(val))
        return str(val)
    text = str(val).strip()
    if _INTEGER_RE.match(text):
        return str(int(text))
    return text


def _as_records(container: Any) -> list[Any]:
    return container if isinstance(container, list) else []


# ── Provider contract ───────────────────────────────────────────────────

class BaseProvider(abc.ABC):
    """
    Abstract base class for provider variants.

    Subclasses supply where the records live in a payload and how one record
    maps onto the canonical shape. The base class handles shape tolerance.
    """

    name: ProviderName

    def normalize_match_list(self, raw: Any) -> list[MatchSummary]:
        """Transform a raw "live matches" payload into match summaries."""
        return [
            self._parse_match(record)
            for record in self._objects(self._match_records(raw), "match")
        ]

    def normalize_deliveries(self, raw: Any) -> list[Delivery]:
        """Transform a raw "deliveries for match" payload, preserving order."""
        return [
            self._parse_delivery(record)
            for record in self._objects(self._delivery_records(raw), "delivery")
        ]

    def _objects(self, records: list[Any], kind: str) -> Iterable[dict[str, Any]]:
        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                logger.debug(
                    "provider_record_skipped",
                    provider=self.name.value,
                    kind=kind,
                    index=idx,
                    record_type=type(record).__name__,
                )
                continue
            yield record

    # ── Abstract methods (each provider implements these) ───────────────
    @abc.abstractmethod
    def _match_records(self, raw: Any) -> list[Any]:
        """Locate the list of match records in a raw payload."""
        ...

    @abc.abstractmethod
    def _parse_match(self, record: dict[str, Any]) -> MatchSummary:
        """Provider-specific field mapping for one match record."""
        ...

    @abc.abstractmethod
    def _delivery_records(self, raw: Any) -> list[Any]:
        """Locate the list of delivery records in a raw payload."""
        ...

    @abc.abstractmethod
    def _parse_delivery(self, record: dict[str, Any]) -> Delivery:
        """Provider-specific field mapping for one delivery record."""
        ...
