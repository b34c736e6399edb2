"""
Provider registry: the closed set of provider variants and name-based dispatch.

Adding a provider means adding one ``BaseProvider`` subclass and one entry
in ``_PROVIDERS``; nothing else branches on provider identity.
"""
from __future__ import annotations

from typing import Any, Union

from shared.models.domain import Delivery, MatchSummary
from shared.models.enums import ProviderName

from ingest.providers.base import BaseProvider
from ingest.providers.cricketdata import CricketDataProvider
from ingest.providers.custom import CustomProvider
from ingest.providers.sportmonks import SportmonksProvider


class ProviderConfigError(Exception):
    """A setup mistake (bad provider, missing key or URL). Never degraded silently."""


class UnknownProviderError(ProviderConfigError):
    def __init__(self, provider_id: Any) -> None:
        self.provider_id = provider_id
        known = ", ".join(p.value for p in ProviderName)
        super().__init__(f"Unknown provider {provider_id!r}; expected one of: {known}")


_PROVIDERS: dict[ProviderName, BaseProvider] = {
    ProviderName.SPORTMONKS: SportmonksProvider(),
    ProviderName.CRICKETDATA: CricketDataProvider(),
    ProviderName.CUSTOM: CustomProvider(),
}


def resolve_provider_name(provider_id: Union[str, ProviderName]) -> ProviderName:
    """Parse a configured provider identifier, case-insensitively."""
    if isinstance(provider_id, ProviderName):
        return provider_id
    try:
        return ProviderName(str(provider_id).strip().lower())
    except ValueError:
        raise UnknownProviderError(provider_id) from None


def get_provider(provider_id: Union[str, ProviderName]) -> BaseProvider:
    """
    Look up the provider variant for an identifier.

    Raises:
        UnknownProviderError: If the identifier names no known provider.
    """
    return _PROVIDERS[resolve_provider_name(provider_id)]


def normalize_match_list(raw: Any, provider_id: Union[str, ProviderName]) -> list[MatchSummary]:
    return get_provider(provider_id).normalize_match_list(raw)


def normalize_deliveries(raw: Any, provider_id: Union[str, ProviderName]) -> list[Delivery]:
    return get_provider(provider_id).normalize_deliveries(raw)
