"""
Provider transport: builds the HTTP requests for each provider and returns
deserialized JSON. Holds no parsing or state logic.
"""
from __future__ import annotations

from typing import Any, Optional

from shared.config import Settings, get_settings
from shared.models.enums import ProviderName
from shared.utils.http_client import ProviderHTTPClient
from shared.utils.logging import get_logger

from ingest.providers.registry import ProviderConfigError, resolve_provider_name

logger = get_logger(__name__)

MATCH_ID_PLACEHOLDER = "{match_id}"

_BASE_URLS: dict[ProviderName, str] = {
    ProviderName.SPORTMONKS: "https://api.sportmonks.com/v2.0",
    ProviderName.CRICKETDATA: "https://api.cricketdata.org/v1",
    ProviderName.CUSTOM: "",
}


class ProviderTransport:
    """
    Fetches the live match list and per-match deliveries for one provider.

    Configuration problems are raised at construction time as
    ``ProviderConfigError`` rather than on the first poll.
    """

    def __init__(
        self,
        provider: ProviderName | str,
        settings: Settings | None = None,
        http: ProviderHTTPClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._provider = resolve_provider_name(provider)
        self._api_key = self._settings.api_key.strip()
        self._matches_url = self._settings.custom_matches_url.strip()
        self._deliveries_url = self._settings.custom_deliveries_url.strip() or self._matches_url
        self._validate()
        self._http = http or ProviderHTTPClient(
            provider_name=self._provider.value,
            base_url=_BASE_URLS[self._provider],
            headers=self._auth_headers(),
            timeout_s=self._settings.provider_request_timeout_s,
            max_attempts=self._settings.provider_max_attempts,
        )

    def _validate(self) -> None:
        if self._provider == ProviderName.CUSTOM:
            if not self._matches_url:
                raise ProviderConfigError("Custom provider requires LC_CUSTOM_MATCHES_URL")
        elif not self._api_key:
            raise ProviderConfigError(f"Provider {self._provider.value} requires LC_API_KEY")

    def _auth_headers(self) -> dict[str, str]:
        if self._provider == ProviderName.CRICKETDATA:
            return {"Authorization": f"Bearer {self._api_key}"}
        return {}

    async def start(self) -> None:
        if self._http.started:
            return
        await self._http.start()
        logger.info(
            "transport_started",
            provider=self._provider.value,
            api_key=self._settings.api_key_safe_log,
        )

    async def close(self) -> None:
        await self._http.close()

    # ── Requests ────────────────────────────────────────────────────────

    def matches_request(self) -> tuple[str, Optional[dict[str, Any]]]:
        """Path (or absolute URL) and query params for the live match list."""
        if self._provider == ProviderName.SPORTMONKS:
            return "/cricket/matches", {"filter[status]": "live", "api_token": self._api_key}
        if self._provider == ProviderName.CRICKETDATA:
            return "/matches", {"status": "live", "apikey": self._api_key}
        return self._matches_url, None

    def deliveries_request(self, match_id: str) -> tuple[str, Optional[dict[str, Any]]]:
        """Path (or absolute URL) and query params for one match's deliveries."""
        if self._provider == ProviderName.SPORTMONKS:
            return f"/cricket/matches/{match_id}/deliveries", {"api_token": self._api_key}
        if self._provider == ProviderName.CRICKETDATA:
            return f"/match/{match_id}/deliveries", None
        return self._deliveries_url.replace(MATCH_ID_PLACEHOLDER, match_id), None

    async def fetch_matches(self) -> Any:
        path, params = self.matches_request()
        return await self._http.get_json(path, params=params, endpoint="matches")

    async def fetch_deliveries(self, match_id: str) -> Any:
        path, params = self.deliveries_request(match_id)
        return await self._http.get_json(path, params=params, endpoint="deliveries")
