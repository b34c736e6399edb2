"""
Async HTTP client wrapper for provider requests.
Includes retry logic, timeout management, and metrics collection.
"""
from __future__ import annotations

import asyncio
import math
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

import httpx

from shared.config import get_settings
from shared.utils.logging import get_logger
from shared.utils.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS

logger = get_logger(__name__)

DEFAULT_RETRY_AFTER_S = 2.0
MAX_RETRY_AFTER_S = 10.0


def retry_after_seconds(value: str | None) -> float:
    """
    Seconds to wait before retrying a 429, capped at MAX_RETRY_AFTER_S.

    ``Retry-After`` is either delay-seconds or an HTTP date. Anything
    unparseable falls back to DEFAULT_RETRY_AFTER_S.
    """
    if not value:
        return DEFAULT_RETRY_AFTER_S
    try:
        delay = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return DEFAULT_RETRY_AFTER_S
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        delay = (when - datetime.now(timezone.utc)).total_seconds()
    if not math.isfinite(delay):
        return DEFAULT_RETRY_AFTER_S
    return min(max(delay, 0.0), MAX_RETRY_AFTER_S)


class ProviderHTTPClient:
    """
    Async HTTP client tailored for cricket data provider APIs.
    Handles timeouts, retries, and records metrics per request.
    """

    def __init__(
        self,
        provider_name: str,
        base_url: str = "",
        headers: dict[str, str] | None = None,
        timeout_s: float | None = None,
        max_attempts: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._provider = provider_name
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_s or settings.provider_request_timeout_s
        self._max_attempts = max_attempts
        self._default_headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def started(self) -> bool:
        return self._client is not None

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._default_headers,
            timeout=httpx.Timeout(self._timeout, connect=5.0),
            follow_redirects=True,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        extra_headers: dict[str, str] | None = None,
        endpoint: str = "unknown",
    ) -> Any:
        """GET ``path`` and return the deserialized JSON body."""
        resp = await self.get(path, params=params, extra_headers=extra_headers, endpoint=endpoint)
        return resp.json()

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        extra_headers: dict[str, str] | None = None,
        endpoint: str = "unknown",
    ) -> httpx.Response:
        """
        Perform a GET request with retry, metrics, and structured logging.

        Args:
            path: API path relative to base_url, or an absolute URL.
            params: Query parameters.
            extra_headers: Request-specific headers.
            endpoint: Endpoint label for metrics (matches, deliveries).

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPStatusError: On non-retryable HTTP errors.
            httpx.TimeoutException: If all retries are exhausted.
        """
        if not self._client:
            raise RuntimeError("ProviderHTTPClient not started. Call start() first.")

        last_exc: Optional[Exception] = None
        merged_headers = {**self._default_headers}
        if extra_headers:
            merged_headers.update(extra_headers)

        for attempt in range(1, self._max_attempts + 1):
            start_time = time.perf_counter()
            status = "unknown"

            try:
                resp = await self._client.get(path, params=params, headers=merged_headers)
                status = str(resp.status_code)

                if resp.status_code == 429:
                    logger.warning(
                        "provider_rate_limited",
                        provider=self._provider,
                        path=path,
                        attempt=attempt,
                    )
                    if attempt < self._max_attempts:
                        await asyncio.sleep(retry_after_seconds(resp.headers.get("Retry-After")))
                        continue
                    resp.raise_for_status()

                if resp.status_code >= 500 and attempt < self._max_attempts:
                    logger.warning(
                        "provider_server_error",
                        provider=self._provider,
                        path=path,
                        status=resp.status_code,
                        attempt=attempt,
                    )
                    await asyncio.sleep(1.0 * attempt)
                    continue

                resp.raise_for_status()

                logger.debug(
                    "provider_request_success",
                    provider=self._provider,
                    path=path,
                    status=resp.status_code,
                    latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                return resp

            except httpx.TimeoutException as exc:
                status = "timeout"
                last_exc = exc
                logger.warning(
                    "provider_timeout",
                    provider=self._provider,
                    path=path,
                    attempt=attempt,
                )
                if attempt < self._max_attempts:
                    await asyncio.sleep(1.0 * attempt)
                    continue

            except httpx.HTTPStatusError as exc:
                status = str(exc.response.status_code)
                last_exc = exc
                logger.error(
                    "provider_http_error",
                    provider=self._provider,
                    path=path,
                    status=exc.response.status_code,
                    attempt=attempt,
                )
                # Don't retry client errors (4xx except 429)
                if 400 <= exc.response.status_code < 500 and exc.response.status_code != 429:
                    raise

            except httpx.HTTPError as exc:
                status = "error"
                last_exc = exc
                logger.error(
                    "provider_request_error",
                    provider=self._provider,
                    path=path,
                    error=str(exc),
                    attempt=attempt,
                )

            finally:
                PROVIDER_REQUESTS.labels(
                    provider=self._provider, endpoint=endpoint, status=status
                ).inc()
                PROVIDER_LATENCY.labels(provider=self._provider).observe(
                    time.perf_counter() - start_time
                )

        # All retries exhausted
        if last_exc:
            raise last_exc
        raise RuntimeError(f"Provider request failed after {self._max_attempts} attempts")
