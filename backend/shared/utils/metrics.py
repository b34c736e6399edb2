"""
Lightweight metrics collection for the live cricket predictor.
Wraps prometheus_client; every collector is module-level and process-wide.
"""
from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from shared.config import Settings, get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
PROVIDER_REQUESTS = Counter(
    "lc_provider_requests_total",
    "Total provider HTTP requests",
    ["provider", "endpoint", "status"],
)
POLL_CYCLES = Counter(
    "lc_poll_cycles_total",
    "Completed poll cycles by outcome",
    ["outcome"],
)
MATCH_FAILURES = Counter(
    "lc_match_failures_total",
    "Per-match fetch/parse failures isolated inside a poll cycle",
    ["provider"],
)
MATCH_UPDATES = Counter(
    "lc_match_updates_total",
    "Match updates handed to the publisher",
    ["provider"],
)

# ── Histograms ──────────────────────────────────────────────────────────
PROVIDER_LATENCY = Histogram(
    "lc_provider_latency_seconds",
    "Provider request latency in seconds",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)
CYCLE_DURATION = Histogram(
    "lc_cycle_duration_seconds",
    "Wall time of one full poll cycle",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# ── Gauges ──────────────────────────────────────────────────────────────
TRACKED_MATCHES = Gauge(
    "lc_tracked_matches",
    "Matches held by the registry, ended ones included",
)
LIVE_MATCHES = Gauge(
    "lc_live_matches",
    "Matches polled for deliveries in the last cycle",
)


def start_metrics_server(settings: Settings | None = None, port: int | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = settings or get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
