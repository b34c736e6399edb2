"""
Central configuration for the live cricket predictor.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings for the poller and its collaborators."""

    model_config = SettingsConfigDict(
        env_prefix="LC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    log_level: str = "INFO"
    instance_id: str = Field(default="", description="Process identifier bound to every log entry")

    # ── Provider ─────────────────────────────────────────────
    # Kept as a plain string: the provider registry owns the valid set and
    # reports unknown names as a configuration error.
    provider: str = Field(default="custom", description="sportmonks, cricketdata or custom")
    api_key: str = ""
    custom_matches_url: str = ""
    custom_deliveries_url: str = Field(
        default="",
        description="Per-match deliveries URL with a {match_id} placeholder; falls back to the matches URL",
    )
    provider_request_timeout_s: float = 10.0
    provider_max_attempts: int = Field(
        default=2,
        ge=1,
        description="Total tries per provider request, the first one included",
    )

    # ── Scheduler ────────────────────────────────────────────
    poll_interval_s: float = Field(default=10.0, gt=0)
    max_concurrent_polls: int = Field(default=8, ge=1)

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = True
    metrics_port: int = 9090

    @property
    def api_key_safe_log(self) -> str:
        """API key with everything but the last four characters redacted."""
        if not self.api_key:
            return ""
        return "***" + self.api_key[-4:]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
