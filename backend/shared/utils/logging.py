"""
Structured logging for the live cricket predictor.
Uses structlog for context-rich, machine-parseable logs.

Every entry carries ``service`` and ``instance_id``; the poller also binds
``provider`` so multi-feed deployments can be told apart in one stream.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from shared.config import Environment, Settings, get_settings

_QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def _renderer(settings: Settings) -> structlog.types.Processor:
    if settings.environment == Environment.DEV:
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    return structlog.processors.JSONRenderer()


def setup_logging(
    service_name: str,
    extra_context: dict[str, Any] | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Route structlog and stdlib logging through one stdout handler.

    Args:
        service_name: Process identifier bound as ``service``.
        extra_context: Static fields bound to every entry (e.g. ``provider``).
        settings: Explicit settings; defaults to the cached environment settings.
    """
    settings = settings or get_settings()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.environment != Environment.DEV:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=service_name,
        instance_id=settings.instance_id,
        **(extra_context or {}),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
