"""Structured logging configuration with structlog.

Production output is one JSON object per line, for log aggregation.
Development output is a colored console rendering. The level comes from
the LOG_LEVEL environment variable.

Log entry format (production):
    {
        "timestamp": "2024-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "approver_set_not_verified",
        "correlation_id": "uuid",
        "approver_set_id": 4,
        ...additional context
    }

Verification logs go to stderr so that the CLI's JSON report on stdout
stays machine readable.
"""

import logging
import os
import sys
from typing import cast

import structlog
from structlog.typing import Processor

from registrar_trust.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level(default: str = DEFAULT_LOG_LEVEL) -> int:
    """Get the configured log level from environment.

    Returns:
        The logging level integer (e.g., logging.INFO).
    """
    level_name = os.getenv(LOG_LEVEL_ENV, default).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(
    environment: str = "production",
    default_level: str = DEFAULT_LOG_LEVEL,
) -> None:
    """Configure structlog for the process.

    Should be called once at startup.

    Args:
        environment: 'production' for JSON output, 'development' for console.
        default_level: Level used when LOG_LEVEL is not set.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level(default_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
