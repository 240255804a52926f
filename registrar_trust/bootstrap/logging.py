"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from registrar_trust.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)


def configure_structlog(environment: str, verbose: bool = False) -> None:
    """Configure structlog for the given environment.

    Verbose runs log at DEBUG unless LOG_LEVEL says otherwise.
    """
    _configure_structlog(
        environment=environment,
        default_level="DEBUG" if verbose else "WARNING",
    )


__all__ = ["configure_structlog"]
