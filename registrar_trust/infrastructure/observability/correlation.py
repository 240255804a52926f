"""Correlation ID management for verification runs.

Each verification run (one CLI invocation, or one call from an embedding
service) gets a correlation id held in a contextvar, so every log entry
emitted by the recursive walk through approver sets can be tied back to
the run that caused it, across await points.

Usage:
    set_correlation_id(generate_correlation_id())
    await verifier.get_verified_domain(42, now)
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string when no run is active
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation ID (UUID4)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID, or an empty string if unset."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set.
    """
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the current correlation_id to each entry.

    Entries logged outside a run are left untouched.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict
