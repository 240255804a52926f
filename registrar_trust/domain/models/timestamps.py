"""Timestamp helpers.

The registrar addresses historical state by unix seconds, while exports
carry RFC 3339 datetimes. Naive datetimes are treated as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime for the given value."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def unix_timestamp(value: datetime) -> int:
    """Return whole unix seconds for the given datetime."""
    return int(as_utc(value).timestamp())


def from_unix_timestamp(value: int) -> datetime:
    """Return an aware UTC datetime for the given unix seconds."""
    return datetime.fromtimestamp(value, tz=timezone.utc)
