"""Shared model helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def normalise_timestamp(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime with millisecond precision.

    BSON datetimes only carry milliseconds and MongoDB hands back naive UTC
    values unless the client is tz-aware.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def utcnow() -> datetime:
    """Return the current time as a store-compatible UTC timestamp."""

    return normalise_timestamp(datetime.now(timezone.utc))


__all__ = ["normalise_timestamp", "utcnow"]
