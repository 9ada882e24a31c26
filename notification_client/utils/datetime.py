"""Helpers for working with notification timestamps."""

from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how the store and the
    checkpoint both serialize their timestamps.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Returns ``None`` for empty or unparseable input instead of raising, so a
    single malformed record cannot break a whole poll cycle.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(parsed)


def to_iso(value: datetime | None) -> str | None:
    """Serialize ``value`` to an ISO string in UTC."""

    normalized = ensure_utc(value)
    if normalized is None:
        return None
    return normalized.isoformat()
