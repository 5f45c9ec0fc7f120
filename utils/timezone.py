"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are taken to already be UTC; the backend's timestamps
    always carry an offset, so a naive value can only come from local code.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse an ISO 8601 / RFC 3339 timestamp (e.g. '2024-01-01T12:00:00Z') to UTC.

    Raises ValueError on malformed input.
    """
    if iso_string.endswith(("Z", "z")):
        iso_string = iso_string[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(iso_string))


def is_past(dt: datetime, now: datetime | None = None) -> bool:
    """True iff dt is strictly earlier than now (defaults to the current time)."""
    return to_utc(dt) < to_utc(now or now_utc())
