"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp for job bookkeeping."""
    return dt.datetime.now(dt.UTC)


def parse_github_datetime(value: str | None) -> dt.datetime | None:
    """Parse a GitHub ISO-8601 timestamp, returning ``None`` when absent.

    GitHub emits ``Z``-suffixed UTC timestamps; naive values are treated as
    UTC so ordering comparisons never mix aware and naive datetimes.
    """
    if not value:
        return None
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)
