"""Shared utilities for the trends API."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the precision stored in the tables)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T09:30:00.000Z."""
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
