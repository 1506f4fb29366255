"""
Timezone-safe datetime utilities.

All timestamps are stored in UTC.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC datetime with timezone info attached."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Convert any datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_unix(dt: datetime) -> int:
    """Seconds since the epoch for a datetime (naive values are treated as UTC)."""
    return int(ensure_utc(dt).timestamp())


def one_year_window(now: Optional[datetime] = None) -> tuple[int, int]:
    """
    Return the (from, to) unix timestamps covering the past 365 days.

    Example:
        >>> start, end = one_year_window(datetime(2024, 6, 1, tzinfo=timezone.utc))
        >>> end - start
        31536000
    """
    end = ensure_utc(now) if now else utc_now()
    start = end - timedelta(days=365)
    return to_unix(start), to_unix(end)
