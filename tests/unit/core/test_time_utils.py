"""
Unit tests for UTC helpers.
"""
from datetime import datetime, timedelta, timezone

from dashboard.core.time_utils import ensure_utc, one_year_window, to_unix, utc_now


def test_utc_now_is_aware():
    assert utc_now().tzinfo == timezone.utc


def test_ensure_utc_naive_is_assumed_utc():
    assert ensure_utc(datetime(2024, 1, 1, 12, 0)) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_ensure_utc_converts_offsets():
    local = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(local).hour == 10


def test_to_unix():
    assert to_unix(datetime(1970, 1, 2, tzinfo=timezone.utc)) == 86400


def test_one_year_window():
    now = datetime(2024, 6, 1, tzinfo=timezone.utc)
    start, end = one_year_window(now)
    assert end == to_unix(now)
    assert end - start == 365 * 24 * 60 * 60
