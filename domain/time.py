"""
Domain time utilities (pure).

Centralized timestamp validation plus the conversion from a UTC instant to the
calendar date that decides which month a coupon belongs to.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that timestamps crossing the domain boundary are UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_date(value: datetime, tz: ZoneInfo) -> date:
    """Calendar date of a UTC instant as observed in `tz`."""

    require_utc_timestamp("value", value)
    return value.astimezone(tz).date()
