"""Datetime utilities for timezone-aware timestamps.

Usage:
    from libs.common.datetime_utils import utc_now

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from libs.common.config import get_settings


def utc_now() -> datetime:
    """Return timezone-aware UTC datetime.

    Always use this for timestamps in the database.
    """
    return datetime.now(timezone.utc)


def local_today(now: Optional[datetime] = None) -> date:
    """Return the calendar date in the configured business timezone.

    Naive datetimes are treated as UTC.
    """
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(get_settings().TIMEZONE)).date()


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the UTC instants at which ``day`` starts and ends locally.

    The end bound is exclusive (the next local midnight).
    """
    tz = ZoneInfo(get_settings().TIMEZONE)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
