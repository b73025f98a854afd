"""Local calendar day helpers.

A day runs from 00:00:00.000000 to 23:59:59.999999 local time, both ends
inclusive. Naive timestamps are read as local time.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo


def ensure_aware(timestamp: datetime, tz: ZoneInfo) -> datetime:
    """Interpret naive timestamps as local time in ``tz``."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=tz)
    return timestamp


def local_day(timestamp: datetime, tz: ZoneInfo) -> date:
    """Return the local calendar day a timestamp falls on."""
    return ensure_aware(timestamp, tz).astimezone(tz).date()


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return the first and last instant of a local day."""
    return (
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day, time.max, tzinfo=tz),
    )
