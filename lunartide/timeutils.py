"""Timezone helpers shared by the lunar and tidal calculations."""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Union
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = ZoneInfo("Europe/Amsterdam")


def to_local(dt: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Naive datetimes are taken as local time in ``tz``; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def to_utc(dt: datetime) -> datetime:
    """
    UTC view of an aware datetime.

    Aware datetimes sharing a tzinfo are compared and subtracted by wall
    clock, so the repeated hour of a DST change would collapse. Elapsed
    time and ordering are therefore computed on UTC values.
    """
    return dt.astimezone(timezone.utc)


def add_elapsed(dt: datetime, delta: timedelta) -> datetime:
    """Add real elapsed time to an aware datetime, keeping its timezone."""
    return (to_utc(dt) + delta).astimezone(dt.tzinfo)


def local_midnight(day: Union[date, datetime], tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Return local midnight of the calendar day ``day`` falls on."""
    if isinstance(day, datetime):
        day = to_local(day, tz).date()
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def daterange(start_date: date, days: int) -> List[date]:
    return [start_date + timedelta(days=i) for i in range(days)]


def clamp(value: float, min_v: float, max_v: float) -> float:
    return max(min_v, min(max_v, value))
