"""Date manipulation utilities"""

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import List
from zoneinfo import ZoneInfo

from facility_gateway.config import settings


def facility_zone(name: str | None = None) -> ZoneInfo:
    """Resolve the facility time zone, defaulting to the configured one"""
    return ZoneInfo(name or settings.facility_timezone)


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start up to end (exclusive)"""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(max(days, 0))]


def ensure_aware(instant: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


def local_date(instant: datetime, tz: tzinfo) -> date:
    """Calendar date of an instant on the facility's wall clock"""
    return ensure_aware(instant).astimezone(tz).date()


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def days_until(end: datetime, now: datetime) -> int:
    """Whole days from now until end, rounded up (negative once end has passed)"""
    seconds = (ensure_aware(end) - ensure_aware(now)).total_seconds()
    return math.ceil(seconds / 86400)
