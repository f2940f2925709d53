"""Reporting windows resolved from dashboard timeline keywords"""

import enum
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from dateutil.relativedelta import relativedelta

from facility_gateway.domain.models import ReportWindow
from facility_gateway.utils.date_utils import facility_zone, local_date, local_midnight


class Timeline(str, enum.Enum):
    today = "today"
    yesterday = "yesterday"
    this_month = "thisMonth"
    last_month = "lastMonth"
    last_7_days = "last7Days"
    last_30_days = "last30Days"


def parse_timeline(value: Optional[str]) -> Timeline:
    """Map a keyword onto a Timeline; anything unrecognised means today"""
    try:
        return Timeline(value)
    except ValueError:
        return Timeline.today


def resolve(timeline: Optional[str], reference: datetime, tz: Optional[tzinfo] = None) -> ReportWindow:
    """
    Convert a timeline keyword into a half-open [start, end) window.

    Boundaries are midnights on the facility's wall clock. The matching
    comparison window is available as ``window.previous``.

    Windows:
    - today:      [today, today + 1d)
    - yesterday:  [today - 1d, today)
    - thisMonth:  [1st of this month, 1st of next month)
    - lastMonth:  [1st of last month, 1st of this month)
    - last7Days:  [today - 7d, today)
    - last30Days: [today - 30d, today)
    """
    tz = tz or facility_zone()
    today = local_date(reference, tz)
    first_of_month = today.replace(day=1)

    keyword = parse_timeline(timeline)
    if keyword is Timeline.yesterday:
        start, end = today - timedelta(days=1), today
    elif keyword is Timeline.this_month:
        start, end = first_of_month, first_of_month + relativedelta(months=1)
    elif keyword is Timeline.last_month:
        start, end = first_of_month - relativedelta(months=1), first_of_month
    elif keyword is Timeline.last_7_days:
        start, end = today - timedelta(days=7), today
    elif keyword is Timeline.last_30_days:
        start, end = today - timedelta(days=30), today
    else:
        start, end = today, today + timedelta(days=1)

    return ReportWindow(start=local_midnight(start, tz), end=local_midnight(end, tz))
