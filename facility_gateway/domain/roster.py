"""Roster aggregation for the facility overview"""

from datetime import datetime, tzinfo
from typing import Iterable, List, Optional, Sequence, TypeVar

from facility_gateway.domain.classifier import classify_member
from facility_gateway.domain.models import ClassifiedMember, Member, MemberStatus, RosterCounts, RosterSummary
from facility_gateway.utils.date_utils import days_until, facility_zone, local_date

T = TypeVar("T")


def birthdays_today(members: Iterable[Member], now: datetime, tz: Optional[tzinfo] = None) -> List[Member]:
    """Members whose birth month and day match today on the facility calendar"""
    today = local_date(now, tz or facility_zone())
    return [
        m for m in members
        if m.birth_date is not None
        and m.birth_date.month == today.month
        and m.birth_date.day == today.day
    ]


def aggregate_roster(
    members: Sequence[Member],
    now: datetime,
    tz: Optional[tzinfo] = None,
    horizon_days: int = 7,
    birthday_candidates: Optional[Iterable[Member]] = None,
) -> RosterSummary:
    """
    Classify every member and partition the roster.

    Requirements:
    - One classification per member, counted by status
    - total is the raw member count
    - expired/expiring side-lists are mutually exclusive; active members are in neither
    - members_with_balance holds every member with balance > 0, whatever the status
    - Output lists keep input order
    """
    classified: List[ClassifiedMember] = []
    expired: List[ClassifiedMember] = []
    expiring: List[ClassifiedMember] = []
    with_balance: List[Member] = []

    for member in members:
        if member.balance > 0:
            with_balance.append(member)

        entry = classify_member(member, now, horizon_days)
        classified.append(entry)
        if entry.status is MemberStatus.expired:
            expired.append(entry)
        elif entry.status is MemberStatus.expiring:
            expiring.append(entry)

    counts = RosterCounts(
        active=len(classified) - len(expired) - len(expiring),
        expiring=len(expiring),
        expired=len(expired),
        total=len(members),
    )

    candidates = members if birthday_candidates is None else birthday_candidates
    return RosterSummary(
        counts=counts,
        classified=classified,
        expired_members=expired,
        expiring_soon_members=expiring,
        members_with_balance=with_balance,
        birthdays_today=birthdays_today(candidates, now, tz),
    )


def preview(items: Sequence[T], limit: int = 5) -> List[T]:
    """First `limit` items in input order"""
    return list(items[:limit])


def days_until_expiry(entry: ClassifiedMember, now: datetime) -> Optional[int]:
    if entry.current_membership is None:
        return None
    return days_until(entry.current_membership.end_date, now)
