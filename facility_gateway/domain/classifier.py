"""Membership lifecycle classification"""

from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from facility_gateway.domain.models import NO_PLAN, Member, ClassifiedMember, Membership, MemberStatus


def most_recent_membership(memberships: Sequence[Membership]) -> Optional[Membership]:
    """
    Pick the membership with the latest start date.

    Ties on start date go to the first one in input order.
    """
    if not memberships:
        return None
    return max(memberships, key=lambda m: m.start_date)


def classify(
    memberships: Sequence[Membership],
    now: datetime,
    horizon_days: int = 7,
) -> Tuple[MemberStatus, str]:
    """
    Derive (status, current plan label) from a member's renewal history.

    Only the most recent membership is considered:
    - no memberships at all: expired, "No Plan"
    - not flagged active, or disabled: expired
    - ends on or before now + horizon: expiring (including already lapsed)
    - otherwise: active
    """
    current = most_recent_membership(memberships)
    if current is None:
        return MemberStatus.expired, NO_PLAN

    if current.status != "active" or current.is_disabled:
        return MemberStatus.expired, current.plan_label

    if current.end_date <= now + timedelta(days=horizon_days):
        return MemberStatus.expiring, current.plan_label

    return MemberStatus.active, current.plan_label


def classify_member(member: Member, now: datetime, horizon_days: int = 7) -> ClassifiedMember:
    status, current_plan = classify(member.memberships, now, horizon_days)
    return ClassifiedMember(
        member=member,
        status=status,
        current_plan=current_plan,
        current_membership=most_recent_membership(member.memberships),
    )
