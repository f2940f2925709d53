"""Domain models - pure Python dataclasses representing facility entities"""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

UNKNOWN_PLAN = "Unknown Plan"
NO_PLAN = "No Plan"
NO_TRANSACTION_PLAN = "N/A"


class MemberStatus(str, enum.Enum):
    active = "active"
    expiring = "expiring"
    expired = "expired"


@dataclass(frozen=True)
class Plan:
    """Membership plan offered by a facility"""

    plan_id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Membership:
    """One renewal period of a member's subscription"""

    membership_id: str
    start_date: datetime
    end_date: datetime
    status: str  # "active" or anything else
    is_disabled: bool = False
    plan: Optional[Plan] = None

    @property
    def plan_label(self) -> str:
        if self.plan is not None and self.plan.name:
            return self.plan.name
        return UNKNOWN_PLAN


@dataclass
class Member:
    """Facility member with renewal history"""

    member_id: str
    full_name: str
    balance: Decimal = Decimal("0")
    birth_date: Optional[date] = None
    memberships: List[Membership] = field(default_factory=list)
    email: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Payment received by a facility"""

    transaction_id: str
    amount: Decimal
    created_at: datetime
    member_id: Optional[str] = None
    member_name: str = ""
    member_email: Optional[str] = None
    plan: Optional[Plan] = None

    @property
    def plan_label(self) -> str:
        if self.plan is not None and self.plan.name:
            return self.plan.name
        return NO_TRANSACTION_PLAN


@dataclass(frozen=True)
class ClassifiedMember:
    """Member plus the status derived from its most recent membership"""

    member: Member
    status: MemberStatus
    current_plan: str
    current_membership: Optional[Membership] = None


@dataclass(frozen=True)
class ReportWindow:
    """Half-open [start, end) range aligned to facility-local midnights"""

    start: datetime
    end: datetime

    @property
    def previous(self) -> "ReportWindow":
        return ReportWindow(start=self.start - (self.end - self.start), end=self.start)

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class DailyEarning:
    """Income summed over one facility-local calendar day"""

    date: date
    amount: Decimal


@dataclass(frozen=True)
class RosterCounts:
    active: int = 0
    expiring: int = 0
    expired: int = 0
    total: int = 0


@dataclass(frozen=True)
class RosterSummary:
    """Classified roster partitioned for the facility overview"""

    counts: RosterCounts
    classified: List[ClassifiedMember]
    expired_members: List[ClassifiedMember]
    expiring_soon_members: List[ClassifiedMember]
    members_with_balance: List[Member]
    birthdays_today: List[Member]


@dataclass(frozen=True)
class TransactionSummary:
    """Income for a window compared against its previous window"""

    window: ReportWindow
    total_income: Decimal
    previous_income: Decimal
    percentage_change: Optional[float]
    daily_earnings: List[DailyEarning]
    total_pending_balance: Decimal


@dataclass(frozen=True)
class ArcSegments:
    """Two contiguous segments of the received/pending income ring"""

    received_fraction: float
    pending_fraction: float
    received_arc_length: float
    pending_arc_start_offset: float
    circumference: float
