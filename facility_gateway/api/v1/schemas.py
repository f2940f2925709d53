"""Pydantic schemas for API responses"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


class RosterCountsSchema(BaseModel):
    """Member counts by lifecycle status"""

    active: int
    expiring: int
    expired: int
    total: int


class MemberPreviewSchema(BaseModel):
    """Member row in an overview side-list"""

    member_id: str
    full_name: str
    status: str
    current_plan: str
    balance: Decimal
    end_date: Optional[datetime] = None
    days_until_expiry: Optional[int] = Field(None, description="Negative once the membership has lapsed")


class MemberPreviewList(BaseModel):
    """First few entries of a side-list plus its full length"""

    total: int
    items: List[MemberPreviewSchema]


class BirthdaySchema(BaseModel):
    member_id: str
    name: str
    avatar: Optional[str] = None
    phone: Optional[str] = None


class OverviewResponse(BaseModel):
    """Response for GET /v1/facilities/{facility_id}/overview"""

    facility_id: str
    now: datetime
    counts: RosterCountsSchema
    expired_members: MemberPreviewList
    expiring_soon_members: MemberPreviewList
    members_with_balance: MemberPreviewList
    birthdays_today: List[BirthdaySchema]


class WindowSchema(BaseModel):
    """Half-open [start, end) reporting window"""

    start: datetime
    end: datetime
    days: int


class DailyEarningSchema(BaseModel):
    date: date
    amount: Decimal


class IncomeRingSchema(BaseModel):
    """Received vs pending segments of the income ring chart"""

    received_fraction: float
    pending_fraction: float
    received_arc_length: float
    pending_arc_start_offset: float
    circumference: float


class TransactionRowSchema(BaseModel):
    transaction_id: str
    member_name: str
    amount: Decimal
    created_at: datetime
    plan: str


class PlanSchema(BaseModel):
    plan_id: str
    name: Optional[str] = None


class TransactionsResponse(BaseModel):
    """Response for GET /v1/facilities/{facility_id}/transactions"""

    facility_id: str
    timeline: str
    plan_filter: str
    search: str
    window: WindowSchema
    previous_window: WindowSchema
    total_income: Decimal
    previous_income: Decimal
    percentage_change: Optional[float] = Field(
        None, description="Null when the previous period had no income (not computable)"
    )
    total_pending_balance: Decimal
    daily_earnings: List[DailyEarningSchema]
    income_ring: IncomeRingSchema
    transactions: List[TransactionRowSchema]
    plans: List[PlanSchema]
