"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo
from fastapi.testclient import TestClient
from facility_gateway.api.main import create_app
from facility_gateway.api.dependencies import get_clock
from facility_gateway.domain.models import Member, Membership, Plan, Transaction

IST = ZoneInfo("Asia/Kolkata")

# Sunday 15 March 2026, mid-morning at the facility
FIXED_NOW = datetime(2026, 3, 15, 10, 0, tzinfo=IST)


def _make_membership(
    membership_id: str,
    start: datetime,
    end: datetime,
    status: str = "active",
    is_disabled: bool = False,
    plan: Plan | None = Plan("p_monthly", "Monthly"),
) -> Membership:
    return Membership(
        membership_id=membership_id,
        start_date=start,
        end_date=end,
        status=status,
        is_disabled=is_disabled,
        plan=plan,
    )


def _make_transaction(
    transaction_id: str,
    amount: str,
    created_at: datetime,
    member_name: str = "Asha Rao",
    member_email: str | None = "asha@example.com",
    plan: Plan | None = None,
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        amount=Decimal(amount),
        created_at=created_at,
        member_id="m_1",
        member_name=member_name,
        member_email=member_email,
        plan=plan,
    )


@pytest.fixture
def make_membership():
    """Factory for memberships with sensible defaults"""
    return _make_membership


@pytest.fixture
def make_transaction():
    """Factory for payments with sensible defaults"""
    return _make_transaction


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a pinned clock"""
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)
    return TestClient(app)


@pytest.fixture
def sample_members() -> list[Member]:
    """A small roster covering every lifecycle status"""
    return [
        Member(
            member_id="m_active",
            full_name="Asha Rao",
            balance=Decimal("0"),
            birth_date=date(1990, 3, 15),
            memberships=[
                _make_membership("ms_1", FIXED_NOW - timedelta(days=20), FIXED_NOW + timedelta(days=40)),
            ],
        ),
        Member(
            member_id="m_expiring",
            full_name="Vikram Shah",
            balance=Decimal("250.00"),
            birth_date=date(1985, 7, 2),
            memberships=[
                _make_membership("ms_2", FIXED_NOW - timedelta(days=27), FIXED_NOW + timedelta(days=3)),
            ],
        ),
        Member(
            member_id="m_lapsed",
            full_name="Meera Iyer",
            balance=Decimal("0"),
            birth_date=None,
            memberships=[
                _make_membership("ms_3", FIXED_NOW - timedelta(days=60), FIXED_NOW - timedelta(days=30), status="expired"),
            ],
        ),
        Member(
            member_id="m_new",
            full_name="Kabir Das",
            balance=Decimal("100.00"),
            birth_date=date(2000, 3, 15),
            memberships=[],
        ),
    ]
