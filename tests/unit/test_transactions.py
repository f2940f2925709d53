"""Unit tests for income aggregation"""

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo
from facility_gateway.domain.models import DailyEarning, Plan, ReportWindow
from facility_gateway.domain.transactions import (
    aggregate_transactions,
    daily_earnings,
    filter_transactions,
    percentage_change,
    total_pending_balance,
)
from facility_gateway.domain.windows import resolve

IST = ZoneInfo("Asia/Kolkata")
D0 = datetime(2026, 3, 10, tzinfo=IST)


def test_aggregate_transactions_two_day_window(make_transaction):
    """100 + 50 on day one, 30 on day two"""
    window = ReportWindow(start=D0, end=D0 + timedelta(days=2))
    transactions = [
        make_transaction("t1", "100", D0 + timedelta(hours=9)),
        make_transaction("t2", "50", D0 + timedelta(hours=18)),
        make_transaction("t3", "30", D0 + timedelta(days=1, hours=12)),
    ]

    summary = aggregate_transactions(transactions, [], window, [], tz=IST)

    assert summary.total_income == Decimal("180")
    assert summary.daily_earnings == [
        DailyEarning(date=date(2026, 3, 10), amount=Decimal("150")),
        DailyEarning(date=date(2026, 3, 11), amount=Decimal("30")),
    ]


def test_aggregate_transactions_drops_records_outside_window(make_transaction):
    """Stray records from the data store never reach the sums"""
    window = ReportWindow(start=D0, end=D0 + timedelta(days=1))
    transactions = [
        make_transaction("t1", "100", D0),
        make_transaction("t2", "999", D0 + timedelta(days=1)),  # end is exclusive
        make_transaction("t3", "999", D0 - timedelta(seconds=1)),
    ]
    previous = [
        make_transaction("p1", "40", D0 - timedelta(hours=3)),
        make_transaction("p2", "999", D0 + timedelta(hours=3)),
    ]

    summary = aggregate_transactions(transactions, previous, window, [], tz=IST)

    assert summary.total_income == Decimal("100")
    assert summary.previous_income == Decimal("40")
    assert summary.percentage_change == 150.0


def test_daily_earnings_covers_every_day_of_window(make_transaction, now):
    """No gaps: one entry per day, and the series sums to the window income"""
    window = resolve("last30Days", now, IST)
    transactions = [
        make_transaction("t1", "120.50", window.start + timedelta(days=2, hours=7)),
        make_transaction("t2", "79.50", window.start + timedelta(days=29, hours=23)),
    ]

    summary = aggregate_transactions(transactions, [], window, [], tz=IST)

    assert len(summary.daily_earnings) == window.days == 30
    assert summary.daily_earnings[0].date == date(2026, 2, 13)
    assert summary.daily_earnings[-1].date == date(2026, 3, 14)
    assert sum(d.amount for d in summary.daily_earnings) == summary.total_income == Decimal("200.00")
    assert sum(1 for d in summary.daily_earnings if d.amount == 0) == 28


def test_daily_earnings_buckets_by_facility_date(make_transaction):
    """20:00 UTC on the 10th is 01:30 on the 11th in India"""
    window = ReportWindow(start=D0, end=D0 + timedelta(days=2))
    late_utc = make_transaction("t1", "75", datetime(2026, 3, 10, 20, 0, tzinfo=timezone.utc))

    series = daily_earnings([late_utc], window, IST)

    assert [d.amount for d in series] == [Decimal("0"), Decimal("75")]


def test_aggregate_transactions_empty_window_yields_zeros(now):
    window = resolve("yesterday", now, IST)

    summary = aggregate_transactions([], [], window, [], tz=IST)

    assert summary.total_income == Decimal("0")
    assert summary.daily_earnings == [DailyEarning(date=date(2026, 3, 14), amount=Decimal("0"))]
    assert summary.percentage_change is None


def test_percentage_change_not_computable_without_previous_income():
    """200 against 0 is reported as not computable, never as 0%"""
    result = percentage_change(Decimal("200"), Decimal("0"))

    assert result is None


def test_percentage_change_values():
    assert percentage_change(Decimal("150"), Decimal("100")) == 50.0
    assert percentage_change(Decimal("50"), Decimal("200")) == -75.0
    assert math.isclose(percentage_change(Decimal("1"), Decimal("3")), -66.6666666, rel_tol=1e-6)


def test_total_pending_balance_counts_only_positive_balances():
    balances = [Decimal("0"), Decimal("250.00"), Decimal("-10"), Decimal("100.00")]

    assert total_pending_balance(balances) == Decimal("350.00")


def test_pending_balance_is_independent_of_window(make_transaction):
    window = ReportWindow(start=D0, end=D0 + timedelta(days=1))

    summary = aggregate_transactions([], [], window, [Decimal("80")], tz=IST)

    assert summary.total_pending_balance == Decimal("80")


def test_filter_transactions_by_plan_and_search(make_transaction):
    monthly = Plan("p_monthly", "Monthly")
    yearly = Plan("p_yearly", "Yearly")
    transactions = [
        make_transaction("t1", "10", D0, member_name="Asha Rao", member_email="asha@example.com", plan=monthly),
        make_transaction("t2", "20", D0, member_name="Vikram Shah", member_email="vik@gym.in", plan=yearly),
        make_transaction("t3", "30", D0, member_name="Meera Iyer", member_email=None, plan=None),
    ]

    assert [t.transaction_id for t in filter_transactions(transactions)] == ["t1", "t2", "t3"]
    assert [t.transaction_id for t in filter_transactions(transactions, plan_id="all")] == ["t1", "t2", "t3"]
    assert [t.transaction_id for t in filter_transactions(transactions, plan_id="p_yearly")] == ["t2"]
    assert [t.transaction_id for t in filter_transactions(transactions, search="ASHA")] == ["t1"]
    assert [t.transaction_id for t in filter_transactions(transactions, search="gym.in")] == ["t2"]
    assert filter_transactions(transactions, plan_id="p_monthly", search="vikram") == []


def test_transaction_plan_label_defaults(make_transaction):
    assert make_transaction("t1", "1", D0, plan=None).plan_label == "N/A"
    assert make_transaction("t2", "1", D0, plan=Plan("p", None)).plan_label == "N/A"
    assert make_transaction("t3", "1", D0, plan=Plan("p", "Monthly")).plan_label == "Monthly"
