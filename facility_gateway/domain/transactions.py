"""Income aggregation over reporting windows"""

from collections import defaultdict
from datetime import date, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from facility_gateway.domain.models import DailyEarning, ReportWindow, Transaction, TransactionSummary
from facility_gateway.utils.date_utils import facility_zone, generate_date_range, local_date


def in_window(transactions: Iterable[Transaction], window: ReportWindow) -> List[Transaction]:
    """Keep only transactions with start <= created_at < end"""
    return [t for t in transactions if window.contains(t.created_at)]


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal("0"))


def daily_earnings(
    transactions: Iterable[Transaction],
    window: ReportWindow,
    tz: Optional[tzinfo] = None,
) -> List[DailyEarning]:
    """
    Sum income per facility-local calendar day across the whole window.

    Emits exactly one entry per day in [start, end), zero-amount days included.
    """
    tz = tz or facility_zone()
    by_day: Dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
    for txn in transactions:
        by_day[local_date(txn.created_at, tz)] += txn.amount

    days = generate_date_range(local_date(window.start, tz), local_date(window.end, tz))
    return [DailyEarning(date=day, amount=by_day.get(day, Decimal("0"))) for day in days]


def total_pending_balance(balances: Iterable[Decimal]) -> Decimal:
    """Outstanding balance snapshot: sum of every positive balance"""
    return sum((b for b in balances if b > 0), Decimal("0"))


def percentage_change(current: Decimal, previous: Decimal) -> Optional[float]:
    """
    Relative change from previous to current, in percent.

    Returns None when previous is zero: the change is not computable and
    callers must not present it as 0%.
    """
    if previous == 0:
        return None
    return float((current - previous) / previous * 100)


def filter_transactions(
    transactions: Iterable[Transaction],
    plan_id: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Transaction]:
    """
    Narrow transactions by plan and by member name/email search.

    plan_id "all" (or empty) disables the plan filter; search is a
    case-insensitive substring match.
    """
    needle = (search or "").strip().lower()
    result = []
    for txn in transactions:
        if plan_id and plan_id != "all":
            if txn.plan is None or txn.plan.plan_id != plan_id:
                continue
        if needle:
            haystacks = (txn.member_name or "", txn.member_email or "")
            if not any(needle in h.lower() for h in haystacks):
                continue
        result.append(txn)
    return result


def aggregate_transactions(
    transactions: Sequence[Transaction],
    previous_transactions: Sequence[Transaction],
    window: ReportWindow,
    member_balances: Iterable[Decimal],
    tz: Optional[tzinfo] = None,
) -> TransactionSummary:
    """
    Main entry point: income for a window against its previous window.

    Inputs are expected to be pre-filtered by the data store; both sets are
    re-checked against their window so stray records never leak into sums.
    """
    current = in_window(transactions, window)
    previous = in_window(previous_transactions, window.previous)

    income = total_income(current)
    previous_income = total_income(previous)

    return TransactionSummary(
        window=window,
        total_income=income,
        previous_income=previous_income,
        percentage_change=percentage_change(income, previous_income),
        daily_earnings=daily_earnings(current, window, tz),
        total_pending_balance=total_pending_balance(member_balances),
    )
