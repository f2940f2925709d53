"""GET /v1/facilities/{facility_id}/transactions - Income report for a timeline"""

import asyncio
import time
import logging
from datetime import datetime
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from facility_gateway.api.v1.schemas import (
    DailyEarningSchema,
    IncomeRingSchema,
    PlanSchema,
    TransactionRowSchema,
    TransactionsResponse,
    WindowSchema,
)
from facility_gateway.api.dependencies import get_clock, get_datastore_client, get_facility_tz, get_request_id
from facility_gateway.config import settings
from facility_gateway.domain.exceptions import DataSourceError, FacilityNotFoundError
from facility_gateway.domain.models import ReportWindow
from facility_gateway.domain.transactions import aggregate_transactions, filter_transactions, in_window
from facility_gateway.domain.visualization import derive_arcs
from facility_gateway.domain.windows import parse_timeline, resolve
from facility_gateway.infrastructure.clients.datastore import DataStoreClient
from facility_gateway.infrastructure.observability.logging import log_report
from facility_gateway.infrastructure.observability.metrics import (
    datastore_fetch_failures_counter,
    record_transactions_report,
)
from facility_gateway.utils.date_utils import ensure_aware

router = APIRouter()


async def fetch_all(*aws):
    """Await fetches concurrently; on the first failure cancel the rest before re-raising."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _window_schema(window: ReportWindow) -> WindowSchema:
    return WindowSchema(start=window.start, end=window.end, days=window.days)


@router.get("/facilities/{facility_id}/transactions", response_model=TransactionsResponse)
async def get_transactions_report(
    facility_id: str,
    request: Request,
    timeline: str = Query("today", description="today | yesterday | thisMonth | lastMonth | last7Days | last30Days"),
    plan: str = Query("all", description="Plan id to filter by, or 'all'"),
    search: str = Query("", description="Member name or email fragment"),
    at: Optional[datetime] = Query(None, description="Reference instant (defaults to now)"),
    tz: ZoneInfo = Depends(get_facility_tz),
    clock: Callable[[], datetime] = Depends(get_clock),
    datastore: DataStoreClient = Depends(get_datastore_client),
):
    """
    Build the income report for a timeline window.

    Flow:
    1. Resolve the timeline into a window and its previous window
    2. Fetch current payments, previous payments, members and plans concurrently
    3. Apply plan/search filters to the current window only
    4. Aggregate income, daily series and pending balance
    5. Derive the received/pending ring segments
    """
    start_time = time.time()
    request_id = get_request_id(request)
    now = ensure_aware(at) if at is not None else clock()

    keyword = parse_timeline(timeline)
    window = resolve(keyword.value, now, tz)
    previous = window.previous

    try:
        current_txns, previous_txns, members, plans = await fetch_all(
            datastore.get_transactions(facility_id, window.start, window.end),
            datastore.get_transactions(facility_id, previous.start, previous.end),
            datastore.get_members(facility_id),
            datastore.get_plans(facility_id),
        )
    except FacilityNotFoundError as e:
        logging.warning(f"Facility not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Facility not found")
    except DataSourceError as e:
        datastore_fetch_failures_counter.inc()
        logging.error(f"Data store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Data store unavailable")

    filtered = in_window(filter_transactions(current_txns, plan_id=plan, search=search), window)
    summary = aggregate_transactions(
        filtered,
        previous_txns,
        window,
        (m.balance for m in members),
        tz=tz,
    )
    ring = derive_arcs(summary.total_income, summary.total_pending_balance, settings.income_ring_radius)

    duration_ms = (time.time() - start_time) * 1000
    record_transactions_report(keyword.value)
    log_report(request_id, facility_id, "transactions", duration_ms, timeline=keyword.value, record_count=len(filtered))

    return TransactionsResponse(
        facility_id=facility_id,
        timeline=keyword.value,
        plan_filter=plan,
        search=search,
        window=_window_schema(window),
        previous_window=_window_schema(previous),
        total_income=summary.total_income,
        previous_income=summary.previous_income,
        percentage_change=summary.percentage_change,
        total_pending_balance=summary.total_pending_balance,
        daily_earnings=[DailyEarningSchema(date=d.date, amount=d.amount) for d in summary.daily_earnings],
        income_ring=IncomeRingSchema(
            received_fraction=ring.received_fraction,
            pending_fraction=ring.pending_fraction,
            received_arc_length=ring.received_arc_length,
            pending_arc_start_offset=ring.pending_arc_start_offset,
            circumference=ring.circumference,
        ),
        transactions=[
            TransactionRowSchema(
                transaction_id=t.transaction_id,
                member_name=t.member_name,
                amount=t.amount,
                created_at=t.created_at,
                plan=t.plan_label,
            )
            for t in filtered
        ],
        plans=[PlanSchema(plan_id=p.plan_id, name=p.name) for p in plans],
    )
