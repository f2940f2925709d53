"""GET /v1/facilities/{facility_id}/overview - Membership roster overview"""

import time
import logging
from datetime import datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from facility_gateway.api.v1.schemas import (
    BirthdaySchema,
    MemberPreviewList,
    MemberPreviewSchema,
    OverviewResponse,
    RosterCountsSchema,
)
from facility_gateway.api.dependencies import get_clock, get_datastore_client, get_facility_tz, get_request_id
from facility_gateway.config import settings
from facility_gateway.domain.exceptions import DataSourceError, FacilityNotFoundError
from facility_gateway.domain.models import ClassifiedMember
from facility_gateway.domain.roster import aggregate_roster, days_until_expiry, preview
from facility_gateway.infrastructure.clients.datastore import DataStoreClient
from facility_gateway.infrastructure.observability.logging import log_report
from facility_gateway.infrastructure.observability.metrics import datastore_fetch_failures_counter, record_overview
from facility_gateway.utils.date_utils import ensure_aware

router = APIRouter()


def _preview_list(entries: List[ClassifiedMember], now: datetime) -> MemberPreviewList:
    return MemberPreviewList(
        total=len(entries),
        items=[
            MemberPreviewSchema(
                member_id=entry.member.member_id,
                full_name=entry.member.full_name,
                status=entry.status.value,
                current_plan=entry.current_plan,
                balance=entry.member.balance,
                end_date=entry.current_membership.end_date if entry.current_membership else None,
                days_until_expiry=days_until_expiry(entry, now),
            )
            for entry in preview(entries, settings.preview_limit)
        ],
    )


@router.get("/facilities/{facility_id}/overview", response_model=OverviewResponse)
async def get_overview(
    facility_id: str,
    request: Request,
    at: Optional[datetime] = Query(None, description="Reference instant (defaults to now)"),
    tz: ZoneInfo = Depends(get_facility_tz),
    clock: Callable[[], datetime] = Depends(get_clock),
    datastore: DataStoreClient = Depends(get_datastore_client),
):
    """
    Classify every member of a facility and summarise the roster.

    Returns:
        Status counts, previews of expired/expiring/owing members, and today's birthdays
    """
    start_time = time.time()
    request_id = get_request_id(request)
    now = ensure_aware(at) if at is not None else clock()

    try:
        members = await datastore.get_members(facility_id)
    except FacilityNotFoundError as e:
        logging.warning(f"Facility not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Facility not found")
    except DataSourceError as e:
        datastore_fetch_failures_counter.inc()
        logging.error(f"Data store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Data store unavailable")

    summary = aggregate_roster(members, now, tz=tz, horizon_days=settings.expiry_horizon_days)

    classified_by_member = {id(entry.member): entry for entry in summary.classified}
    with_balance = [classified_by_member[id(m)] for m in summary.members_with_balance]

    duration_ms = (time.time() - start_time) * 1000
    record_overview(summary.counts)
    log_report(request_id, facility_id, "overview", duration_ms, record_count=summary.counts.total)

    return OverviewResponse(
        facility_id=facility_id,
        now=now,
        counts=RosterCountsSchema(
            active=summary.counts.active,
            expiring=summary.counts.expiring,
            expired=summary.counts.expired,
            total=summary.counts.total,
        ),
        expired_members=_preview_list(summary.expired_members, now),
        expiring_soon_members=_preview_list(summary.expiring_soon_members, now),
        members_with_balance=_preview_list(with_balance, now),
        birthdays_today=[
            BirthdaySchema(member_id=m.member_id, name=m.full_name, avatar=m.photo_url, phone=m.phone)
            for m in summary.birthdays_today
        ],
    )
