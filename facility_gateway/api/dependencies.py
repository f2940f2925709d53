"""Dependency injection for FastAPI endpoints"""

from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import HTTPException, Query, Request
from facility_gateway.infrastructure.clients.datastore import DataStoreClient
from facility_gateway.utils.date_utils import facility_zone


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_datastore_client() -> DataStoreClient:
    """Provide data store client instance"""
    return DataStoreClient()


def get_clock() -> Callable[[], datetime]:
    """Provide the source of "now"; overridden in tests for deterministic reports"""
    return lambda: datetime.now(timezone.utc)


def get_facility_tz(
    tz: str | None = Query(None, description="IANA time zone of the facility"),
) -> ZoneInfo:
    """Facility time zone from the query string, else the configured default"""
    try:
        return facility_zone(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone: {tz}")
