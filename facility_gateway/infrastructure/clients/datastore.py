"""Data store HTTP client for fetching facility records"""

import logging
from datetime import date, datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import httpx
from dateutil.parser import isoparse

from facility_gateway.config import settings
from facility_gateway.domain.exceptions import DataSourceError, FacilityNotFoundError
from facility_gateway.domain.models import Member, Membership, Plan, Transaction
from facility_gateway.utils.date_utils import ensure_aware, facility_zone, local_midnight


def _parse_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise InvalidOperation(f"Non-finite amount: {value!r}")
    return amount


def _record_id(raw: Any) -> Any:
    return raw.get("id") if isinstance(raw, dict) else None


def _parse_instant(value: Any, tz: tzinfo) -> datetime:
    """ISO timestamp, or a bare ISO date taken as facility-local midnight"""
    if isinstance(value, datetime):
        return ensure_aware(value)
    text = str(value)
    if len(text) == 10:
        return local_midnight(date.fromisoformat(text), tz)
    return ensure_aware(isoparse(text))


def _parse_birth_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_plan(raw: Optional[Dict[str, Any]]) -> Optional[Plan]:
    if not raw:
        return None
    name = raw.get("name")
    return Plan(
        plan_id=str(raw.get("id", "")),
        name=name.strip() if isinstance(name, str) and name.strip() else None,
    )


def parse_membership(raw: Dict[str, Any], tz: tzinfo) -> Membership:
    return Membership(
        membership_id=str(raw["id"]),
        start_date=_parse_instant(raw["start_date"], tz),
        end_date=_parse_instant(raw["end_date"], tz),
        status=str(raw.get("status") or ""),
        is_disabled=bool(raw.get("is_disabled")),
        plan=parse_plan(raw.get("plans") or raw.get("plan")),
    )


def parse_member(raw: Dict[str, Any], tz: tzinfo) -> Member:
    """
    Map a member record and its nested memberships to domain types.

    A malformed membership is dropped (and logged) rather than failing the member.
    """
    memberships = []
    for item in raw.get("memberships") or []:
        try:
            memberships.append(parse_membership(item, tz))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.warning(
                "Skipping malformed membership",
                extra={"member_id": raw.get("id"), "membership_id": _record_id(item), "error": str(e)},
            )

    try:
        balance = _parse_decimal(raw.get("balance"))
    except InvalidOperation:
        logging.warning(
            "Defaulting malformed balance to 0",
            extra={"member_id": raw.get("id"), "balance": str(raw.get("balance"))},
        )
        balance = Decimal("0")

    return Member(
        member_id=str(raw["id"]),
        full_name=raw.get("full_name") or "",
        balance=balance,
        birth_date=_parse_birth_date(raw.get("date_of_birth")),
        memberships=memberships,
        email=raw.get("email"),
        phone=raw.get("phone"),
        photo_url=raw.get("photo_url"),
    )


def parse_transaction(raw: Dict[str, Any]) -> Transaction:
    member = raw.get("members") or raw.get("member") or {}
    membership = raw.get("memberships") or raw.get("membership") or {}
    return Transaction(
        transaction_id=str(raw["id"]),
        amount=_parse_decimal(raw["amount"]),
        created_at=_parse_instant(raw["created_at"], timezone.utc),
        member_id=str(member["id"]) if member.get("id") is not None else None,
        member_name=member.get("full_name") or "",
        member_email=member.get("email"),
        plan=parse_plan(membership.get("plans") or membership.get("plan")),
    )


class DataStoreClient:
    """Client for the facility data store REST API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
        tz: tzinfo | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.datastore_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.api_key = api_key if api_key is not None else settings.datastore_api_key
        self.tz = tz or facility_zone()
        self.transport = transport

    async def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """
        Issue a GET against the data store and decode the JSON body.

        Raises:
            FacilityNotFoundError: On 404
            DataSourceError: On timeout, other HTTP errors, or invalid JSON
        """
        headers = {"apikey": self.api_key} if self.api_key else {}
        async with httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise DataSourceError(f"Data store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise FacilityNotFoundError(f"Not found: {path}") from e
                raise DataSourceError(f"Data store error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise DataSourceError(f"Data store unreachable: {e}") from e
            except ValueError as e:
                raise DataSourceError(f"Invalid response from data store: {e}") from e

    async def get_members(self, facility_id: str) -> List[Member]:
        """Fetch every member of a facility with nested memberships and plans"""
        data = await self._get(f"/facilities/{facility_id}/members")
        members = []
        for raw in data.get("members", []):
            try:
                members.append(parse_member(raw, self.tz))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logging.warning(
                    "Skipping malformed member",
                    extra={"facility_id": facility_id, "member_id": _record_id(raw), "error": str(e)},
                )
        return members

    async def get_transactions(self, facility_id: str, start: datetime, end: datetime) -> List[Transaction]:
        """Fetch payments created in [start, end), newest first"""
        data = await self._get(
            f"/facilities/{facility_id}/transactions",
            params={"type": "payment", "start": start.isoformat(), "end": end.isoformat()},
        )
        transactions = []
        for raw in data.get("transactions", []):
            try:
                transactions.append(parse_transaction(raw))
            except (KeyError, ValueError, TypeError, AttributeError, InvalidOperation) as e:
                logging.warning(
                    "Skipping malformed transaction",
                    extra={"facility_id": facility_id, "transaction_id": _record_id(raw), "error": str(e)},
                )
        return sorted(transactions, key=lambda t: t.created_at, reverse=True)

    async def get_plans(self, facility_id: str) -> List[Plan]:
        """Fetch facility plans (filter option labels)"""
        data = await self._get(f"/facilities/{facility_id}/plans")
        return [plan for plan in (parse_plan(raw) for raw in data.get("plans", [])) if plan is not None]
