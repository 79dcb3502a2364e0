"""Collection report endpoints (payments only)."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel

from tutorbook.core.errors import ValidationError
from tutorbook.schemas.movement import CollectionPoint
from tutorbook.utils.months import is_month_key

from ..dependencies import ReportServiceDep

router = APIRouter(prefix="/reports", tags=["reports"])


class MonthCollectionResponse(BaseModel):
    month: str
    total: Decimal
    daily: list[CollectionPoint]


def _require_month(month: str) -> str:
    if not is_month_key(month):
        raise ValidationError(f"Invalid month key: {month!r}")
    return month


@router.get("/collections/{month}", response_model=MonthCollectionResponse)
async def get_month_collections(month: str, reports: ReportServiceDep) -> MonthCollectionResponse:
    """Total collected in a month together with its per-day series."""
    key = _require_month(month)
    return MonthCollectionResponse(
        month=key,
        total=await reports.collected_in_month(key),
        daily=await reports.daily_collections(key),
    )


@router.get("/collections/year/{year}", response_model=list[CollectionPoint])
async def get_year_collections(year: int, reports: ReportServiceDep) -> list[CollectionPoint]:
    return await reports.yearly_collections(year)
