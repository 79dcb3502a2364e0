"""Ledger endpoints: debts, payments and per-student balances."""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from tutorbook.core.errors import ValidationError
from tutorbook.schemas.movement import (
    BalanceRow,
    MonthHistoryRow,
    MonthlyTotals,
    MovementCreateRequest,
    MovementRecord,
    StatusBuckets,
    StudentMonthlyTotals,
    UndoLastRequest,
)
from tutorbook.utils.months import MonthRange

from ..dependencies import LedgerDep

router = APIRouter(prefix="/movements", tags=["movements"])


class RemovedResponse(BaseModel):
    removed: int


def _month_range(month: str) -> MonthRange:
    try:
        return MonthRange.for_month(month)
    except ValueError as err:
        raise ValidationError(str(err)) from err


@router.get("/", response_model=list[MovementRecord])
async def list_movements(
    ledger: LedgerDep, student_id: str | None = None, month: str | None = None
) -> list[MovementRecord]:
    """List movements, oldest first, optionally filtered by student and month."""
    month_range = _month_range(month) if month else None
    return await ledger.list_movements(student_id, month_range)


@router.post("/", response_model=MovementRecord, status_code=status.HTTP_201_CREATED)
async def create_movement(payload: MovementCreateRequest, ledger: LedgerDep) -> MovementRecord:
    """Register a debt or a payment."""
    return await ledger.add_movement(
        student_id=payload.student_id,
        date=payload.date,
        kind=payload.kind,
        amount=payload.amount,
        note=payload.note,
        payer=payload.payer,
        month_key=payload.month_key,
    )


@router.delete("/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movement(movement_id: int, ledger: LedgerDep) -> Response:
    await ledger.remove_movement(movement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/undo-last", response_model=MovementRecord)
async def undo_last_movement(payload: UndoLastRequest, ledger: LedgerDep) -> MovementRecord:
    """Remove the latest debt or payment of a student in a month."""
    return await ledger.undo_last(payload.student_id, payload.kind, _month_range(payload.month_key))


@router.get("/totals", response_model=list[StudentMonthlyTotals])
async def get_all_totals(ledger: LedgerDep, month: str) -> list[StudentMonthlyTotals]:
    """Per-student totals for a month, largest pending first."""
    return await ledger.all_students_monthly_totals(_month_range(month))


@router.get("/status", response_model=StatusBuckets)
async def get_status_buckets(ledger: LedgerDep, month: str) -> StatusBuckets:
    return await ledger.status_buckets(_month_range(month))


@router.get("/students/{student_id}/totals", response_model=MonthlyTotals)
async def get_student_totals(
    student_id: str, ledger: LedgerDep, month: str | None = None
) -> MonthlyTotals:
    """Totals for a month, or all-time when no month is given."""
    if month is None:
        return await ledger.balance(student_id)
    return await ledger.monthly_totals(student_id, _month_range(month))


@router.get("/students/{student_id}/running-balance", response_model=list[BalanceRow])
async def get_running_balance(student_id: str, ledger: LedgerDep, month: str) -> list[BalanceRow]:
    return await ledger.running_balance(student_id, _month_range(month))


@router.get("/students/{student_id}/history", response_model=list[MonthHistoryRow])
async def get_monthly_history(
    student_id: str, ledger: LedgerDep, year: int
) -> list[MonthHistoryRow]:
    return await ledger.monthly_history(student_id, year)


@router.delete("/months/{month}", response_model=RemovedResponse)
async def clear_month(month: str, ledger: LedgerDep) -> RemovedResponse:
    """Delete every movement dated in the given month."""
    return RemovedResponse(removed=await ledger.clear_month(month))


@router.post("/clean-orphans", response_model=RemovedResponse)
async def clean_orphans(ledger: LedgerDep) -> RemovedResponse:
    return RemovedResponse(removed=await ledger.clean_orphans())
