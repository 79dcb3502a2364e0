"""Debt/payment ledger and its per-student, per-month aggregates."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time
from decimal import Decimal

from tutorbook.core.errors import NotFoundError, ValidationError
from tutorbook.schemas.movement import (
    BalanceRow,
    MonthHistoryRow,
    MonthlyTotals,
    MovementDraft,
    MovementKind,
    MovementOrigin,
    MovementRecord,
    Payer,
    StatusBuckets,
    StudentMonthlyTotals,
)
from tutorbook.stores.base import MovementStore, StudentDirectory
from tutorbook.utils.collation import name_sort_key
from tutorbook.utils.money import ZERO, to_money
from tutorbook.utils.months import MonthRange, is_month_key, month_key

logger = logging.getLogger(__name__)


def totals_of(movements: Iterable[MovementRecord]) -> MonthlyTotals:
    """Sum debts and payments; the result does not depend on input order."""
    debt = ZERO
    paid = ZERO
    for movement in movements:
        if movement.kind is MovementKind.DEBT:
            debt += movement.amount
        elif movement.kind is MovementKind.PAYMENT:
            paid += movement.amount
        else:
            raise AssertionError(f"Unhandled movement kind: {movement.kind!r}")
    return MonthlyTotals(debt=debt, paid=paid, pending=debt - paid)


def _coerce_kind(kind: MovementKind | str | None) -> MovementKind:
    if isinstance(kind, MovementKind):
        return kind
    try:
        return MovementKind(kind)
    except ValueError as err:
        raise ValidationError(f"Movement kind must be 'debt' or 'payment', got {kind!r}") from err


def _coerce_date(value: date | datetime | None) -> datetime:
    if value is None:
        raise ValidationError("A movement date is required")
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


class LedgerEngine:
    """Owns movement creation/removal and derives aggregates from the store."""

    def __init__(self, store: MovementStore, students: StudentDirectory) -> None:
        self.store = store
        self.students = students

    # --- Movement lifecycle ----------------------------------------------------------
    async def add_movement(
        self,
        *,
        student_id: str | None,
        date: date | datetime | None,
        kind: MovementKind | str | None,
        amount: Decimal | int | float | str | None,
        note: str | None = None,
        payer: Payer | None = None,
        month_key: str | None = None,
        origin: MovementOrigin = MovementOrigin.MANUAL,
    ) -> MovementRecord:
        """Validate and persist a movement.

        Args:
            student_id: Opaque student reference; required.
            date: When the movement happened. A plain date means midnight.
            kind: ``debt`` or ``payment``.
            amount: Strictly positive amount; rounded to cents.
            note: Optional free text.
            payer: Who paid, for payments.
            month_key: Month the movement belongs to; derived from ``date`` if omitted.
            origin: Manual entry or rollover.

        Raises:
            ValidationError: If any input is malformed. Nothing is stored.
        """
        if not student_id:
            raise ValidationError("A student reference is required")
        movement_kind = _coerce_kind(kind)
        when = _coerce_date(date)
        try:
            money = to_money(amount)
        except ValueError as err:
            raise ValidationError(str(err)) from err
        if money <= ZERO:
            raise ValidationError("Amount must be greater than zero")
        key = month_key or _month_key_of(when)
        if not is_month_key(key):
            raise ValidationError(f"Invalid month key: {key!r}")

        draft = MovementDraft(
            student_id=student_id,
            date=when,
            kind=movement_kind,
            amount=money,
            month_key=key,
            note=(note or "").strip() or None,
            payer=payer,
            origin=origin,
        )
        movement_id = await self.store.create(draft)
        return MovementRecord(id=movement_id, **draft.model_dump())

    async def add_debt(
        self, student_id: str, amount: Decimal | int | float | str, when: datetime, note: str = ""
    ) -> MovementRecord:
        return await self.add_movement(
            student_id=student_id, date=when, kind=MovementKind.DEBT, amount=amount, note=note
        )

    async def add_payment(
        self,
        student_id: str,
        amount: Decimal | int | float | str,
        when: datetime,
        note: str = "",
        payer: Payer | None = None,
    ) -> MovementRecord:
        return await self.add_movement(
            student_id=student_id,
            date=when,
            kind=MovementKind.PAYMENT,
            amount=amount,
            note=note,
            payer=payer,
        )

    async def remove_movement(self, movement_id: int) -> None:
        if not await self.store.delete(movement_id):
            raise NotFoundError("Movement", movement_id)

    async def list_movements(
        self, student_id: str | None = None, month_range: MonthRange | None = None
    ) -> list[MovementRecord]:
        """Return movements filtered by student and/or range, oldest first."""
        rows = await self.store.list()
        if student_id is not None:
            rows = [row for row in rows if row.student_id == student_id]
        if month_range is not None:
            rows = [row for row in rows if month_range.contains(row.date)]
        return sorted(rows, key=lambda row: (row.date, row.id))

    # --- Aggregates ------------------------------------------------------------------
    async def monthly_totals(self, student_id: str, month_range: MonthRange) -> MonthlyTotals:
        return totals_of(await self.list_movements(student_id, month_range))

    async def balance(self, student_id: str) -> MonthlyTotals:
        """Return all-time totals for a student."""
        return totals_of(await self.list_movements(student_id))

    async def all_students_monthly_totals(
        self, month_range: MonthRange
    ) -> list[StudentMonthlyTotals]:
        """Return one row per student with activity in range.

        Students the directory cannot resolve are left out. Rows are sorted by
        pending amount (largest first), then by name.
        """
        names = {student.id: student.name for student in await self.students.list()}
        grouped: dict[str, list[MovementRecord]] = {}
        for row in await self.list_movements(month_range=month_range):
            if row.student_id not in names:
                continue
            grouped.setdefault(row.student_id, []).append(row)

        result: list[StudentMonthlyTotals] = []
        for student_id, rows in grouped.items():
            totals = totals_of(rows)
            if totals.debt == ZERO and totals.paid == ZERO:
                continue
            result.append(
                StudentMonthlyTotals(
                    student_id=student_id, name=names[student_id], **totals.model_dump()
                )
            )
        result.sort(key=lambda row: name_sort_key(row.name))
        result.sort(key=lambda row: row.pending, reverse=True)
        return result

    async def status_buckets(self, month_range: MonthRange) -> StatusBuckets:
        rows = await self.all_students_monthly_totals(month_range)
        settled = sorted(
            (row for row in rows if row.pending <= ZERO), key=lambda row: name_sort_key(row.name)
        )
        owing = [row for row in rows if row.pending > ZERO]
        return StatusBuckets(settled=settled, owing=owing)

    async def running_balance(self, student_id: str, month_range: MonthRange) -> list[BalanceRow]:
        balance = ZERO
        rows: list[BalanceRow] = []
        for movement in await self.list_movements(student_id, month_range):
            balance += movement.kind.sign * movement.amount
            rows.append(BalanceRow(movement=movement, balance=balance))
        return rows

    async def monthly_history(self, student_id: str, year: int) -> list[MonthHistoryRow]:
        """Return per-month totals of ``year`` for a student, newest month first."""
        by_month: dict[str, list[MovementRecord]] = {}
        for row in await self.list_movements(student_id, MonthRange.for_year(year)):
            by_month.setdefault(month_key(row.date), []).append(row)
        history = [
            MonthHistoryRow(month_key=key, **totals_of(rows).model_dump())
            for key, rows in by_month.items()
        ]
        return sorted(history, key=lambda row: row.month_key, reverse=True)

    # --- Maintenance -----------------------------------------------------------------
    async def undo_last(
        self, student_id: str, kind: MovementKind, month_range: MonthRange
    ) -> MovementRecord:
        """Remove the most recent movement of ``kind`` for a student within range."""
        candidates = [
            row for row in await self.list_movements(student_id, month_range) if row.kind is kind
        ]
        if not candidates:
            raise NotFoundError(f"{kind.value.capitalize()} movement", student_id)
        target = candidates[-1]
        await self.remove_movement(target.id)
        return target

    async def clear_month(self, key: str) -> int:
        """Delete every movement dated in month ``key``; return how many were removed."""
        if not is_month_key(key):
            raise ValidationError(f"Invalid month key: {key!r}")
        removed = 0
        for row in await self.list_movements(month_range=MonthRange.for_month(key)):
            if await self.store.delete(row.id):
                removed += 1
        logger.info("Cleared %d movements of %s", removed, key)
        return removed

    async def clean_orphans(self) -> int:
        """Delete movements whose student the directory does not know."""
        known = {student.id for student in await self.students.list()}
        removed = 0
        for row in await self.store.list():
            if row.student_id in known:
                continue
            if await self.store.delete(row.id):
                removed += 1
        if removed:
            logger.info("Removed %d orphaned movements", removed)
        return removed


def _month_key_of(value: datetime) -> str:
    return month_key(value)
