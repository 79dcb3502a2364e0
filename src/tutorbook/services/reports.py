"""Collection reports. Only payments count; debts are ignored."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from tutorbook.schemas.movement import CollectionPoint, MovementKind
from tutorbook.services.ledger import LedgerEngine
from tutorbook.utils.money import ZERO
from tutorbook.utils.months import MonthRange, month_key


class ReportService:
    def __init__(self, ledger: LedgerEngine) -> None:
        self.ledger = ledger

    async def _payments(self, month_range: MonthRange):
        return [
            row
            for row in await self.ledger.list_movements(month_range=month_range)
            if row.kind is MovementKind.PAYMENT
        ]

    async def collected_in_month(self, key: str) -> Decimal:
        payments = await self._payments(MonthRange.for_month(key))
        return sum((row.amount for row in payments), ZERO)

    async def daily_collections(self, key: str) -> list[CollectionPoint]:
        """Return one point per calendar day of the month, zero-filled."""
        month_range = MonthRange.for_month(key)
        by_day: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for row in await self._payments(month_range):
            by_day[row.date.date().isoformat()] += row.amount
        return [
            CollectionPoint(label=day.isoformat(), amount=by_day[day.isoformat()])
            for day in month_range.days()
        ]

    async def yearly_collections(self, year: int) -> list[CollectionPoint]:
        """Return twelve points labelled ``YYYY-MM``."""
        month_range = MonthRange.for_year(year)
        by_month: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for row in await self._payments(month_range):
            by_month[month_key(row.date)] += row.amount
        return [
            CollectionPoint(label=key, amount=by_month[key]) for key in month_range.month_keys()
        ]
