"""Ledger movement Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MovementKind(str, Enum):
    """A movement either adds debt or records a payment against it."""

    DEBT = "debt"
    PAYMENT = "payment"

    @property
    def sign(self) -> int:
        """Return +1 for debt and -1 for payment, as applied to a pending balance."""
        if self is MovementKind.DEBT:
            return 1
        if self is MovementKind.PAYMENT:
            return -1
        raise AssertionError(f"Unhandled movement kind: {self!r}")


class Payer(str, Enum):
    """Who handed over a payment."""

    UNKNOWN = "unknown"
    MOTHER = "mother"
    FATHER = "father"
    STUDENT = "student"


class MovementOrigin(str, Enum):
    """Whether a movement was entered by hand or generated by the monthly rollover."""

    MANUAL = "manual"
    ROLLOVER = "rollover"


class MovementDraft(BaseModel):
    """Validated values handed to a movement store."""

    student_id: str
    date: datetime
    kind: MovementKind
    amount: Decimal
    month_key: str
    note: str | None = None
    payer: Payer | None = None
    origin: MovementOrigin = MovementOrigin.MANUAL


class MovementRecord(MovementDraft):
    """A persisted ledger movement."""

    id: int

    model_config = ConfigDict(from_attributes=True)


class MovementCreateRequest(BaseModel):
    """Schema for registering a debt or a payment.

    Fields are deliberately loose; the ledger validates them and reports
    problems with its own error type.
    """

    student_id: str | None = None
    date: datetime | None = None
    kind: str
    amount: Decimal
    note: str | None = None
    payer: Payer | None = None
    month_key: str | None = None


class UndoLastRequest(BaseModel):
    student_id: str
    kind: MovementKind
    month_key: str


class MonthlyTotals(BaseModel):
    """Debt, paid and pending amounts over a range; pending may be negative."""

    debt: Decimal = Decimal("0.00")
    paid: Decimal = Decimal("0.00")
    pending: Decimal = Decimal("0.00")


class StudentMonthlyTotals(MonthlyTotals):
    student_id: str
    name: str


class BalanceRow(BaseModel):
    """A movement together with the cumulative balance after applying it."""

    movement: MovementRecord
    balance: Decimal


class MonthHistoryRow(MonthlyTotals):
    month_key: str


class StatusBuckets(BaseModel):
    """Students split into those who are settled and those who still owe."""

    settled: list[StudentMonthlyTotals] = Field(default_factory=list)
    owing: list[StudentMonthlyTotals] = Field(default_factory=list)


class CollectionPoint(BaseModel):
    """Amount collected (payments only) for one label: a day or a month."""

    label: str
    amount: Decimal
