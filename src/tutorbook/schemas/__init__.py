"""Pydantic schemas for sessions, movements, students and reports."""

from .movement import (
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
from .session import SessionDraft, SessionPatch, SessionRecord, SessionStatus
from .student import StudentRecord

__all__ = [
    "BalanceRow",
    "MonthHistoryRow",
    "MonthlyTotals",
    "MovementDraft",
    "MovementKind",
    "MovementOrigin",
    "MovementRecord",
    "Payer",
    "SessionDraft",
    "SessionPatch",
    "SessionRecord",
    "SessionStatus",
    "StatusBuckets",
    "StudentMonthlyTotals",
    "StudentRecord",
]
