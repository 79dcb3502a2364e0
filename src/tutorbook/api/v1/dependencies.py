"""Shared API dependencies wiring stores and services to a request."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from tutorbook.core.clock import Clock, SystemClock
from tutorbook.core.settings import settings
from tutorbook.db.session import get_db
from tutorbook.services import (
    LedgerEngine,
    RecurrenceExpander,
    ReportService,
    RolloverScheduler,
    SlotCalendar,
    get_calendar_lock,
    get_rollover_lock,
)
from tutorbook.stores import FileMarkerStore, MarkerStore
from tutorbook.stores.sql import SqlMovementStore, SqlSessionStore, SqlStudentDirectory

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_clock() -> Clock:
    """Return the wall clock used for month boundaries."""
    return SystemClock()


def get_marker_store() -> MarkerStore:
    """Return the local marker store holding the last rollover month."""
    return FileMarkerStore(settings.rollover_marker_path)


def get_calendar(db: SessionDep) -> SlotCalendar:
    return SlotCalendar.from_settings(SqlSessionStore(db), settings, lock=get_calendar_lock())


def get_ledger(db: SessionDep) -> LedgerEngine:
    return LedgerEngine(SqlMovementStore(db), SqlStudentDirectory(db))


CalendarDep = Annotated[SlotCalendar, Depends(get_calendar)]
LedgerDep = Annotated[LedgerEngine, Depends(get_ledger)]


def get_recurrence_expander(calendar: CalendarDep) -> RecurrenceExpander:
    return RecurrenceExpander(calendar)


def get_report_service(ledger: LedgerDep) -> ReportService:
    return ReportService(ledger)


def get_rollover_scheduler(
    db: SessionDep,
    ledger: LedgerDep,
    marker: Annotated[MarkerStore, Depends(get_marker_store)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> RolloverScheduler:
    return RolloverScheduler(
        ledger,
        SqlStudentDirectory(db),
        marker,
        clock,
        marker_key=settings.rollover_marker_key,
        note=settings.rollover_note,
        lock=get_rollover_lock(),
    )


RecurrenceDep = Annotated[RecurrenceExpander, Depends(get_recurrence_expander)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
RolloverDep = Annotated[RolloverScheduler, Depends(get_rollover_scheduler)]
