"""Class session endpoints: booking, rescheduling and day overviews."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, Response, status
from pydantic import BaseModel

from tutorbook.core.settings import settings
from tutorbook.schemas.session import (
    DaySummary,
    MonthOverview,
    RecurrenceRequest,
    SessionCreateRequest,
    SessionRecord,
    SessionStatusRequest,
    SessionUpdateRequest,
)
from tutorbook.services import RecurrenceRule

from ..dependencies import CalendarDep, RecurrenceDep

router = APIRouter(prefix="/sessions", tags=["sessions"])


class SessionCreatedResponse(BaseModel):
    id: int


class RecurrenceResponse(BaseModel):
    created: list[SessionCreatedResponse]
    skipped: list[date]
    summary: str


class PurgeResponse(BaseModel):
    removed: int


@router.get("/", response_model=list[SessionRecord])
async def list_sessions(calendar: CalendarDep, day: date) -> list[SessionRecord]:
    """List every session of a day, any status, ordered by start."""
    return await calendar.list_day(day)


@router.get("/summary", response_model=DaySummary)
async def get_day_summary(calendar: CalendarDep, day: date) -> DaySummary:
    return await calendar.day_summary(day)


@router.get("/month", response_model=MonthOverview)
async def get_month_overview(
    calendar: CalendarDep, month: str = Query(..., description="Month key, YYYY-MM")
) -> MonthOverview:
    """Per-day counts over the month grid, padded to whole weeks."""
    return await calendar.month_overview(month)


@router.post("/", response_model=SessionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreateRequest, calendar: CalendarDep
) -> SessionCreatedResponse:
    """Book a single session, subject to slot capacity."""
    session_id = await calendar.create_session(
        payload.day, payload.student_id, payload.start, payload.end, payload.title
    )
    return SessionCreatedResponse(id=session_id)


@router.post("/recurring", response_model=RecurrenceResponse, status_code=status.HTTP_201_CREATED)
async def create_recurring_sessions(
    payload: RecurrenceRequest, expander: RecurrenceDep
) -> RecurrenceResponse:
    """Create weekly repeating sessions; full slots are skipped and reported."""
    rule = RecurrenceRule(
        student_id=payload.student_id,
        weekdays=frozenset(payload.weekdays),
        start_date=payload.start_date,
        end_date=payload.end_date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        title=payload.title,
        default_weeks=settings.recurrence_default_weeks,
    )
    report = await expander.expand(rule)
    return RecurrenceResponse(
        created=[SessionCreatedResponse(id=session_id) for _, session_id in report.created],
        skipped=[item.day for item in report.skipped],
        summary=report.summary(),
    )


@router.patch("/{session_id}", response_model=SessionRecord)
async def update_session(
    session_id: int, payload: SessionUpdateRequest, calendar: CalendarDep
) -> SessionRecord:
    return await calendar.update_session(
        session_id, payload.start, payload.end, payload.student_id
    )


@router.put("/{session_id}/status", response_model=SessionRecord)
async def set_session_status(
    session_id: int, payload: SessionStatusRequest, calendar: CalendarDep
) -> SessionRecord:
    """Cancel, mark as no-show, or restore a session."""
    return await calendar.set_status(session_id, payload.status)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, calendar: CalendarDep) -> Response:
    await calendar.delete_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/purge-outside-hours", response_model=PurgeResponse)
async def purge_outside_hours(
    calendar: CalendarDep,
    first_day: date = Query(...),
    last_day: date = Query(...),
) -> PurgeResponse:
    """Remove sessions starting outside operating hours between two days."""
    return PurgeResponse(removed=await calendar.purge_outside_hours(first_day, last_day))
