"""Session-related Pydantic schemas."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    """Closed set of states a class session can be in."""

    SCHEDULED = "scheduled"
    CANCELED = "canceled"
    NO_SHOW = "no_show"

    @property
    def occupies_slot(self) -> bool:
        """Return True when a session in this state counts toward capacity."""
        if self is SessionStatus.SCHEDULED:
            return True
        if self is SessionStatus.NO_SHOW:
            # The seat was held even though the student did not come.
            return True
        if self is SessionStatus.CANCELED:
            return False
        raise AssertionError(f"Unhandled session status: {self!r}")


class SessionDraft(BaseModel):
    """Values handed to a session store when creating a session."""

    student_id: str
    start: datetime
    end: datetime
    title: str
    status: SessionStatus = SessionStatus.SCHEDULED


class SessionPatch(BaseModel):
    """Partial update for a stored session; ``None`` fields are left untouched."""

    student_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    title: str | None = None
    status: SessionStatus | None = None

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)


class SessionRecord(BaseModel):
    """A persisted class session."""

    id: int
    student_id: str
    start: datetime
    end: datetime
    title: str
    status: SessionStatus = SessionStatus.SCHEDULED

    model_config = ConfigDict(from_attributes=True)

    @property
    def day(self) -> date:
        return self.start.date()

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Return True if ``[self.start, self.end)`` intersects ``[start, end)``."""
        return self.start < end and self.end > start


class SessionCreateRequest(BaseModel):
    """Schema for creating a single session on a given day."""

    student_id: str = Field(..., description="Opaque student reference")
    day: date
    start: time
    end: time
    title: str | None = None


class SessionUpdateRequest(BaseModel):
    """Schema for rescheduling a session."""

    start: datetime
    end: datetime
    student_id: str | None = None


class SessionStatusRequest(BaseModel):
    status: SessionStatus


class RecurrenceRequest(BaseModel):
    """Schema for creating weekly repeating sessions."""

    student_id: str
    weekdays: list[int] = Field(..., description="ISO weekdays, 1=Monday ... 7=Sunday")
    start_date: date
    end_date: date | None = None
    start_time: time
    end_time: time
    title: str | None = None


class SlotOccupancy(BaseModel):
    """Usage of one time bucket."""

    bucket_start: datetime
    bucket_end: datetime
    used: int
    capacity: int


class DaySummary(BaseModel):
    """Per-day overview: totals plus per-bucket occupancy."""

    day: date
    total_sessions: int
    distinct_students: int
    slots: list[SlotOccupancy]


class MonthDay(BaseModel):
    """One cell of the month grid."""

    day: date
    in_month: bool
    total_sessions: int
    distinct_students: int


class MonthOverview(BaseModel):
    """Month grid padded to whole weeks starting on ``week_starts_on``."""

    month_key: str
    week_starts_on: int
    days: list[MonthDay]
