"""Capacity-bounded session calendar.

The operating window of every day is split into fixed-width buckets. A session
occupies every bucket its interval overlaps, so a 16:30-17:30 class counts
toward both the 16:00 and the 17:00 bucket. Occupancy is never stored: it is
recomputed from the session store on each query, which is why deleting a
session frees its buckets without any explicit bookkeeping.

Capacity is checked at the moment of mutation only. Mutations made through
calendars of the same process are serialized by a shared lock; writers in
other processes are not coordinated.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta

from tutorbook.core.errors import CapacityExceededError, NotFoundError, ValidationError
from tutorbook.core.settings import Settings
from tutorbook.schemas.session import (
    DaySummary,
    MonthDay,
    MonthOverview,
    SessionDraft,
    SessionPatch,
    SessionRecord,
    SessionStatus,
    SlotOccupancy,
)
from tutorbook.stores.base import SessionStore
from tutorbook.utils.months import first_day, is_month_key, last_day

logger = logging.getLogger(__name__)

_process_lock: asyncio.Lock | None = None


def get_calendar_lock() -> asyncio.Lock:
    """Return the lock shared by every calendar in this process."""
    global _process_lock
    if _process_lock is None:
        _process_lock = asyncio.Lock()
    return _process_lock


class SlotCalendar:
    """Enforces per-bucket capacity over an injected session store."""

    def __init__(
        self,
        store: SessionStore,
        *,
        opening: time = time(16, 0),
        closing: time = time(22, 0),
        slot_width: timedelta = timedelta(hours=1),
        capacity: int = 10,
        default_title: str = "Class",
        week_starts_on: int = 1,
        lock: asyncio.Lock | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if slot_width <= timedelta(0):
            raise ValueError("slot_width must be positive")
        if not 1 <= week_starts_on <= 7:
            raise ValueError("week_starts_on must be an ISO weekday")
        self.store = store
        self.opening = opening
        self.closing = closing
        self.slot_width = slot_width
        self.capacity = capacity
        self.default_title = default_title
        self.week_starts_on = week_starts_on
        self._lock = lock or asyncio.Lock()

    @classmethod
    def from_settings(
        cls, store: SessionStore, settings: Settings, lock: asyncio.Lock | None = None
    ) -> "SlotCalendar":
        return cls(
            store,
            opening=settings.opening_time,
            closing=settings.closing_time,
            slot_width=settings.slot_width,
            capacity=settings.max_per_slot,
            default_title=settings.default_session_title,
            week_starts_on=settings.week_starts_on,
            lock=lock,
        )

    # --- Bucket geometry -------------------------------------------------------------
    def window(self, day: date) -> tuple[datetime, datetime]:
        """Return the operating window of ``day`` as datetimes."""
        return datetime.combine(day, self.opening), datetime.combine(day, self.closing)

    def buckets_for(self, day: date) -> list[datetime]:
        """Return the start of every bucket in the operating window of ``day``."""
        window_start, window_end = self.window(day)
        buckets: list[datetime] = []
        cursor = window_start
        while cursor < window_end:
            buckets.append(cursor)
            cursor += self.slot_width
        return buckets

    def buckets_overlapping(self, start: datetime, end: datetime) -> list[datetime]:
        """Return the buckets of ``start``'s day that ``[start, end)`` overlaps."""
        return [
            bucket
            for bucket in self.buckets_for(start.date())
            if start < bucket + self.slot_width and end > bucket
        ]

    def validate_interval(self, student_id: str | None, start: datetime, end: datetime) -> None:
        if not student_id:
            raise ValidationError("A student reference is required")
        if start >= end:
            raise ValidationError("Session start must be before its end")
        window_start, window_end = self.window(start.date())
        if start < window_start or end > window_end:
            raise ValidationError(
                f"Session must lie within operating hours "
                f"{self.opening:%H:%M}-{self.closing:%H:%M}"
            )

    # --- Queries ---------------------------------------------------------------------
    async def _occupying(self, start: datetime, end: datetime) -> list[SessionRecord]:
        rows = await self.store.list_by_date_range(start, end)
        return [row for row in rows if row.status.occupies_slot and row.overlaps(start, end)]

    async def sessions_in_slot(self, day: date, bucket_start: datetime | time) -> list[SessionRecord]:
        """Return the sessions occupying the bucket starting at ``bucket_start`` on ``day``."""
        if isinstance(bucket_start, time):
            bucket_start = datetime.combine(day, bucket_start)
        elif bucket_start.date() != day:
            raise ValidationError("Bucket start must fall on the requested day")
        return await self._occupying(bucket_start, bucket_start + self.slot_width)

    async def occupancy(self, day: date, bucket_start: datetime | time) -> int:
        return len(await self.sessions_in_slot(day, bucket_start))

    async def list_day(self, day: date) -> list[SessionRecord]:
        """Return every session of ``day`` (any status) ordered by start."""
        start = datetime.combine(day, time.min)
        return await self.store.list_by_date_range(start, start + timedelta(days=1))

    async def day_summary(self, day: date) -> DaySummary:
        sessions = await self.list_day(day)
        occupying = [row for row in sessions if row.status.occupies_slot]
        slots = [
            SlotOccupancy(
                bucket_start=bucket,
                bucket_end=bucket + self.slot_width,
                used=sum(1 for row in occupying if row.overlaps(bucket, bucket + self.slot_width)),
                capacity=self.capacity,
            )
            for bucket in self.buckets_for(day)
        ]
        return DaySummary(
            day=day,
            total_sessions=len(occupying),
            distinct_students=len({row.student_id for row in occupying}),
            slots=slots,
        )

    def month_grid(self, key: str) -> list[date]:
        """Return the days of month ``key`` padded out to whole weeks."""
        if not is_month_key(key):
            raise ValidationError(f"Invalid month key: {key!r}")
        first, last = first_day(key), last_day(key)
        start = first - timedelta(days=(first.isoweekday() - self.week_starts_on) % 7)
        end = last + timedelta(days=(self.week_starts_on - 1 - last.isoweekday()) % 7)
        return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]

    async def month_overview(self, key: str) -> MonthOverview:
        """Per-day session and student counts for the month grid of ``key``.

        Only sessions of the month itself that start within operating hours
        are counted; padding days from neighbouring months report zero.
        """
        grid = self.month_grid(key)
        first = datetime.combine(first_day(key), time.min)
        end = datetime.combine(last_day(key), time.min) + timedelta(days=1)
        by_day: dict[date, list[SessionRecord]] = {}
        for row in await self.store.list_by_date_range(first, end):
            if row.start < first or not row.status.occupies_slot:
                continue
            if not self.opening <= row.start.time() < self.closing:
                continue
            by_day.setdefault(row.day, []).append(row)

        days = []
        for day in grid:
            rows = by_day.get(day, [])
            days.append(
                MonthDay(
                    day=day,
                    in_month=day.month == first.month,
                    total_sessions=len(rows),
                    distinct_students=len({row.student_id for row in rows}),
                )
            )
        return MonthOverview(month_key=key, week_starts_on=self.week_starts_on, days=days)

    async def _check_capacity(
        self, start: datetime, end: datetime, exclude_id: int | None = None
    ) -> None:
        buckets = self.buckets_overlapping(start, end)
        if not buckets:
            return
        neighbours = [
            row
            for row in await self._occupying(buckets[0], buckets[-1] + self.slot_width)
            if row.id != exclude_id
        ]
        for bucket in buckets:
            bucket_end = bucket + self.slot_width
            used = sum(1 for row in neighbours if row.overlaps(bucket, bucket_end))
            if used >= self.capacity:
                logger.info("Slot %s is full (%d/%d)", bucket, used, self.capacity)
                raise CapacityExceededError(bucket, self.capacity)

    # --- Mutations -------------------------------------------------------------------
    async def create_session(
        self,
        day: date,
        student_id: str,
        start: time,
        end: time,
        title: str | None = None,
    ) -> int:
        """Book a session on ``day`` from ``start`` to ``end``.

        Raises:
            ValidationError: On a missing student, an empty interval or one outside
                the operating window.
            CapacityExceededError: If any overlapped bucket is already full.
        """
        start_at = datetime.combine(day, start)
        end_at = datetime.combine(day, end)
        self.validate_interval(student_id, start_at, end_at)
        async with self._lock:
            await self._check_capacity(start_at, end_at)
            session_id = await self.store.create(
                SessionDraft(
                    student_id=student_id,
                    start=start_at,
                    end=end_at,
                    title=title or self.default_title,
                )
            )
        logger.debug("Created session %s for %s at %s", session_id, student_id, start_at)
        return session_id

    async def update_session(
        self,
        session_id: int,
        new_start: datetime,
        new_end: datetime,
        new_student_id: str | None = None,
    ) -> SessionRecord:
        """Move a session to a new interval, optionally reassigning its student.

        The session's own current placement is ignored when counting occupancy.
        On any failure the stored session is left as it was.
        """
        async with self._lock:
            current = await self.store.get(session_id)
            if current is None:
                raise NotFoundError("Session", session_id)
            student_id = new_student_id or current.student_id
            self.validate_interval(student_id, new_start, new_end)
            if current.status.occupies_slot:
                await self._check_capacity(new_start, new_end, exclude_id=session_id)
            patch = SessionPatch(start=new_start, end=new_end, student_id=new_student_id)
            if not await self.store.update(session_id, patch):
                raise NotFoundError("Session", session_id)
        return current.model_copy(update=patch.changes())

    async def set_status(self, session_id: int, status: SessionStatus) -> SessionRecord:
        """Cancel, mark as no-show or restore a session.

        Moving a canceled session back into an occupying status needs a free seat
        in every bucket it overlaps.
        """
        async with self._lock:
            current = await self.store.get(session_id)
            if current is None:
                raise NotFoundError("Session", session_id)
            if status.occupies_slot and not current.status.occupies_slot:
                await self._check_capacity(current.start, current.end, exclude_id=session_id)
            if not await self.store.update(session_id, SessionPatch(status=status)):
                raise NotFoundError("Session", session_id)
        return current.model_copy(update={"status": status})

    async def delete_session(self, session_id: int) -> None:
        async with self._lock:
            if not await self.store.delete(session_id):
                raise NotFoundError("Session", session_id)

    async def purge_outside_hours(self, first_day: date, last_day: date) -> int:
        """Delete sessions between two days that start outside operating hours."""
        start = datetime.combine(first_day, time.min)
        end = datetime.combine(last_day, time.min) + timedelta(days=1)
        removed = 0
        async with self._lock:
            for row in await self.store.list_by_date_range(start, end):
                if self.opening <= row.start.time() < self.closing:
                    continue
                if await self.store.delete(row.id):
                    removed += 1
        if removed:
            logger.info("Purged %d sessions outside %s-%s", removed, self.opening, self.closing)
        return removed
