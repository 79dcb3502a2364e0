"""Weekly recurrence expansion into individual sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from tutorbook.core.errors import CapacityExceededError, ValidationError
from tutorbook.services.slot_calendar import SlotCalendar

logger = logging.getLogger(__name__)

ISO_WEEKDAYS = range(1, 8)


@dataclass(frozen=True)
class RecurrenceRule:
    """Repeat a daily time window on selected ISO weekdays (1=Monday ... 7=Sunday).

    ``end_date`` is inclusive; when omitted the rule runs for
    ``default_weeks`` weeks from ``start_date``.
    """

    student_id: str
    weekdays: frozenset[int]
    start_date: date
    start_time: time
    end_time: time
    end_date: date | None = None
    title: str | None = None
    default_weeks: int = 8

    @property
    def last_date(self) -> date:
        if self.end_date is not None:
            return self.end_date
        return self.start_date + timedelta(weeks=self.default_weeks)

    def validate(self) -> None:
        if not self.student_id:
            raise ValidationError("A student reference is required")
        if not self.weekdays:
            raise ValidationError("Select at least one weekday")
        invalid = sorted(day for day in self.weekdays if day not in ISO_WEEKDAYS)
        if invalid:
            raise ValidationError(f"Weekdays must be between 1 and 7, got {invalid}")
        if self.start_date > self.last_date:
            raise ValidationError("Recurrence start date must not be after its end date")
        if self.start_time >= self.end_time:
            raise ValidationError("Session start must be before its end")

    def occurrences(self) -> list[date]:
        """Return every matching date in chronological order."""
        days: list[date] = []
        cursor = self.start_date
        while cursor <= self.last_date:
            # isoweekday already maps Sunday to 7
            if cursor.isoweekday() in self.weekdays:
                days.append(cursor)
            cursor += timedelta(days=1)
        return days


@dataclass
class SkippedOccurrence:
    day: date
    reason: str


@dataclass
class RecurrenceReport:
    """Outcome of a recurrence batch: what was created and what was skipped."""

    created: list[tuple[date, int]] = field(default_factory=list)
    skipped: list[SkippedOccurrence] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def summary(self) -> str:
        text = f"created {self.created_count}"
        if self.skipped:
            text += f", skipped {self.skipped_count} due to capacity"
        return text


class RecurrenceExpander:
    """Creates the sessions of a weekly rule one occurrence at a time.

    Each occurrence goes through ``SlotCalendar.create_session`` and is awaited
    before the next one starts, so capacity checks see every earlier creation of
    the same batch. A full slot skips that occurrence only; store failures abort
    the batch and propagate.
    """

    def __init__(self, calendar: SlotCalendar) -> None:
        self.calendar = calendar

    async def expand(self, rule: RecurrenceRule) -> RecurrenceReport:
        rule.validate()
        # Surface window problems once, before anything is written.
        self.calendar.validate_interval(
            rule.student_id,
            datetime.combine(rule.start_date, rule.start_time),
            datetime.combine(rule.start_date, rule.end_time),
        )

        report = RecurrenceReport()
        for day in rule.occurrences():
            try:
                session_id = await self.calendar.create_session(
                    day, rule.student_id, rule.start_time, rule.end_time, rule.title
                )
            except CapacityExceededError as err:
                report.skipped.append(SkippedOccurrence(day=day, reason=str(err)))
                continue
            report.created.append((day, session_id))

        logger.info("Recurrence for student %s: %s", rule.student_id, report.summary())
        return report
