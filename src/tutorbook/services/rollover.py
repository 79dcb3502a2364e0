"""Once-per-month carry-over of unpaid balances into the new month."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, time

from tutorbook.core.clock import Clock
from tutorbook.schemas.movement import MovementKind, MovementOrigin
from tutorbook.services.ledger import LedgerEngine
from tutorbook.stores.base import MarkerStore, StudentDirectory
from tutorbook.utils.money import ZERO
from tutorbook.utils.months import MonthRange, first_day, month_key, previous_month_key

logger = logging.getLogger(__name__)

DEFAULT_MARKER_KEY = "rollover.doneFor"
DEFAULT_NOTE = "Carried over from previous month"

_process_lock: asyncio.Lock | None = None


def get_rollover_lock() -> asyncio.Lock:
    """Return the lock shared by every scheduler in this process."""
    global _process_lock
    if _process_lock is None:
        _process_lock = asyncio.Lock()
    return _process_lock


@dataclass(frozen=True)
class Pending:
    """The current month has not been rolled over yet."""

    month_key: str


@dataclass(frozen=True)
class Done:
    """The rollover for ``month_key`` has completed."""

    month_key: str


RolloverState = Pending | Done


@dataclass
class RolloverResult:
    month_key: str
    created: list[int] = field(default_factory=list)
    skipped_students: list[str] = field(default_factory=list)
    already_done: bool = False


class RolloverScheduler:
    """Carries each active student's positive pending balance into the new month.

    The marker under ``marker_key`` holds the last month that completed; the
    run is a no-op while it matches the clock's month. Students that already
    hold a rollover movement in the current month are skipped, so re-running
    after an interrupted run does not double the carried debt.
    """

    def __init__(
        self,
        ledger: LedgerEngine,
        students: StudentDirectory,
        marker: MarkerStore,
        clock: Clock,
        *,
        marker_key: str = DEFAULT_MARKER_KEY,
        note: str = DEFAULT_NOTE,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self.ledger = ledger
        self.students = students
        self.marker = marker
        self.clock = clock
        self.marker_key = marker_key
        self.note = note
        self._lock = lock or asyncio.Lock()

    def state(self) -> RolloverState:
        current = month_key(self.clock.now())
        if self.marker.read(self.marker_key) == current:
            return Done(current)
        return Pending(current)

    async def run(self) -> RolloverResult:
        async with self._lock:
            state = self.state()
            if isinstance(state, Done):
                logger.debug("Rollover for %s already done", state.month_key)
                return RolloverResult(month_key=state.month_key, already_done=True)
            return await self._roll_over(state.month_key)

    async def _roll_over(self, current: str) -> RolloverResult:
        previous = MonthRange.for_month(previous_month_key(current))
        current_range = MonthRange.for_month(current)
        carried_on = datetime.combine(first_day(current), time.min)
        result = RolloverResult(month_key=current)

        already_carried = {
            row.student_id
            for row in await self.ledger.list_movements(month_range=current_range)
            if row.origin is MovementOrigin.ROLLOVER
        }

        for student in await self.students.list():
            if not student.active:
                continue
            if student.id in already_carried:
                result.skipped_students.append(student.id)
                continue
            totals = await self.ledger.monthly_totals(student.id, previous)
            if totals.pending <= ZERO:
                continue
            movement = await self.ledger.add_movement(
                student_id=student.id,
                date=carried_on,
                kind=MovementKind.DEBT,
                amount=totals.pending,
                note=self.note,
                month_key=current,
                origin=MovementOrigin.ROLLOVER,
            )
            result.created.append(movement.id)
            logger.info("Carried %s for student %s into %s", totals.pending, student.id, current)

        self.marker.write(self.marker_key, current)
        logger.info(
            "Rollover into %s: %d carried, %d already present",
            current,
            len(result.created),
            len(result.skipped_students),
        )
        return result
