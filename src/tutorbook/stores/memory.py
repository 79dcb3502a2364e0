"""In-process store implementations.

Used by the test-suite and by tooling that does not need a database. Records
are copied on the way in and out so callers never share mutable state with the
store.
"""

from __future__ import annotations

from datetime import datetime
from itertools import count

from tutorbook.schemas.movement import MovementDraft, MovementRecord
from tutorbook.schemas.session import SessionDraft, SessionPatch, SessionRecord
from tutorbook.schemas.student import StudentRecord
from tutorbook.stores.events import ChangeEvent, ChangeNotifier, Entity, Operation


class MemorySessionStore:
    """Dictionary-backed session store."""

    def __init__(self, notifier: ChangeNotifier | None = None) -> None:
        self.notifier = notifier or ChangeNotifier()
        self._rows: dict[int, SessionRecord] = {}
        self._ids = count(1)

    async def create(self, draft: SessionDraft) -> int:
        session_id = next(self._ids)
        self._rows[session_id] = SessionRecord(id=session_id, **draft.model_dump())
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.CREATED, session_id))
        return session_id

    async def get(self, session_id: int) -> SessionRecord | None:
        row = self._rows.get(session_id)
        return row.model_copy() if row is not None else None

    async def update(self, session_id: int, patch: SessionPatch) -> bool:
        row = self._rows.get(session_id)
        if row is None:
            return False
        self._rows[session_id] = row.model_copy(update=patch.changes())
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.UPDATED, session_id))
        return True

    async def delete(self, session_id: int) -> bool:
        if self._rows.pop(session_id, None) is None:
            return False
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.DELETED, session_id))
        return True

    async def list_by_date_range(self, start: datetime, end: datetime) -> list[SessionRecord]:
        rows = [row.model_copy() for row in self._rows.values() if row.overlaps(start, end)]
        return sorted(rows, key=lambda row: (row.start, row.id))


class MemoryMovementStore:
    """Dictionary-backed movement store."""

    def __init__(self, notifier: ChangeNotifier | None = None) -> None:
        self.notifier = notifier or ChangeNotifier()
        self._rows: dict[int, MovementRecord] = {}
        self._ids = count(1)

    async def create(self, draft: MovementDraft) -> int:
        movement_id = next(self._ids)
        self._rows[movement_id] = MovementRecord(id=movement_id, **draft.model_dump())
        self.notifier.publish(ChangeEvent(Entity.MOVEMENT, Operation.CREATED, movement_id))
        return movement_id

    async def get(self, movement_id: int) -> MovementRecord | None:
        row = self._rows.get(movement_id)
        return row.model_copy() if row is not None else None

    async def delete(self, movement_id: int) -> bool:
        if self._rows.pop(movement_id, None) is None:
            return False
        self.notifier.publish(ChangeEvent(Entity.MOVEMENT, Operation.DELETED, movement_id))
        return True

    async def list(self) -> list[MovementRecord]:
        return sorted(
            (row.model_copy() for row in self._rows.values()),
            key=lambda row: (row.date, row.id),
        )


class MemoryStudentDirectory:
    """Fixed list of students, handy for tests and scripts."""

    def __init__(self, students: list[StudentRecord] | None = None) -> None:
        self._students = {student.id: student for student in students or []}

    def add(self, student: StudentRecord) -> None:
        self._students[student.id] = student

    async def list(self) -> list[StudentRecord]:
        return list(self._students.values())

    async def get(self, student_id: str) -> StudentRecord | None:
        return self._students.get(student_id)
