"""SQLAlchemy-backed store implementations.

Every ``SQLAlchemyError`` is rolled back and re-raised as ``StoreError`` so the
services see one failure type regardless of the backend.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tutorbook.core.errors import StoreError
from tutorbook.models import ClassSession, Movement, Student
from tutorbook.schemas.movement import MovementDraft, MovementKind, MovementOrigin, MovementRecord, Payer
from tutorbook.schemas.session import SessionDraft, SessionPatch, SessionRecord, SessionStatus
from tutorbook.schemas.student import StudentRecord
from tutorbook.stores.events import ChangeEvent, ChangeNotifier, Entity, Operation, get_notifier
from tutorbook.utils.money import from_cents, to_cents

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Database failure while trying to %s: %s", action, err)
        raise StoreError(f"Could not {action}") from err


def _session_record(row: ClassSession) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        student_id=row.student_id,
        start=row.start,
        end=row.end,
        title=row.title,
        status=SessionStatus(row.status),
    )


def _movement_record(row: Movement) -> MovementRecord:
    return MovementRecord(
        id=row.id,
        student_id=row.student_id or "",
        date=row.date,
        kind=MovementKind(row.kind),
        amount=from_cents(row.amount_cents),
        month_key=row.month_key,
        note=row.note,
        payer=Payer(row.payer) if row.payer else None,
        origin=MovementOrigin(row.origin),
    )


def student_record(row: Student) -> StudentRecord:
    return StudentRecord(
        id=row.id,
        name=row.name,
        active=row.active,
        color=row.color,
        price=from_cents(row.price_cents) if row.price_cents is not None else None,
        note=row.note,
    )


class SqlSessionStore:
    """Session store on top of a synchronous SQLAlchemy session."""

    def __init__(self, db: Session, notifier: ChangeNotifier | None = None) -> None:
        self.db = db
        self.notifier = notifier or get_notifier()

    async def create(self, draft: SessionDraft) -> int:
        with _translate_errors(self.db, "create session"):
            row = ClassSession(
                student_id=draft.student_id,
                title=draft.title,
                start=draft.start,
                end=draft.end,
                status=draft.status.value,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.CREATED, row.id))
        return row.id

    async def get(self, session_id: int) -> SessionRecord | None:
        with _translate_errors(self.db, "load session"):
            row = self.db.get(ClassSession, session_id)
        return _session_record(row) if row is not None else None

    async def update(self, session_id: int, patch: SessionPatch) -> bool:
        with _translate_errors(self.db, "update session"):
            row = self.db.get(ClassSession, session_id)
            if row is None:
                return False
            for field, value in patch.changes().items():
                if isinstance(value, SessionStatus):
                    value = value.value
                setattr(row, field, value)
            self.db.commit()
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.UPDATED, session_id))
        return True

    async def delete(self, session_id: int) -> bool:
        with _translate_errors(self.db, "delete session"):
            row = self.db.get(ClassSession, session_id)
            if row is None:
                return False
            self.db.delete(row)
            self.db.commit()
        self.notifier.publish(ChangeEvent(Entity.SESSION, Operation.DELETED, session_id))
        return True

    async def list_by_date_range(self, start: datetime, end: datetime) -> list[SessionRecord]:
        stmt = (
            select(ClassSession)
            .where(ClassSession.start < end, ClassSession.end > start)
            .order_by(ClassSession.start, ClassSession.id)
        )
        with _translate_errors(self.db, "list sessions"):
            rows = self.db.execute(stmt).scalars().all()
        return [_session_record(row) for row in rows]


class SqlMovementStore:
    """Movement store on top of a synchronous SQLAlchemy session."""

    def __init__(self, db: Session, notifier: ChangeNotifier | None = None) -> None:
        self.db = db
        self.notifier = notifier or get_notifier()

    async def create(self, draft: MovementDraft) -> int:
        with _translate_errors(self.db, "create movement"):
            row = Movement(
                student_id=draft.student_id,
                date=draft.date,
                kind=draft.kind.value,
                amount_cents=to_cents(draft.amount),
                month_key=draft.month_key,
                note=draft.note,
                payer=draft.payer.value if draft.payer else None,
                origin=draft.origin.value,
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        self.notifier.publish(ChangeEvent(Entity.MOVEMENT, Operation.CREATED, row.id))
        return row.id

    async def get(self, movement_id: int) -> MovementRecord | None:
        with _translate_errors(self.db, "load movement"):
            row = self.db.get(Movement, movement_id)
        return _movement_record(row) if row is not None else None

    async def delete(self, movement_id: int) -> bool:
        with _translate_errors(self.db, "delete movement"):
            row = self.db.get(Movement, movement_id)
            if row is None:
                return False
            self.db.delete(row)
            self.db.commit()
        self.notifier.publish(ChangeEvent(Entity.MOVEMENT, Operation.DELETED, movement_id))
        return True

    async def list(self) -> list[MovementRecord]:
        stmt = select(Movement).order_by(Movement.date, Movement.id)
        with _translate_errors(self.db, "list movements"):
            rows = self.db.execute(stmt).scalars().all()
        return [_movement_record(row) for row in rows]


class SqlStudentDirectory:
    """Student directory reading the ``student`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def list(self) -> list[StudentRecord]:
        with _translate_errors(self.db, "list students"):
            rows = self.db.execute(select(Student).order_by(Student.name)).scalars().all()
        return [student_record(row) for row in rows]

    async def get(self, student_id: str) -> StudentRecord | None:
        with _translate_errors(self.db, "load student"):
            row = self.db.get(Student, student_id)
        return student_record(row) if row is not None else None
