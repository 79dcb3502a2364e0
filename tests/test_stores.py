"""Tests for the store adapters, the change notifier and the marker stores."""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tutorbook.core.errors import StoreError
from tutorbook.models import Student
from tutorbook.schemas.movement import MovementDraft, MovementKind, MovementOrigin, Payer
from tutorbook.schemas.session import SessionDraft, SessionPatch, SessionStatus
from tutorbook.stores import (
    ChangeEvent,
    ChangeNotifier,
    Entity,
    FileMarkerStore,
    MemoryMarkerStore,
    Operation,
)
from tutorbook.stores.sql import SqlMovementStore, SqlSessionStore, SqlStudentDirectory


def test_notifier_survives_failing_subscriber(caplog: pytest.LogCaptureFixture) -> None:
    notifier = ChangeNotifier()
    received: list[ChangeEvent] = []

    def broken(_event: ChangeEvent) -> None:
        raise RuntimeError("boom")

    notifier.subscribe(broken)
    notifier.subscribe(received.append)
    event = ChangeEvent(Entity.MOVEMENT, Operation.CREATED, 1)

    with caplog.at_level(logging.WARNING, logger="tutorbook.stores.events"):
        notifier.publish(event)

    assert received == [event]
    assert "Change subscriber failed" in caplog.text


def test_memory_marker_store() -> None:
    store = MemoryMarkerStore({"rollover.doneFor": "2025-01"})
    assert store.read("rollover.doneFor") == "2025-01"
    store.write("rollover.doneFor", "2025-02")
    assert store.read("rollover.doneFor") == "2025-02"
    assert store.read("missing") is None


def test_file_marker_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "state" / "local_state.json"
    store = FileMarkerStore(path)
    assert store.read("rollover.doneFor") is None

    store.write("rollover.doneFor", "2025-02")
    store.write("theme", "dark")

    assert FileMarkerStore(path).read("rollover.doneFor") == "2025-02"
    assert FileMarkerStore(path).read("theme") == "dark"
    assert not path.with_suffix(".json.tmp").exists()


def test_file_marker_store_reports_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "local_state.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        FileMarkerStore(path).read("rollover.doneFor")


@pytest.mark.asyncio
async def test_sql_session_store(db_session: Session) -> None:
    notifier = ChangeNotifier()
    events: list[ChangeEvent] = []
    notifier.subscribe(events.append)
    store = SqlSessionStore(db_session, notifier)

    session_id = await store.create(
        SessionDraft(
            student_id="s-1",
            start=datetime(2025, 1, 6, 16, 30),
            end=datetime(2025, 1, 6, 17, 30),
            title="Class",
        )
    )
    await store.create(
        SessionDraft(
            student_id="s-2",
            start=datetime(2025, 1, 6, 18),
            end=datetime(2025, 1, 6, 19),
            title="Class",
        )
    )

    in_bucket = await store.list_by_date_range(datetime(2025, 1, 6, 17), datetime(2025, 1, 6, 18))
    assert [row.id for row in in_bucket] == [session_id]

    assert await store.update(session_id, SessionPatch(status=SessionStatus.CANCELED))
    record = await store.get(session_id)
    assert record is not None and record.status is SessionStatus.CANCELED

    assert await store.delete(session_id)
    assert not await store.delete(session_id)
    assert not await store.update(session_id, SessionPatch(title="x"))
    assert [event.operation for event in events] == [
        Operation.CREATED,
        Operation.CREATED,
        Operation.UPDATED,
        Operation.DELETED,
    ]


@pytest.mark.asyncio
async def test_sql_movement_store_keeps_cents_exact(db_session: Session) -> None:
    store = SqlMovementStore(db_session, ChangeNotifier())
    movement_id = await store.create(
        MovementDraft(
            student_id="s-1",
            date=datetime(2025, 1, 5),
            kind=MovementKind.PAYMENT,
            amount=Decimal("0.10"),
            month_key="2025-01",
            payer=Payer.FATHER,
            origin=MovementOrigin.MANUAL,
        )
    )

    record = await store.get(movement_id)

    assert record is not None
    assert record.amount == Decimal("0.10")
    assert record.payer is Payer.FATHER
    assert [row.id for row in await store.list()] == [movement_id]
    assert await store.delete(movement_id)
    assert await store.list() == []


@pytest.mark.asyncio
async def test_sql_student_directory(db_session: Session, db_student: Student) -> None:
    directory = SqlStudentDirectory(db_session)

    [record] = await directory.list()

    assert record.id == db_student.id
    assert record.price == Decimal("15.00")
    assert await directory.get("missing") is None


@pytest.mark.asyncio
async def test_sql_failures_become_store_errors(db_session: Session, mocker) -> None:
    store = SqlMovementStore(db_session, ChangeNotifier())
    mocker.patch.object(
        db_session, "execute", side_effect=OperationalError("SELECT", {}, Exception("locked"))
    )
    rollback = mocker.spy(db_session, "rollback")

    with pytest.raises(StoreError):
        await store.list()
    rollback.assert_called_once()
