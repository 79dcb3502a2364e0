# tests/conftest.py
from __future__ import annotations

import asyncio
import os
from collections.abc import Generator, Iterator
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ROLLOVER_ON_STARTUP", "false")

from tutorbook.api.v1.dependencies import get_clock, get_marker_store
from tutorbook.core.clock import FixedClock
from tutorbook.db.session import Base
from tutorbook.db.session import get_db as app_get_session
from tutorbook.main import app as fastapi_app
from tutorbook.models import Student
from tutorbook.schemas.student import StudentRecord
from tutorbook.services import LedgerEngine, RecurrenceExpander, SlotCalendar
from tutorbook.stores import (
    ChangeNotifier,
    MemoryMarkerStore,
    MemoryMovementStore,
    MemorySessionStore,
    MemoryStudentDirectory,
)

TEST_DB_URL = "sqlite://"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def fixed_clock() -> FixedClock:
    """Clock frozen on the morning of 2025-02-01."""
    return FixedClock(datetime(2025, 2, 1, 8, 30))


@pytest.fixture()
def marker_store() -> MemoryMarkerStore:
    return MemoryMarkerStore()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    fixed_clock: FixedClock,
    marker_store: MemoryMarkerStore,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_clock] = lambda: fixed_clock
    app.dependency_overrides[get_marker_store] = lambda: marker_store
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_clock, None)
        app.dependency_overrides.pop(get_marker_store, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def db_student(db_session: Session) -> Student:
    """Persist and return an active student."""
    student = Student(name="Lucía Gómez", active=True, price_cents=1500)
    db_session.add(student)
    db_session.commit()
    db_session.refresh(student)
    return student


# --- In-memory collaborators for service tests -----------------------------------


@pytest.fixture()
def notifier() -> ChangeNotifier:
    return ChangeNotifier()


@pytest.fixture()
def session_store(notifier: ChangeNotifier) -> MemorySessionStore:
    return MemorySessionStore(notifier)


@pytest.fixture()
def movement_store(notifier: ChangeNotifier) -> MemoryMovementStore:
    return MemoryMovementStore(notifier)


@pytest.fixture()
def students() -> MemoryStudentDirectory:
    return MemoryStudentDirectory(
        [
            StudentRecord(id="s-ana", name="Ana", price=Decimal("15.00")),
            StudentRecord(id="s-bruno", name="bruno"),
            StudentRecord(id="s-alvaro", name="Álvaro"),
            StudentRecord(id="s-nora", name="Nora", active=False),
        ]
    )


@pytest.fixture()
def calendar(session_store: MemorySessionStore) -> SlotCalendar:
    return SlotCalendar(session_store, capacity=10, lock=asyncio.Lock())


@pytest.fixture()
def small_calendar(session_store: MemorySessionStore) -> SlotCalendar:
    """Calendar with two seats per slot, handy for capacity tests."""
    return SlotCalendar(session_store, capacity=2, lock=asyncio.Lock())


@pytest.fixture()
def expander(calendar: SlotCalendar) -> RecurrenceExpander:
    return RecurrenceExpander(calendar)


@pytest.fixture()
def ledger(movement_store: MemoryMovementStore, students: MemoryStudentDirectory) -> LedgerEngine:
    return LedgerEngine(movement_store, students)
