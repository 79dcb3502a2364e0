"""Interfaces the core requires from its storage collaborators."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from tutorbook.schemas.movement import MovementDraft, MovementRecord
from tutorbook.schemas.session import SessionDraft, SessionPatch, SessionRecord
from tutorbook.schemas.student import StudentRecord
from tutorbook.stores.events import ChangeNotifier


class SessionStore(Protocol):
    """Persistence for class sessions."""

    notifier: ChangeNotifier

    async def create(self, draft: SessionDraft) -> int: ...

    async def get(self, session_id: int) -> SessionRecord | None: ...

    async def update(self, session_id: int, patch: SessionPatch) -> bool:
        """Apply ``patch``; return False when no such session exists."""
        ...

    async def delete(self, session_id: int) -> bool:
        """Delete a session; return False when no such session exists."""
        ...

    async def list_by_date_range(self, start: datetime, end: datetime) -> list[SessionRecord]:
        """Return sessions overlapping ``[start, end)`` ordered by start."""
        ...


class MovementStore(Protocol):
    """Persistence for ledger movements."""

    notifier: ChangeNotifier

    async def create(self, draft: MovementDraft) -> int: ...

    async def get(self, movement_id: int) -> MovementRecord | None: ...

    async def delete(self, movement_id: int) -> bool: ...

    async def list(self) -> list[MovementRecord]: ...


class StudentDirectory(Protocol):
    """Read access to the students owned by another part of the application."""

    async def list(self) -> list[StudentRecord]: ...

    async def get(self, student_id: str) -> StudentRecord | None: ...


class MarkerStore(Protocol):
    """Local key/value store holding small pieces of per-device state."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...
