"""Storage collaborators consumed by the core services."""

from .base import MarkerStore, MovementStore, SessionStore, StudentDirectory
from .events import ChangeEvent, ChangeNotifier, Entity, Operation
from .marker import FileMarkerStore, MemoryMarkerStore
from .memory import MemoryMovementStore, MemorySessionStore, MemoryStudentDirectory

__all__ = [
    "ChangeEvent",
    "ChangeNotifier",
    "Entity",
    "FileMarkerStore",
    "MarkerStore",
    "MemoryMarkerStore",
    "MemoryMovementStore",
    "MemorySessionStore",
    "MemoryStudentDirectory",
    "MovementStore",
    "Operation",
    "SessionStore",
    "StudentDirectory",
]
