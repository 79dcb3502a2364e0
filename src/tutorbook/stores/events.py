"""Typed change notifications published by the stores.

Delivery is best-effort: a subscriber that raises is logged and skipped, the
mutation that triggered the event has already been committed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from threading import Lock

logger = logging.getLogger(__name__)


class Entity(str, Enum):
    SESSION = "session"
    MOVEMENT = "movement"
    STUDENT = "student"


class Operation(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A single committed change to one stored entity."""

    entity: Entity
    operation: Operation
    entity_id: int | str


Subscriber = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """Fan-out of change events to registered subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                logger.warning("Change subscriber failed for %s", event, exc_info=True)


_default_notifier = ChangeNotifier()


def get_notifier() -> ChangeNotifier:
    """Return the process-wide notifier shared by the SQL stores."""
    return _default_notifier
