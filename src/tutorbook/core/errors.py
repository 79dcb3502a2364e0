"""Error taxonomy shared by the scheduling and ledger services."""

from __future__ import annotations

from datetime import datetime
from typing import Any


class TutorbookError(RuntimeError):
    """Base exception for every failure raised by the core services."""


class ValidationError(TutorbookError):
    """Raised when session or movement input is malformed.

    Validation always runs before any mutation, so nothing has been persisted
    when this is raised.
    """


class CapacityExceededError(TutorbookError):
    """Raised when a time bucket already holds the maximum number of sessions."""

    def __init__(self, bucket_start: datetime, capacity: int) -> None:
        self.bucket_start = bucket_start
        self.capacity = capacity
        super().__init__(
            f"Slot {bucket_start:%Y-%m-%d %H:%M} is full ({capacity}/{capacity})"
        )


class NotFoundError(TutorbookError):
    """Raised when mutating or deleting an identifier the store does not know."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class StoreError(TutorbookError):
    """Wraps a persistence failure without interpreting it."""


# Mapping of core exceptions to HTTP status codes
ERROR_STATUS_CODES: dict[type[TutorbookError], int] = {
    ValidationError: 422,
    CapacityExceededError: 409,
    NotFoundError: 404,
    StoreError: 503,
}


def status_code_for(exc: TutorbookError) -> int:
    """Return the HTTP status code registered for ``exc`` (500 if none)."""
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return 500
