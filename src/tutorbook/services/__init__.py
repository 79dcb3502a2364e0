"""Business logic services for Tutorbook."""

from .ledger import LedgerEngine
from .recurrence import RecurrenceExpander, RecurrenceReport, RecurrenceRule
from .reports import ReportService
from .rollover import Done, Pending, RolloverResult, RolloverScheduler, get_rollover_lock
from .slot_calendar import SlotCalendar, get_calendar_lock

__all__ = [
    "Done",
    "LedgerEngine",
    "Pending",
    "RecurrenceExpander",
    "RecurrenceReport",
    "RecurrenceRule",
    "ReportService",
    "RolloverResult",
    "RolloverScheduler",
    "SlotCalendar",
    "get_calendar_lock",
    "get_rollover_lock",
]
