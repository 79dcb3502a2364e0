"""Tutorbook: scheduling and ledger core for a small tutoring practice."""

__version__ = "0.1.0"
