# src/tutorbook/models/__init__.py
"""SQLAlchemy models for Tutorbook."""

from .class_session import ClassSession
from .movement import Movement
from .student import Student

__all__ = [
    "ClassSession",
    "Movement",
    "Student",
]
