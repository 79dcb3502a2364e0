"""SQLAlchemy model for scheduled class sessions."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.db.session import Base


class ClassSession(Base):
    """A class booked for one student in a time interval.

    Times are naive local wall-clock values. ``student_id`` is an opaque
    reference and intentionally not a foreign key.
    """

    __tablename__ = "class_session"
    __table_args__ = (Index("ix_class_session_start_end", "start", "end"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # One of SessionStatus: scheduled, canceled, no_show.
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="scheduled")
