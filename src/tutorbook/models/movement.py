"""SQLAlchemy model for ledger movements."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.db.session import Base


class Movement(Base):
    """A debt or payment recorded against a student."""

    __tablename__ = "movement"
    __table_args__ = (Index("ix_movement_student_month", "student_id", "month_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Nullable so movements survive the removal of their student.
    student_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    # Stored in cents to keep sums exact on every backend.
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    month_key: Mapped[str] = mapped_column(String(7), nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    payer: Mapped[str | None] = mapped_column(String(16), nullable=True)
    origin: Mapped[str] = mapped_column(String(16), nullable=False, default="manual")
