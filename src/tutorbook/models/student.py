"""SQLAlchemy model for students."""

from uuid import uuid4

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tutorbook.db.session import Base


def _new_student_id() -> str:
    return str(uuid4())


class Student(Base):
    """A student of the practice; sessions and movements refer to it by id."""

    __tablename__ = "student"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_student_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Hex or CSS colour used to tint the student's sessions.
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    # Usual price per class, in cents.
    price_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
