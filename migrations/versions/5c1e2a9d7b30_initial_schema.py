"""initial schema

Revision ID: 5c1e2a9d7b30
Revises:
Create Date: 2025-01-06 18:02:11.412907

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a9d7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create student, class_session and movement tables."""
    op.create_table(
        "student",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("color", sa.String(length=32), nullable=True),
        sa.Column("price_cents", sa.Integer(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "class_session",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("start", sa.DateTime(), nullable=False),
        sa.Column("end", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_class_session_student_id", "class_session", ["student_id"])
    op.create_index("ix_class_session_start_end", "class_session", ["start", "end"])
    op.create_table(
        "movement",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.String(length=36), nullable=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("amount_cents", sa.Integer(), nullable=False),
        sa.Column("month_key", sa.String(length=7), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("payer", sa.String(length=16), nullable=True),
        sa.Column("origin", sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_movement_date", "movement", ["date"])
    op.create_index("ix_movement_student_month", "movement", ["student_id", "month_key"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_movement_student_month", table_name="movement")
    op.drop_index("ix_movement_date", table_name="movement")
    op.drop_table("movement")
    op.drop_index("ix_class_session_start_end", table_name="class_session")
    op.drop_index("ix_class_session_student_id", table_name="class_session")
    op.drop_table("class_session")
    op.drop_table("student")
