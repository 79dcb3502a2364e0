"""Tests for the maintenance command line."""

from datetime import datetime

import pytest
from sqlalchemy.orm import Session

from tutorbook.core.clock import FixedClock
from tutorbook.models import Movement, Student
from tutorbook.scripts import maintenance
from tutorbook.stores import MemoryMarkerStore


@pytest.fixture()
def patched_db(
    mocker, db_session: Session, marker_store: MemoryMarkerStore, fixed_clock: FixedClock
) -> Session:
    mocker.patch.object(maintenance, "SessionLocal", return_value=db_session)
    mocker.patch.object(maintenance, "create_tables")
    mocker.patch.object(maintenance, "get_marker_store", return_value=marker_store)
    mocker.patch.object(maintenance, "get_clock", return_value=fixed_clock)
    return db_session


def test_rollover_command(
    patched_db: Session, db_student: Student, marker_store: MemoryMarkerStore, capsys
) -> None:
    patched_db.add(
        Movement(
            student_id=db_student.id,
            date=datetime(2025, 1, 5),
            kind="debt",
            amount_cents=4500,
            month_key="2025-01",
            origin="manual",
        )
    )
    patched_db.commit()

    assert maintenance.main(["rollover"]) == 0
    assert "1 balances carried" in capsys.readouterr().out
    assert marker_store.values["rollover.doneFor"] == "2025-02"

    assert maintenance.main(["rollover"]) == 0
    assert "already done" in capsys.readouterr().out


def test_clean_orphans_command(patched_db: Session, capsys) -> None:
    patched_db.add(
        Movement(
            student_id="s-gone",
            date=datetime(2025, 1, 5),
            kind="payment",
            amount_cents=1000,
            month_key="2025-01",
            origin="manual",
        )
    )
    patched_db.commit()

    assert maintenance.main(["clean-orphans"]) == 0
    assert "Removed 1 orphaned movements" in capsys.readouterr().out


def test_purge_requires_dates() -> None:
    with pytest.raises(SystemExit):
        maintenance.build_parser().parse_args(["purge-outside-hours"])


def test_purge_command(patched_db: Session, capsys) -> None:
    argv = ["purge-outside-hours", "--from", "2025-01-01", "--to", "2025-01-31"]
    assert maintenance.main(argv) == 0
    assert "Removed 0 sessions" in capsys.readouterr().out
