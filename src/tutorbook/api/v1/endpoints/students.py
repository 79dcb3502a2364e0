"""Student endpoints backing the student directory."""

from __future__ import annotations

from fastapi import APIRouter, Response, status
from sqlalchemy.orm import Session

from tutorbook.core.errors import NotFoundError, ValidationError
from tutorbook.models import Student
from tutorbook.schemas.student import StudentCreate, StudentRecord, StudentUpdate
from tutorbook.stores.events import ChangeEvent, Entity, Operation, get_notifier
from tutorbook.stores.sql import student_record
from tutorbook.utils.collation import name_sort_key
from tutorbook.utils.money import to_cents

from ..dependencies import SessionDep

router = APIRouter(prefix="/students", tags=["students"])


def _get_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    return student


@router.get("/", response_model=list[StudentRecord])
async def list_students(db: SessionDep, active: bool | None = None) -> list[StudentRecord]:
    """List students sorted by name, optionally only active or inactive ones."""
    query = db.query(Student)
    if active is not None:
        query = query.filter(Student.active == active)
    records = [student_record(row) for row in query.all()]
    return sorted(records, key=lambda record: name_sort_key(record.name))


@router.get("/{student_id}", response_model=StudentRecord)
async def get_student(student_id: str, db: SessionDep) -> StudentRecord:
    return student_record(_get_student(db, student_id))


@router.post("/", response_model=StudentRecord, status_code=status.HTTP_201_CREATED)
async def create_student(payload: StudentCreate, db: SessionDep) -> StudentRecord:
    name = payload.name.strip()
    if not name:
        raise ValidationError("Student name must not be empty")
    student = Student(
        name=name,
        active=payload.active,
        color=payload.color,
        price_cents=to_cents(payload.price) if payload.price is not None else None,
        note=payload.note,
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    get_notifier().publish(ChangeEvent(Entity.STUDENT, Operation.CREATED, student.id))
    return student_record(student)


@router.patch("/{student_id}", response_model=StudentRecord)
async def update_student(student_id: str, payload: StudentUpdate, db: SessionDep) -> StudentRecord:
    student = _get_student(db, student_id)
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise ValidationError("Student name must not be empty")
        student.name = name
    if changes.get("active") is not None:
        student.active = changes["active"]
    if "color" in changes:
        student.color = changes["color"]
    if "price" in changes:
        price = changes["price"]
        student.price_cents = to_cents(price) if price is not None else None
    if "note" in changes:
        student.note = changes["note"]
    db.commit()
    db.refresh(student)
    get_notifier().publish(ChangeEvent(Entity.STUDENT, Operation.UPDATED, student.id))
    return student_record(student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: str, db: SessionDep) -> Response:
    """Delete a student. Their movements become orphans until cleaned up."""
    student = _get_student(db, student_id)
    db.delete(student)
    db.commit()
    get_notifier().publish(ChangeEvent(Entity.STUDENT, Operation.DELETED, student_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
