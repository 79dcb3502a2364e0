"""Student-related Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class StudentRecord(BaseModel):
    """Student as seen by the core; owned by the student directory."""

    id: str
    name: str
    active: bool = True
    color: str | None = None
    price: Decimal | None = None
    note: str | None = None

    model_config = ConfigDict(from_attributes=True)


class StudentCreate(BaseModel):
    """Schema for registering a new student."""

    name: str
    active: bool = True
    color: str | None = None
    price: Decimal | None = None
    note: str | None = None


class StudentUpdate(BaseModel):
    name: str | None = None
    active: bool | None = None
    color: str | None = None
    price: Decimal | None = None
    note: str | None = None
