"""Employee master record."""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import ID_TYPE, Base

EMAIL_CONSTRAINT = "uq_employee_email"


class EmploymentType(str, Enum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERN = "INTERN"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class EmployeeStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"


def _in_check(column: str, enum: type[Enum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum)
    return f"{column} IN ({values})"


class Employee(Base):
    """Identity and employment facts; region is derived via ``location_id``."""

    __tablename__ = "employee"
    __table_args__ = (
        UniqueConstraint("email", name=EMAIL_CONSTRAINT),
        CheckConstraint(_in_check("employment_type", EmploymentType), name="ck_employee_employment_type"),
        CheckConstraint(f"gender IS NULL OR {_in_check('gender', Gender)}", name="ck_employee_gender"),
        CheckConstraint(_in_check("status", EmployeeStatus), name="ck_employee_status"),
    )

    employee_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    gender: Mapped[str | None] = mapped_column(String(16))
    dob: Mapped[date | None] = mapped_column(Date)
    company_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("company.company_id"), nullable=False)
    location_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("location.location_id"), nullable=False, index=True)
    department_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("department.department_id"), nullable=False)
    designation_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("designation.designation_id"), nullable=False)
    joining_date: Mapped[date | None] = mapped_column(Date)
    employment_type: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default=EmployeeStatus.ACTIVE.value)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
