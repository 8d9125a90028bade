"""Salary ledger: one current snapshot per employee plus append-only history."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import ID_TYPE, Base


class SalaryType(str, Enum):
    CTC = "CTC"
    FIXED = "FIXED"
    VARIABLE = "VARIABLE"


_SALARY_TYPE_CHECK = "salary_type IN ({})".format(", ".join(f"'{t.value}'" for t in SalaryType))


class EmployeeSalaryCurrent(Base):
    """Active compensation; the primary key enforces one row per employee."""

    __tablename__ = "employee_salary_current"
    __table_args__ = (
        CheckConstraint(_SALARY_TYPE_CHECK, name="ck_salary_current_type"),
        CheckConstraint("ctc_lpa >= 0", name="ck_salary_current_amount"),
    )

    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), primary_key=True
    )
    ctc_lpa: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    salary_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default=SalaryType.CTC.value)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, server_default="INR")
    remarks: Mapped[str | None] = mapped_column(String(255))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )


class EmployeeSalaryHistory(Base):
    """Past compensation intervals; ``effective_to`` is NULL while open-ended."""

    __tablename__ = "employee_salary_history"
    __table_args__ = (CheckConstraint(_SALARY_TYPE_CHECK, name="ck_salary_history_type"),)

    history_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    ctc_lpa: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    salary_type: Mapped[str] = mapped_column(String(16), nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, server_default="INR")
    remarks: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
