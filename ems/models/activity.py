"""Operational records that hang off an employee and go away with it."""
from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ID_TYPE, Base


class Attendance(Base):
    __tablename__ = "attendance"

    attendance_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)


class LeaveRequest(Base):
    __tablename__ = "leave_request"

    leave_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="PENDING")


class ProjectAssignment(Base):
    __tablename__ = "project_assignment"

    assignment_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_name: Mapped[str] = mapped_column(String(160), nullable=False)
    allocation_pct: Mapped[int | None] = mapped_column(Integer)


class PerformanceReview(Base):
    __tablename__ = "performance_review"

    review_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    review_period: Mapped[str] = mapped_column(String(32), nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer)
    comments: Mapped[str | None] = mapped_column(Text)
