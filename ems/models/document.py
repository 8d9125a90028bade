"""Uploaded employee artefacts: identity documents and profile images."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import ID_TYPE, Base

PROFILE_PHOTO = "PROFILE_PHOTO"


class EmployeeDocument(Base):
    """Document metadata; rows are soft-deleted via ``is_active``."""

    __tablename__ = "employee_document"

    document_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type: Mapped[str] = mapped_column(String(40), nullable=False)
    document_name: Mapped[str | None] = mapped_column(String(255))
    file_url: Mapped[str] = mapped_column(String(512), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )


class EmployeeImage(Base):
    __tablename__ = "employee_image"

    employee_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("employee.employee_id", ondelete="CASCADE"), primary_key=True
    )
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
