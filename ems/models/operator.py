"""HR operator credentials."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import ID_TYPE, Base


class HrLogin(Base):
    """An HR operator allowed to manage employees of one region."""

    __tablename__ = "hr_login"

    hr_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    hr_name: Mapped[str] = mapped_column(String(120), nullable=False)
    username: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    region_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("region.region_id"), nullable=False)
    country_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("country.country_id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
