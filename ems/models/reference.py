"""Reference data: geography and organisation structure."""
from __future__ import annotations

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ID_TYPE, Base


class Country(Base):
    __tablename__ = "country"

    country_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    country_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    country_code: Mapped[str | None] = mapped_column(String(3))


class Region(Base):
    """HR access boundary; every operator is assigned exactly one."""

    __tablename__ = "region"

    region_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    region_name: Mapped[str] = mapped_column(String(100), nullable=False)
    country_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("country.country_id"), nullable=False)

    country: Mapped[Country] = relationship()


class Location(Base):
    """City-level office; an employee's region is derived through it."""

    __tablename__ = "location"

    location_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str | None] = mapped_column(String(100))
    region_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("region.region_id"), nullable=False, index=True)

    region: Mapped[Region] = relationship()


class Company(Base):
    __tablename__ = "company"

    company_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    company_name: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)


class Department(Base):
    __tablename__ = "department"

    department_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    department_name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)


class Designation(Base):
    __tablename__ = "designation"

    designation_id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    designation_name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
