"""Dropdown data for the employee forms."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select

from ems.models import Company, Department, Designation, Location

from .base import BaseRepository


@dataclass(frozen=True)
class LookupRow:
    id: int
    name: str


class LookupRepository(BaseRepository):
    def companies(self) -> list[LookupRow]:
        statement = select(Company.company_id, Company.company_name).order_by(Company.company_name)
        return [LookupRow(id=int(row[0]), name=str(row[1])) for row in self._session.execute(statement)]

    def departments(self) -> list[LookupRow]:
        statement = select(Department.department_id, Department.department_name).order_by(
            Department.department_name
        )
        return [LookupRow(id=int(row[0]), name=str(row[1])) for row in self._session.execute(statement)]

    def designations(self) -> list[LookupRow]:
        statement = select(Designation.designation_id, Designation.designation_name).order_by(
            Designation.designation_name
        )
        return [LookupRow(id=int(row[0]), name=str(row[1])) for row in self._session.execute(statement)]

    def locations_in_region(self, region_id: int) -> list[LookupRow]:
        statement = (
            select(Location.location_id, Location.city)
            .where(Location.region_id == region_id)
            .order_by(Location.city)
        )
        return [LookupRow(id=int(row[0]), name=str(row[1])) for row in self._session.execute(statement)]

    def location_in_region(self, location_id: int, region_id: int) -> bool:
        statement = (
            select(func.count())
            .select_from(Location)
            .where(Location.location_id == location_id, Location.region_id == region_id)
        )
        return self._scalar(statement) > 0
