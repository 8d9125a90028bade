"""Region-scoped employee queries and employee row mutations."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.sql import Select

from ems.models import (
    Attendance,
    Base,
    Company,
    Department,
    Designation,
    Employee,
    EmployeeDocument,
    EmployeeImage,
    EmployeeSalaryCurrent,
    EmployeeSalaryHistory,
    LeaveRequest,
    Location,
    PerformanceReview,
    ProjectAssignment,
    Region,
)

from .base import BaseRepository

# Child tables cleared before the employee row, in this order.
DEPENDENT_MODELS: tuple[type[Base], ...] = (
    Attendance,
    LeaveRequest,
    ProjectAssignment,
    PerformanceReview,
    EmployeeDocument,
    EmployeeImage,
    EmployeeSalaryHistory,
    EmployeeSalaryCurrent,
)

# Columns a create or update is allowed to write.
MUTABLE_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "gender",
    "dob",
    "company_id",
    "location_id",
    "department_id",
    "designation_id",
    "joining_date",
    "employment_type",
    "status",
)


@dataclass(frozen=True)
class EmployeeSummaryRow:
    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None
    company_name: str | None
    department_name: str | None
    designation_name: str | None
    location: str | None
    employment_type: str
    status: str
    image_url: str | None


@dataclass(frozen=True)
class EmployeeDetailRow:
    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None
    gender: str | None
    dob: date | None
    joining_date: date | None
    employment_type: str
    status: str
    company_id: int
    company_name: str | None
    location_id: int
    location: str | None
    department_id: int
    department_name: str | None
    designation_id: int
    designation_name: str | None
    region_id: int
    region_name: str | None
    image_url: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class EmployeeSearchRow:
    employee_id: int
    first_name: str
    last_name: str
    email: str
    image_url: str | None


class EmployeeRepository(BaseRepository):
    """SQL for the employee table; every read joins location to region."""

    @staticmethod
    def _in_region(statement: Select, region_id: int) -> Select:
        return statement.join(Location, Location.location_id == Employee.location_id).where(
            Location.region_id == region_id
        )

    def exists(self, employee_id: int) -> bool:
        statement = select(func.count()).select_from(Employee).where(Employee.employee_id == employee_id)
        return self._scalar(statement) > 0

    def exists_in_region(self, employee_id: int, region_id: int) -> bool:
        statement = self._in_region(
            select(func.count()).select_from(Employee).where(Employee.employee_id == employee_id),
            region_id,
        )
        return self._scalar(statement) > 0

    def count_in_region(self, region_id: int) -> int:
        statement = self._in_region(select(func.count()).select_from(Employee), region_id)
        return self._scalar(statement)

    def list_in_region(self, region_id: int, *, limit: int, offset: int) -> list[EmployeeSummaryRow]:
        statement = (
            select(
                Employee.employee_id,
                Employee.first_name,
                Employee.last_name,
                Employee.email,
                Employee.phone,
                Employee.employment_type,
                Employee.status,
                Company.company_name,
                Department.department_name,
                Designation.designation_name,
                Location.city.label("location"),
                EmployeeImage.image_url,
            )
            .select_from(Employee)
            .join(Location, Location.location_id == Employee.location_id)
            .outerjoin(Company, Company.company_id == Employee.company_id)
            .outerjoin(Department, Department.department_id == Employee.department_id)
            .outerjoin(Designation, Designation.designation_id == Employee.designation_id)
            .outerjoin(EmployeeImage, EmployeeImage.employee_id == Employee.employee_id)
            .where(Location.region_id == region_id)
            .order_by(Employee.first_name, Employee.last_name, Employee.employee_id)
            .limit(limit)
            .offset(offset)
        )
        rows: list[EmployeeSummaryRow] = []
        for row in self._session.execute(statement).mappings():
            rows.append(
                EmployeeSummaryRow(
                    employee_id=int(row["employee_id"]),
                    first_name=str(row["first_name"]),
                    last_name=str(row["last_name"]),
                    email=str(row["email"]),
                    phone=row.get("phone"),
                    company_name=row.get("company_name"),
                    department_name=row.get("department_name"),
                    designation_name=row.get("designation_name"),
                    location=row.get("location"),
                    employment_type=str(row["employment_type"]),
                    status=str(row["status"]),
                    image_url=row.get("image_url"),
                )
            )
        return rows

    def get_detail(self, employee_id: int, region_id: int) -> EmployeeDetailRow | None:
        statement = (
            select(
                Employee,
                Company.company_name,
                Location.city.label("location"),
                Location.region_id,
                Region.region_name,
                Department.department_name,
                Designation.designation_name,
                EmployeeImage.image_url,
            )
            .select_from(Employee)
            .join(Location, Location.location_id == Employee.location_id)
            .outerjoin(Region, Region.region_id == Location.region_id)
            .outerjoin(Company, Company.company_id == Employee.company_id)
            .outerjoin(Department, Department.department_id == Employee.department_id)
            .outerjoin(Designation, Designation.designation_id == Employee.designation_id)
            .outerjoin(EmployeeImage, EmployeeImage.employee_id == Employee.employee_id)
            .where(Employee.employee_id == employee_id, Location.region_id == region_id)
        )
        row = self._session.execute(statement).one_or_none()
        if row is None:
            return None
        employee: Employee = row.Employee
        return EmployeeDetailRow(
            employee_id=int(employee.employee_id),
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            phone=employee.phone,
            gender=employee.gender,
            dob=self._coerce_optional_date(employee.dob),
            joining_date=self._coerce_optional_date(employee.joining_date),
            employment_type=employee.employment_type,
            status=employee.status,
            company_id=int(employee.company_id),
            company_name=row.company_name,
            location_id=int(employee.location_id),
            location=row.location,
            department_id=int(employee.department_id),
            department_name=row.department_name,
            designation_id=int(employee.designation_id),
            designation_name=row.designation_name,
            region_id=int(row.region_id),
            region_name=row.region_name,
            image_url=row.image_url,
            created_at=self._coerce_optional_datetime(employee.created_at),
            updated_at=self._coerce_optional_datetime(employee.updated_at),
        )

    def search_in_region(self, region_id: int, term: str, *, limit: int = 50) -> list[EmployeeSearchRow]:
        pattern = self._search_pattern(term)
        if pattern is None:
            return []
        statement = (
            select(
                Employee.employee_id,
                Employee.first_name,
                Employee.last_name,
                Employee.email,
                EmployeeImage.image_url,
            )
            .select_from(Employee)
            .join(Location, Location.location_id == Employee.location_id)
            .outerjoin(EmployeeImage, EmployeeImage.employee_id == Employee.employee_id)
            .where(
                Location.region_id == region_id,
                or_(
                    func.lower(Employee.first_name).like(pattern, escape="\\"),
                    func.lower(Employee.last_name).like(pattern, escape="\\"),
                    func.lower(Employee.email).like(pattern, escape="\\"),
                ),
            )
            .order_by(Employee.first_name, Employee.last_name, Employee.employee_id)
            .limit(limit)
        )
        return [
            EmployeeSearchRow(
                employee_id=int(row["employee_id"]),
                first_name=str(row["first_name"]),
                last_name=str(row["last_name"]),
                email=str(row["email"]),
                image_url=row.get("image_url"),
            )
            for row in self._session.execute(statement).mappings()
        ]

    def insert(self, values: dict[str, Any]) -> int:
        fields = {key: values[key] for key in MUTABLE_FIELDS if key in values}
        result = self._session.execute(insert(Employee).values(**fields))
        return int(result.inserted_primary_key[0])

    def update(self, employee_id: int, values: dict[str, Any], *, updated_at: datetime) -> int:
        """Overwrite every mutable column; returns the affected row count."""

        fields = {key: values.get(key) for key in MUTABLE_FIELDS}
        result = self._session.execute(
            update(Employee)
            .where(Employee.employee_id == employee_id)
            .values(**fields, updated_at=updated_at)
        )
        return int(result.rowcount or 0)

    def delete_rows(self, model: type[Base], employee_id: int) -> int:
        """Delete the rows of ``model`` owned by ``employee_id``."""

        result = self._session.execute(delete(model).where(model.employee_id == employee_id))
        return int(result.rowcount or 0)

    def delete(self, employee_id: int) -> int:
        result = self._session.execute(delete(Employee).where(Employee.employee_id == employee_id))
        return int(result.rowcount or 0)
