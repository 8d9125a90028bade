"""Schema definitions for employee records."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer


class EmployeePayload(BaseModel):
    """Body of ``POST /employees`` and ``PUT /employees/{id}``.

    Every field is optional at this layer so that missing required fields are
    reported together by the lifecycle service.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    gender: str | None = None
    dob: date | None = None
    company_id: int | None = None
    location_id: int | None = None
    department_id: int | None = None
    designation_id: int | None = None
    joining_date: date | None = None
    employment_type: str | None = None
    status: str | None = None
    ctc_lpa: Decimal | None = None
    salary_type: str | None = None
    effective_from: date | None = None
    currency: str | None = None
    remarks: str | None = None


class EmployeeMutation(BaseModel):
    message: str
    employee_id: int


class EmployeeSummary(BaseModel):
    """Row of the paginated employee list."""

    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    company_name: str | None = None
    department_name: str | None = None
    designation_name: str | None = None
    location: str | None = None
    employment_type: str
    status: str
    image_url: str | None = None


class EmployeePage(BaseModel):
    """One page of employees plus the totals needed to render pagination."""

    items: list[EmployeeSummary]
    total: int
    page: int
    limit: int
    total_pages: int


class SalarySnapshot(BaseModel):
    ctc_lpa: Decimal
    salary_type: str
    effective_from: date
    currency: str
    remarks: str | None = None
    updated_at: datetime | None = None

    @field_serializer("ctc_lpa")
    def _serialize_ctc(self, value: Decimal) -> str:
        return str(value)


class EmployeeDetail(BaseModel):
    """Single employee with joined reference names and current salary."""

    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    gender: str | None = None
    dob: date | None = None
    joining_date: date | None = None
    employment_type: str
    status: str
    company_id: int
    company_name: str | None = None
    location_id: int
    location: str | None = None
    department_id: int
    department_name: str | None = None
    designation_id: int
    designation_name: str | None = None
    region_id: int
    region_name: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    salary: SalarySnapshot | None = None


class EmployeeSearchResult(BaseModel):
    employee_id: int
    first_name: str
    last_name: str
    email: str
    image_url: str | None = None


class SalaryHistoryEntry(BaseModel):
    history_id: int
    ctc_lpa: Decimal
    salary_type: str
    effective_from: date
    effective_to: date | None = None
    currency: str
    remarks: str | None = None
    created_at: datetime | None = None

    @field_serializer("ctc_lpa")
    def _serialize_ctc(self, value: Decimal) -> str:
        return str(value)


class LookupOption(BaseModel):
    id: int
    name: str


class EmployeeLookups(BaseModel):
    """Dropdown values for the employee form, scoped to the caller's region."""

    companies: list[LookupOption]
    departments: list[LookupOption]
    designations: list[LookupOption]
    locations: list[LookupOption]
    employment_types: list[str]
    genders: list[str]
    statuses: list[str]
    salary_types: list[str]
