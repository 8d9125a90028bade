"""Create, update and delete employees together with their salary ledger.

Every write runs in its own ``sessionmaker.begin()`` block: one connection is
checked out for the transaction, committed on success, rolled back on any
exception and returned to the pool either way. Nothing is retried.

Salary reconciliation on update follows a diff-before-write rule. The stored
snapshot is read ``FOR UPDATE`` and compared with the incoming amount,
effective date and salary type. When they match only the remarks and
timestamp are refreshed. When they differ the old snapshot is first copied
into history with ``effective_to`` set to today and then overwritten. History
therefore only grows when compensation really changes.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from ems.core.errors import AccessDenied, ConstraintViolation, DuplicateEmail, MissingRequiredField, NotFound
from ems.core.log import get_logger, timeit
from ems.models import EMAIL_CONSTRAINT, EmployeeStatus, SalaryType
from ems.repositories import (
    DEPENDENT_MODELS,
    DocumentRepository,
    EmployeeRepository,
    LookupRepository,
    SalaryRepository,
    SalarySnapshotRow,
)

from .blob_store import LocalBlobStore, log_blob_deletion

LOGGER = get_logger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "company_id",
    "location_id",
    "department_id",
    "designation_id",
    "employment_type",
)

ARCHIVE_REMARK = "Archived on salary revision"
DEFAULT_CURRENCY = "INR"

_CENT = Decimal("0.01")


def _money(value: Any) -> Decimal:
    try:
        return Decimal(str(value)).quantize(_CENT)
    except InvalidOperation as exc:
        raise ConstraintViolation(f"Invalid salary amount: {value!r}") from exc


def _clean_text(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _upper(value: str | None) -> str | None:
    return value.upper() if value else value


@dataclass
class EmployeeInput:
    """Fields accepted by create and update; salary fields are optional."""

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

    def __post_init__(self) -> None:
        for item in fields(self):
            setattr(self, item.name, _clean_text(getattr(self, item.name)))
        if self.email:
            self.email = self.email.lower()
        self.employment_type = _upper(self.employment_type)
        self.gender = _upper(self.gender)
        self.status = _upper(self.status)
        self.salary_type = _upper(self.salary_type)
        self.currency = _upper(self.currency)

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if getattr(self, name) is None]

    def employee_values(self) -> dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "gender": self.gender,
            "dob": self.dob,
            "company_id": self.company_id,
            "location_id": self.location_id,
            "department_id": self.department_id,
            "designation_id": self.designation_id,
            "joining_date": self.joining_date,
            "employment_type": self.employment_type,
            "status": self.status or EmployeeStatus.ACTIVE.value,
        }


class SalaryOutcome(str, Enum):
    """What an update did to the salary ledger."""

    SKIPPED = "skipped"
    CREATED = "created"
    UNCHANGED = "unchanged"
    REVISED = "revised"


def _translate_integrity_error(exc: IntegrityError, email: str | None) -> Exception:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = detail.lower()
    # MySQL names the key; SQLite names the column.
    if EMAIL_CONSTRAINT in lowered or ("email" in lowered and ("unique" in lowered or "duplicate" in lowered)):
        return DuplicateEmail(email)
    return ConstraintViolation(detail)


class EmployeeLifecycleService:
    """Owns writes to ``employee`` and the salary ledger as one unit."""

    def __init__(self, session_factory: sessionmaker, *, blob_store: LocalBlobStore | None = None) -> None:
        self._session_factory = session_factory
        self._blob_store = blob_store

    @staticmethod
    def _validate(payload: EmployeeInput) -> None:
        missing = payload.missing_fields()
        if missing:
            raise MissingRequiredField(missing)

    @staticmethod
    def _check_location(session: Session, location_id: int, region_id: int) -> None:
        if not LookupRepository(session).location_in_region(location_id, region_id):
            raise ConstraintViolation(f"location_id {location_id} is outside the operator's region")

    def create(self, payload: EmployeeInput, *, region_id: int) -> int:
        """Insert an employee in the caller's region, opening its ledger for a positive salary."""

        self._validate(payload)
        values = payload.employee_values()

        try:
            with timeit("Employee create", logger=LOGGER, level=logging.DEBUG) as timer:
                with self._session_factory.begin() as session:
                    self._check_location(session, payload.location_id, region_id)
                    employee_id = EmployeeRepository(session).insert(values)
                    timer.add()
                    if payload.ctc_lpa is not None and _money(payload.ctc_lpa) > 0:
                        effective_from = payload.effective_from or payload.joining_date or date.today()
                        self._open_ledger(SalaryRepository(session), employee_id, payload, effective_from)
                        timer.add(2)
        except IntegrityError as exc:
            raise _translate_integrity_error(exc, payload.email) from exc

        LOGGER.info("Created employee %s", employee_id)
        return employee_id

    def update(self, employee_id: int, payload: EmployeeInput, *, region_id: int) -> int:
        """Overwrite an employee in the caller's region and reconcile salary."""

        self._validate(payload)
        values = payload.employee_values()
        now = datetime.now(timezone.utc)

        try:
            with timeit("Employee update", logger=LOGGER, level=logging.DEBUG) as timer:
                with self._session_factory.begin() as session:
                    employees = EmployeeRepository(session)
                    if not employees.exists_in_region(employee_id, region_id):
                        raise NotFound()
                    self._check_location(session, payload.location_id, region_id)
                    employees.update(employee_id, values, updated_at=now)
                    timer.add()
                    outcome = SalaryOutcome.SKIPPED
                    if payload.ctc_lpa is not None and payload.effective_from is not None:
                        outcome = self._reconcile_salary(SalaryRepository(session), employee_id, payload, now)
        except IntegrityError as exc:
            raise _translate_integrity_error(exc, payload.email) from exc

        LOGGER.info("Updated employee %s (salary %s)", employee_id, outcome.value)
        return employee_id

    def delete(self, employee_id: int, *, region_id: int) -> int:
        """Remove an employee and every dependent row in one transaction."""

        with self._session_factory() as session:
            employees = EmployeeRepository(session)
            if not employees.exists_in_region(employee_id, region_id):
                if employees.exists(employee_id):
                    raise AccessDenied()
                raise NotFound()

        with timeit("Employee delete", logger=LOGGER, level=logging.DEBUG) as timer:
            with self._session_factory.begin() as session:
                file_urls = DocumentRepository(session).file_urls_for_employee(employee_id)
                employees = EmployeeRepository(session)
                for model in DEPENDENT_MODELS:
                    employees.delete_rows(model, employee_id)
                    timer.add()
                if employees.delete(employee_id) == 0:
                    raise NotFound()
                timer.add()

        if self._blob_store is not None:
            for url in file_urls:
                log_blob_deletion(self._blob_store.delete(url))

        LOGGER.info("Deleted employee %s", employee_id)
        return employee_id

    def _open_ledger(
        self,
        salary: SalaryRepository,
        employee_id: int,
        payload: EmployeeInput,
        effective_from: date,
    ) -> None:
        amount = _money(payload.ctc_lpa)
        salary_type = payload.salary_type or SalaryType.CTC.value
        currency = payload.currency or DEFAULT_CURRENCY
        salary.insert_current(
            employee_id,
            ctc_lpa=amount,
            salary_type=salary_type,
            effective_from=effective_from,
            currency=currency,
            remarks=payload.remarks,
            updated_at=datetime.now(timezone.utc),
        )
        salary.append_history(
            employee_id,
            ctc_lpa=amount,
            salary_type=salary_type,
            effective_from=effective_from,
            effective_to=None,
            currency=currency,
            remarks=payload.remarks,
        )

    def _reconcile_salary(
        self,
        salary: SalaryRepository,
        employee_id: int,
        payload: EmployeeInput,
        now: datetime,
    ) -> SalaryOutcome:
        assert payload.effective_from is not None
        current = salary.get_current(employee_id, for_update=True)
        if current is None:
            self._open_ledger(salary, employee_id, payload, payload.effective_from)
            return SalaryOutcome.CREATED

        amount = _money(payload.ctc_lpa)
        salary_type = payload.salary_type or current.salary_type
        remarks = payload.remarks if payload.remarks is not None else current.remarks

        if not self._salary_changed(current, amount, payload.effective_from, salary_type):
            salary.touch_current(employee_id, remarks=remarks, updated_at=now)
            return SalaryOutcome.UNCHANGED

        salary.append_history(
            employee_id,
            ctc_lpa=current.ctc_lpa,
            salary_type=current.salary_type,
            effective_from=current.effective_from,
            effective_to=date.today(),
            currency=current.currency,
            remarks=ARCHIVE_REMARK,
        )
        salary.overwrite_current(
            employee_id,
            ctc_lpa=amount,
            salary_type=salary_type,
            effective_from=payload.effective_from,
            currency=payload.currency or current.currency,
            remarks=remarks,
            updated_at=now,
        )
        return SalaryOutcome.REVISED

    @staticmethod
    def _salary_changed(
        current: SalarySnapshotRow,
        amount: Decimal,
        effective_from: date,
        salary_type: str,
    ) -> bool:
        return (
            _money(current.ctc_lpa) != amount
            or current.effective_from != effective_from
            or current.salary_type != salary_type
        )
