"""Region-scoped read access to employees."""
from __future__ import annotations

import math

from sqlalchemy.orm import sessionmaker

from ems.core.errors import NotFound
from ems.core.log import get_logger
from ems.models import EmployeeStatus, EmploymentType, Gender, SalaryType
from ems.repositories import (
    EmployeeRepository,
    LookupRepository,
    LookupRow,
    SalaryRepository,
)
from ems.schemas.employees import (
    EmployeeDetail,
    EmployeeLookups,
    EmployeePage,
    EmployeeSearchResult,
    EmployeeSummary,
    LookupOption,
    SalaryHistoryEntry,
    SalarySnapshot,
)

LOGGER = get_logger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 6
MAX_LIMIT = 100
SEARCH_LIMIT = 50


def _options(rows: list[LookupRow]) -> list[LookupOption]:
    return [LookupOption(id=row.id, name=row.name) for row in rows]


class EmployeeDirectoryService:
    """Lists, searches and loads employees visible to one region."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @staticmethod
    def normalize_paging(page: int | None, limit: int | None) -> tuple[int, int]:
        """Fall back to defaults for missing or non-positive values and cap ``limit``."""

        page = page if page is not None and page > 0 else DEFAULT_PAGE
        limit = limit if limit is not None and limit > 0 else DEFAULT_LIMIT
        return page, min(limit, MAX_LIMIT)

    def list_employees(self, region_id: int, page: int | None = None, limit: int | None = None) -> EmployeePage:
        page, limit = self.normalize_paging(page, limit)
        offset = (page - 1) * limit

        with self._session_factory() as session:
            repository = EmployeeRepository(session)
            total = repository.count_in_region(region_id)
            rows = repository.list_in_region(region_id, limit=limit, offset=offset)

        LOGGER.debug("Listed %d of %d employees in region %s (page %d)", len(rows), total, region_id, page)
        return EmployeePage(
            items=[EmployeeSummary(**vars(row)) for row in rows],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    def get_employee(self, employee_id: int, region_id: int) -> EmployeeDetail:
        with self._session_factory() as session:
            detail = EmployeeRepository(session).get_detail(employee_id, region_id)
            if detail is None:
                LOGGER.info("Employee %s not visible in region %s", employee_id, region_id)
                raise NotFound()
            snapshot = SalaryRepository(session).get_current(employee_id)

        salary = None
        if snapshot is not None:
            salary = SalarySnapshot(
                ctc_lpa=snapshot.ctc_lpa,
                salary_type=snapshot.salary_type,
                effective_from=snapshot.effective_from,
                currency=snapshot.currency,
                remarks=snapshot.remarks,
                updated_at=snapshot.updated_at,
            )
        return EmployeeDetail(**vars(detail), salary=salary)

    def search(self, region_id: int, term: str | None) -> list[EmployeeSearchResult]:
        """Case-insensitive match on first name, last name or email."""

        if not term or not term.strip():
            return []
        with self._session_factory() as session:
            rows = EmployeeRepository(session).search_in_region(region_id, term.strip(), limit=SEARCH_LIMIT)
        return [EmployeeSearchResult(**vars(row)) for row in rows]

    def salary_history(self, employee_id: int, region_id: int) -> list[SalaryHistoryEntry]:
        with self._session_factory() as session:
            if not EmployeeRepository(session).exists_in_region(employee_id, region_id):
                raise NotFound()
            rows = SalaryRepository(session).list_history(employee_id)
        return [
            SalaryHistoryEntry(
                history_id=row.history_id,
                ctc_lpa=row.ctc_lpa,
                salary_type=row.salary_type,
                effective_from=row.effective_from,
                effective_to=row.effective_to,
                currency=row.currency,
                remarks=row.remarks,
                created_at=row.created_at,
            )
            for row in rows
        ]

    def lookups(self, region_id: int) -> EmployeeLookups:
        with self._session_factory() as session:
            repository = LookupRepository(session)
            companies = repository.companies()
            departments = repository.departments()
            designations = repository.designations()
            locations = repository.locations_in_region(region_id)

        return EmployeeLookups(
            companies=_options(companies),
            departments=_options(departments),
            designations=_options(designations),
            locations=_options(locations),
            employment_types=[item.value for item in EmploymentType],
            genders=[item.value for item in Gender],
            statuses=[item.value for item in EmployeeStatus],
            salary_types=[item.value for item in SalaryType],
        )
