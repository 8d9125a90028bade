"""Salary ledger access: current snapshot and append-only history."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import insert, select, update

from ems.models import EmployeeSalaryCurrent, EmployeeSalaryHistory

from .base import BaseRepository


@dataclass(frozen=True)
class SalarySnapshotRow:
    employee_id: int
    ctc_lpa: Decimal
    salary_type: str
    effective_from: date
    currency: str
    remarks: str | None
    updated_at: datetime | None


@dataclass(frozen=True)
class SalaryHistoryRow:
    history_id: int
    employee_id: int
    ctc_lpa: Decimal
    salary_type: str
    effective_from: date
    effective_to: date | None
    currency: str
    remarks: str | None
    created_at: datetime | None


class SalaryRepository(BaseRepository):
    """Reads and writes for ``employee_salary_current``/``employee_salary_history``."""

    def get_current(self, employee_id: int, *, for_update: bool = False) -> SalarySnapshotRow | None:
        statement = select(EmployeeSalaryCurrent).where(EmployeeSalaryCurrent.employee_id == employee_id)
        if for_update:
            # Rendered as SELECT ... FOR UPDATE; SQLite ignores the clause.
            statement = statement.with_for_update()
        snapshot = self._session.execute(statement).scalars().one_or_none()
        if snapshot is None:
            return None
        return SalarySnapshotRow(
            employee_id=int(snapshot.employee_id),
            ctc_lpa=self._to_decimal(snapshot.ctc_lpa),
            salary_type=snapshot.salary_type,
            effective_from=self._coerce_date(snapshot.effective_from),
            currency=snapshot.currency,
            remarks=snapshot.remarks,
            updated_at=self._coerce_optional_datetime(snapshot.updated_at),
        )

    def insert_current(
        self,
        employee_id: int,
        *,
        ctc_lpa: Decimal,
        salary_type: str,
        effective_from: date,
        currency: str,
        remarks: str | None,
        updated_at: datetime,
    ) -> None:
        self._session.execute(
            insert(EmployeeSalaryCurrent).values(
                employee_id=employee_id,
                ctc_lpa=ctc_lpa,
                salary_type=salary_type,
                effective_from=effective_from,
                currency=currency,
                remarks=remarks,
                updated_at=updated_at,
            )
        )

    def overwrite_current(
        self,
        employee_id: int,
        *,
        ctc_lpa: Decimal,
        salary_type: str,
        effective_from: date,
        currency: str,
        remarks: str | None,
        updated_at: datetime,
    ) -> None:
        self._session.execute(
            update(EmployeeSalaryCurrent)
            .where(EmployeeSalaryCurrent.employee_id == employee_id)
            .values(
                ctc_lpa=ctc_lpa,
                salary_type=salary_type,
                effective_from=effective_from,
                currency=currency,
                remarks=remarks,
                updated_at=updated_at,
            )
        )

    def touch_current(self, employee_id: int, *, remarks: str | None, updated_at: datetime) -> None:
        """Refresh remarks and timestamp without changing compensation."""

        self._session.execute(
            update(EmployeeSalaryCurrent)
            .where(EmployeeSalaryCurrent.employee_id == employee_id)
            .values(remarks=remarks, updated_at=updated_at)
        )

    def append_history(
        self,
        employee_id: int,
        *,
        ctc_lpa: Decimal,
        salary_type: str,
        effective_from: date,
        effective_to: date | None,
        currency: str,
        remarks: str | None,
    ) -> int:
        result = self._session.execute(
            insert(EmployeeSalaryHistory).values(
                employee_id=employee_id,
                ctc_lpa=ctc_lpa,
                salary_type=salary_type,
                effective_from=effective_from,
                effective_to=effective_to,
                currency=currency,
                remarks=remarks,
            )
        )
        return int(result.inserted_primary_key[0])

    def list_history(self, employee_id: int) -> list[SalaryHistoryRow]:
        statement = (
            select(EmployeeSalaryHistory)
            .where(EmployeeSalaryHistory.employee_id == employee_id)
            .order_by(EmployeeSalaryHistory.history_id.desc())
        )
        rows: list[SalaryHistoryRow] = []
        for entry in self._session.execute(statement).scalars():
            rows.append(
                SalaryHistoryRow(
                    history_id=int(entry.history_id),
                    employee_id=int(entry.employee_id),
                    ctc_lpa=self._to_decimal(entry.ctc_lpa),
                    salary_type=entry.salary_type,
                    effective_from=self._coerce_date(entry.effective_from),
                    effective_to=self._coerce_optional_date(entry.effective_to),
                    currency=entry.currency,
                    remarks=entry.remarks,
                    created_at=self._coerce_optional_datetime(entry.created_at),
                )
            )
        return rows
