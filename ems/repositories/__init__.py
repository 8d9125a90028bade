"""Data access objects wrapping a SQLAlchemy session."""

from .document_repository import DocumentRepository, DocumentRow
from .employee_repository import (
    DEPENDENT_MODELS,
    EmployeeDetailRow,
    EmployeeRepository,
    EmployeeSearchRow,
    EmployeeSummaryRow,
)
from .lookup_repository import LookupRepository, LookupRow
from .operator_repository import OperatorRepository, OperatorRow
from .salary_repository import SalaryHistoryRow, SalaryRepository, SalarySnapshotRow

__all__ = [
    "DEPENDENT_MODELS",
    "DocumentRepository",
    "DocumentRow",
    "EmployeeDetailRow",
    "EmployeeRepository",
    "EmployeeSearchRow",
    "EmployeeSummaryRow",
    "LookupRepository",
    "LookupRow",
    "OperatorRepository",
    "OperatorRow",
    "SalaryHistoryRow",
    "SalaryRepository",
    "SalarySnapshotRow",
]
