"""Pydantic models shared by the routers and services."""

from .auth import LoginRequest, LoginResponse, OperatorProfile
from .documents import DocumentDeleted, DocumentSummary, DocumentUploaded, ImageUploaded
from .employees import (
    EmployeeDetail,
    EmployeeLookups,
    EmployeeMutation,
    EmployeePage,
    EmployeePayload,
    EmployeeSearchResult,
    EmployeeSummary,
    LookupOption,
    SalaryHistoryEntry,
    SalarySnapshot,
)

__all__ = [
    "DocumentDeleted",
    "DocumentSummary",
    "DocumentUploaded",
    "EmployeeDetail",
    "EmployeeLookups",
    "EmployeeMutation",
    "EmployeePage",
    "EmployeePayload",
    "EmployeeSearchResult",
    "EmployeeSummary",
    "ImageUploaded",
    "LoginRequest",
    "LoginResponse",
    "LookupOption",
    "OperatorProfile",
    "SalaryHistoryEntry",
    "SalarySnapshot",
]
