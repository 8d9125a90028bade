"""Service layer entry points."""

from .blob_store import BlobDeletion, LocalBlobStore
from .documents_service import DocumentService
from .employee_directory import EmployeeDirectoryService
from .employee_lifecycle import EmployeeInput, EmployeeLifecycleService, SalaryOutcome

__all__ = [
    "BlobDeletion",
    "DocumentService",
    "EmployeeDirectoryService",
    "EmployeeInput",
    "EmployeeLifecycleService",
    "LocalBlobStore",
    "SalaryOutcome",
]
