"""Domain errors raised by the services and mapped to HTTP responses."""
from __future__ import annotations

from typing import Iterable


class EmsError(Exception):
    """Base class for failures that surface to API callers with a message."""

    status_code: int = 500
    code: str = "error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"message": self.message, "error": self.code}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class InvalidCredentials(EmsError):
    status_code = 401
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AccountInactive(EmsError):
    status_code = 403
    code = "account_inactive"

    def __init__(self, message: str = "HR is inactive") -> None:
        super().__init__(message)


class MissingRequiredField(EmsError):
    """Raised before any mutation when required input is absent."""

    status_code = 400
    code = "missing_required_field"

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class NotFound(EmsError):
    status_code = 404
    code = "not_found"

    def __init__(self, message: str = "Employee not found") -> None:
        super().__init__(message)


class AccessDenied(NotFound):
    """Out-of-region access; reported exactly like a missing row."""


class DuplicateEmail(EmsError):
    status_code = 409
    code = "duplicate_email"

    def __init__(self, email: str | None = None) -> None:
        message = "Employee email already exists"
        if email:
            message = f"Employee email already exists: {email}"
        super().__init__(message)


class ConstraintViolation(EmsError):
    status_code = 400
    code = "constraint_violation"

    def __init__(self, detail: str) -> None:
        super().__init__("Employee record violates a database constraint", detail=detail)


class DuplicateDocumentType(EmsError):
    status_code = 409
    code = "duplicate_document_type"

    def __init__(self, existing_type: str) -> None:
        self.existing_type = existing_type
        super().__init__(
            f"You have already uploaded {existing_type}. "
            "Please delete it first to upload a different document."
        )


class DuplicatePhoto(EmsError):
    status_code = 409
    code = "duplicate_photo"

    def __init__(self, message: str = "Profile photo already uploaded. Please delete it first to upload a new one.") -> None:
        super().__init__(message)


class StorageFailure(EmsError):
    status_code = 500
    code = "storage_failure"


__all__ = [
    "AccessDenied",
    "AccountInactive",
    "ConstraintViolation",
    "DuplicateDocumentType",
    "DuplicateEmail",
    "DuplicatePhoto",
    "EmsError",
    "InvalidCredentials",
    "MissingRequiredField",
    "NotFound",
    "StorageFailure",
]
