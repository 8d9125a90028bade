"""Shared FastAPI dependency definitions.

Services are built once in ``create_app`` and kept on ``app.state``; these
helpers hand them to the routers.
"""
from __future__ import annotations

from fastapi import Request

from ems.services import DocumentService, EmployeeDirectoryService, EmployeeLifecycleService


def get_lifecycle_service(request: Request) -> EmployeeLifecycleService:
    return request.app.state.lifecycle_service


def get_directory_service(request: Request) -> EmployeeDirectoryService:
    return request.app.state.directory_service


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


__all__ = [
    "get_directory_service",
    "get_document_service",
    "get_lifecycle_service",
]
