"""Schema definitions for employee documents and profile images."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DocumentSummary(BaseModel):
    document_id: int
    document_type: str
    document_name: str | None = None
    file_url: str
    uploaded_at: datetime | None = None


class DocumentUploaded(BaseModel):
    message: str
    document_id: int
    file_url: str


class DocumentDeleted(BaseModel):
    """Result of a soft delete; ``file_removed`` reports the blob cleanup."""

    message: str
    document_id: int
    file_removed: bool


class ImageUploaded(BaseModel):
    message: str
    employee_id: int
    image_url: str
