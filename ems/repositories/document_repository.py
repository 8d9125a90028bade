"""Document and profile image metadata."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import insert, select, update

from ems.models import PROFILE_PHOTO, EmployeeDocument, EmployeeImage, Employee, Location

from .base import BaseRepository


@dataclass(frozen=True)
class DocumentRow:
    document_id: int
    employee_id: int
    document_type: str
    document_name: str | None
    file_url: str
    uploaded_at: datetime | None


class DocumentRepository(BaseRepository):
    """SQL for ``employee_document`` and ``employee_image``."""

    def find_active_identity_type(self, employee_id: int) -> str | None:
        """Return the type of the employee's active non-photo document, if any."""

        return self._session.execute(
            select(EmployeeDocument.document_type)
            .where(
                EmployeeDocument.employee_id == employee_id,
                EmployeeDocument.document_type != PROFILE_PHOTO,
                EmployeeDocument.is_active.is_(True),
            )
            .limit(1)
        ).scalar_one_or_none()

    def has_active_photo(self, employee_id: int) -> bool:
        document_id = self._session.execute(
            select(EmployeeDocument.document_id)
            .where(
                EmployeeDocument.employee_id == employee_id,
                EmployeeDocument.document_type == PROFILE_PHOTO,
                EmployeeDocument.is_active.is_(True),
            )
            .limit(1)
        ).scalar_one_or_none()
        return document_id is not None

    def insert(self, employee_id: int, *, document_type: str, document_name: str | None, file_url: str) -> int:
        result = self._session.execute(
            insert(EmployeeDocument).values(
                employee_id=employee_id,
                document_type=document_type,
                document_name=document_name,
                file_url=file_url,
                is_active=True,
            )
        )
        return int(result.inserted_primary_key[0])

    def list_active(self, employee_id: int) -> list[DocumentRow]:
        statement = (
            select(EmployeeDocument)
            .where(EmployeeDocument.employee_id == employee_id, EmployeeDocument.is_active.is_(True))
            .order_by(EmployeeDocument.document_id)
        )
        return [self._to_row(document) for document in self._session.execute(statement).scalars()]

    def get_active_in_region(self, document_id: int, region_id: int) -> DocumentRow | None:
        statement = (
            select(EmployeeDocument)
            .join(Employee, Employee.employee_id == EmployeeDocument.employee_id)
            .join(Location, Location.location_id == Employee.location_id)
            .where(
                EmployeeDocument.document_id == document_id,
                EmployeeDocument.is_active.is_(True),
                Location.region_id == region_id,
            )
        )
        document = self._session.execute(statement).scalars().one_or_none()
        return self._to_row(document) if document is not None else None

    def deactivate(self, document_id: int) -> int:
        result = self._session.execute(
            update(EmployeeDocument)
            .where(EmployeeDocument.document_id == document_id, EmployeeDocument.is_active.is_(True))
            .values(is_active=False)
        )
        return int(result.rowcount or 0)

    def file_urls_for_employee(self, employee_id: int) -> list[str]:
        """Files still on disk for an employee: active documents plus the image."""

        urls = list(
            self._session.execute(
                select(EmployeeDocument.file_url).where(
                    EmployeeDocument.employee_id == employee_id,
                    EmployeeDocument.is_active.is_(True),
                )
            ).scalars()
        )
        image_url = self.get_image_url(employee_id)
        if image_url:
            urls.append(image_url)
        return urls

    def get_image_url(self, employee_id: int) -> str | None:
        return self._session.execute(
            select(EmployeeImage.image_url).where(EmployeeImage.employee_id == employee_id)
        ).scalar_one_or_none()

    def insert_image(self, employee_id: int, image_url: str) -> None:
        self._session.execute(insert(EmployeeImage).values(employee_id=employee_id, image_url=image_url))

    def _to_row(self, document: EmployeeDocument) -> DocumentRow:
        return DocumentRow(
            document_id=int(document.document_id),
            employee_id=int(document.employee_id),
            document_type=document.document_type,
            document_name=document.document_name,
            file_url=document.file_url,
            uploaded_at=self._coerce_optional_datetime(document.uploaded_at),
        )
