"""Employee documents and profile images backed by the blob store."""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ems.core.errors import (
    ConstraintViolation,
    DuplicateDocumentType,
    DuplicatePhoto,
    MissingRequiredField,
    NotFound,
)
from ems.core.log import get_logger
from ems.models import PROFILE_PHOTO
from ems.repositories import DocumentRepository, EmployeeRepository
from ems.schemas.documents import DocumentDeleted, DocumentSummary, DocumentUploaded, ImageUploaded

from .blob_store import LocalBlobStore, log_blob_deletion

LOGGER = get_logger(__name__)

DOCUMENT_NOT_FOUND = "Document not found or already deleted"
IMAGE_EXISTS = "Image already exists for this employee"


class DocumentService:
    """Upload, list and retire employee files.

    An employee holds at most one active identity document (any type other
    than ``PROFILE_PHOTO``) and at most one active ``PROFILE_PHOTO``. Files are
    written before their metadata row; when the row cannot be committed the
    file is removed again.
    """

    def __init__(self, session_factory: sessionmaker, blob_store: LocalBlobStore) -> None:
        self._session_factory = session_factory
        self._blob_store = blob_store

    def upload(
        self,
        employee_id: int,
        region_id: int,
        *,
        document_type: str | None,
        filename: str | None,
        content: bytes | None,
    ) -> DocumentUploaded:
        normalized_type = (document_type or "").strip().upper()
        missing = [name for name, value in (("document_type", normalized_type), ("file", content)) if not value]
        if missing:
            raise MissingRequiredField(missing)

        stored_url: str | None = None
        try:
            with self._session_factory.begin() as session:
                if not EmployeeRepository(session).exists_in_region(employee_id, region_id):
                    raise NotFound()
                documents = DocumentRepository(session)
                self._check_single_active(documents, employee_id, normalized_type)
                stored_url = self._blob_store.store(content, filename)
                document_id = documents.insert(
                    employee_id,
                    document_type=normalized_type,
                    document_name=filename,
                    file_url=stored_url,
                )
        except IntegrityError as exc:
            self._discard(stored_url)
            raise ConstraintViolation(str(exc.orig)) from exc
        except Exception:
            self._discard(stored_url)
            raise

        LOGGER.info("Stored %s document %s for employee %s", normalized_type, document_id, employee_id)
        return DocumentUploaded(
            message="Document uploaded successfully",
            document_id=document_id,
            file_url=stored_url,
        )

    def list_documents(self, employee_id: int, region_id: int) -> list[DocumentSummary]:
        with self._session_factory() as session:
            if not EmployeeRepository(session).exists_in_region(employee_id, region_id):
                raise NotFound()
            rows = DocumentRepository(session).list_active(employee_id)
        return [
            DocumentSummary(
                document_id=row.document_id,
                document_type=row.document_type,
                document_name=row.document_name,
                file_url=row.file_url,
                uploaded_at=row.uploaded_at,
            )
            for row in rows
        ]

    def delete(self, document_id: int, region_id: int) -> DocumentDeleted:
        """Soft-delete the document, then remove its file."""

        with self._session_factory.begin() as session:
            documents = DocumentRepository(session)
            document = documents.get_active_in_region(document_id, region_id)
            if document is None or documents.deactivate(document_id) == 0:
                raise NotFound(DOCUMENT_NOT_FOUND)

        result = self._blob_store.delete(document.file_url)
        log_blob_deletion(result)
        LOGGER.info("Deactivated document %s of employee %s", document_id, document.employee_id)
        return DocumentDeleted(
            message="Document deleted successfully",
            document_id=document_id,
            file_removed=result.removed,
        )

    def upload_image(
        self,
        employee_id: int,
        region_id: int,
        *,
        filename: str | None,
        content: bytes | None,
    ) -> ImageUploaded:
        if not content:
            raise MissingRequiredField(["image"])

        stored_url: str | None = None
        try:
            with self._session_factory.begin() as session:
                if not EmployeeRepository(session).exists_in_region(employee_id, region_id):
                    raise NotFound()
                documents = DocumentRepository(session)
                if documents.get_image_url(employee_id) is not None:
                    raise DuplicatePhoto(IMAGE_EXISTS)
                stored_url = self._blob_store.store(content, filename)
                documents.insert_image(employee_id, stored_url)
        except IntegrityError as exc:
            self._discard(stored_url)
            # Primary key clash: another upload won the race.
            raise DuplicatePhoto(IMAGE_EXISTS) from exc
        except Exception:
            self._discard(stored_url)
            raise

        LOGGER.info("Stored profile image for employee %s", employee_id)
        return ImageUploaded(message="Image uploaded", employee_id=employee_id, image_url=stored_url)

    @staticmethod
    def _check_single_active(documents: DocumentRepository, employee_id: int, document_type: str) -> None:
        if document_type == PROFILE_PHOTO:
            if documents.has_active_photo(employee_id):
                raise DuplicatePhoto()
            return
        existing = documents.find_active_identity_type(employee_id)
        if existing is not None:
            raise DuplicateDocumentType(existing)

    def _discard(self, url: str | None) -> None:
        if url is not None:
            log_blob_deletion(self._blob_store.delete(url))
