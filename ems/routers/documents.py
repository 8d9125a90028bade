"""Routes for employee documents and profile images."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from ems.core.security import AuthenticatedOperator, get_current_operator
from ems.schemas.documents import DocumentDeleted, DocumentSummary, DocumentUploaded, ImageUploaded
from ems.services import DocumentService
from ems.web.dependencies import get_document_service

router = APIRouter(prefix="/employee", tags=["documents"])


async def _read(upload: UploadFile | None) -> tuple[str | None, bytes | None]:
    if upload is None:
        return None, None
    content = await upload.read()
    return upload.filename, content


@router.post("/{employee_id}/document", response_model=DocumentUploaded, status_code=201)
async def upload_document(
    employee_id: int,
    document_type: str | None = Form(None),
    file: UploadFile | None = File(None),
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: DocumentService = Depends(get_document_service),
) -> DocumentUploaded:
    filename, content = await _read(file)
    return await run_in_threadpool(
        service.upload,
        employee_id,
        operator.region_id,
        document_type=document_type,
        filename=filename,
        content=content,
    )


@router.get("/{employee_id}/documents", response_model=list[DocumentSummary])
def list_documents(
    employee_id: int,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: DocumentService = Depends(get_document_service),
) -> list[DocumentSummary]:
    return service.list_documents(employee_id, operator.region_id)


@router.delete("/document/{document_id}", response_model=DocumentDeleted)
def delete_document(
    document_id: int,
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: DocumentService = Depends(get_document_service),
) -> DocumentDeleted:
    return service.delete(document_id, operator.region_id)


@router.post("/{employee_id}/image", response_model=ImageUploaded, status_code=201)
async def upload_image(
    employee_id: int,
    image: UploadFile | None = File(None),
    operator: AuthenticatedOperator = Depends(get_current_operator),
    service: DocumentService = Depends(get_document_service),
) -> ImageUploaded:
    filename, content = await _read(image)
    return await run_in_threadpool(
        service.upload_image,
        employee_id,
        operator.region_id,
        filename=filename,
        content=content,
    )
