"""
Application Documents Router

Public endpoints for phase 2 of the admission workflow: supporting documents
attached to an existing application.

Endpoints:
- GET /application-documents/types - Document type vocabulary
- POST /application-documents/upload - Upload one document (multipart)
- GET /application-documents/download/{document_id} - Download the stored file
- GET /application-documents/{application_id} - List an application's documents
- DELETE /application-documents/{document_id} - Delete a document

``/types`` and ``/download/...`` are registered before ``/{application_id}``
so they are never captured by it.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse, JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import client_ip_key, rate_limit
from app.modules.application_documents import service, storage
from app.modules.application_documents.models import ApplicationDocument
from app.modules.application_documents.schemas import (
    DocumentDeletedResponse,
    DocumentErrorResponse,
    DocumentListResponse,
    DocumentRead,
    DocumentTypesResponse,
    DocumentUploadResponse,
)
from app.modules.application_documents.service import DocumentServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _service_error_response(e: DocumentServiceError) -> JSONResponse:
    if e.status_code >= 500:
        logger.error(f"Document service error: {e.message}")
    else:
        logger.info(f"Document request rejected ({e.error_code}): {e.message}")
    return _error_response(e.status_code, e.message)


def _to_read(request: Request, document: ApplicationDocument, with_download_url: bool) -> DocumentRead:
    read = DocumentRead.model_validate(document)
    if with_download_url:
        download_url = request.url_for("download_document", document_id=document.id).path
        read = read.model_copy(update={"download_url": download_url})
    return read


@router.get(
    "/types",
    response_model=DocumentTypesResponse,
    summary="List Document Types",
)
async def list_document_types() -> DocumentTypesResponse:
    """Controlled vocabulary of supporting document types with display labels."""
    return DocumentTypesResponse(data=service.get_document_types())


@router.post(
    "/upload",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Supporting Document",
    description=f"""
Upload one supporting document for an existing application.

Multipart fields: `document` (file), `applicationId`, `documentType`.
Accepted formats: PDF, Word, Excel, text, CSV, JPEG, PNG. Maximum size
{settings.max_upload_mb} MB.
""",
    responses={
        400: {"description": "Missing field, invalid type or empty file", "model": DocumentErrorResponse},
        404: {"description": "Application not found", "model": DocumentErrorResponse},
        413: {"description": "File too large", "model": DocumentErrorResponse},
        429: {"description": "Too many uploads from this client"},
    },
)
@rate_limit(
    limit=settings.upload_rate_limit,
    window_seconds=settings.rate_limit_window_seconds,
    key_func=client_ip_key("application_documents_upload"),
)
async def upload_document(
    request: Request,
    document: UploadFile | None = File(None),
    application_id: str | None = Form(None, alias="applicationId"),
    document_type: str | None = Form(None, alias="documentType"),
    db: AsyncSession = Depends(get_db),
):
    try:
        content = None
        if document is not None:
            # One byte past the limit is enough for the size check to reject it
            content = await document.read(settings.max_upload_bytes + 1)
        created = await service.upload_document(
            db,
            application_id=application_id,
            document_type=document_type,
            filename=document.filename if document is not None else None,
            content_type=document.content_type if document is not None else None,
            content=content,
        )
        return DocumentUploadResponse(data=_to_read(request, created, with_download_url=False))

    except DocumentServiceError as e:
        return _service_error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error uploading document: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
    finally:
        if document is not None:
            await document.close()


@router.get(
    "/download/{document_id}",
    summary="Download Supporting Document",
    response_class=FileResponse,
    responses={404: {"description": "Document or file not found", "model": DocumentErrorResponse}},
)
async def download_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        document = await service.get_download(db, document_id)
    except DocumentServiceError as e:
        return _service_error_response(e)

    return FileResponse(
        path=storage.resolve_path(document.file_path),
        filename=document.original_name,
        media_type=document.file_type,
    )


@router.get(
    "/{application_id}",
    response_model=DocumentListResponse,
    summary="List Application Documents",
)
async def list_documents(
    request: Request,
    application_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Documents attached to an application, oldest upload first."""
    try:
        documents = await service.list_documents(db, application_id)
        return DocumentListResponse(
            data=[_to_read(request, doc, with_download_url=True) for doc in documents]
        )
    except Exception as e:
        logger.exception(f"Unexpected error listing documents for application {application_id}: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.delete(
    "/{document_id}",
    response_model=DocumentDeletedResponse,
    summary="Delete Supporting Document",
    responses={404: {"description": "Document not found", "model": DocumentErrorResponse}},
)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_document(db, document_id)
        return DocumentDeletedResponse()

    except DocumentServiceError as e:
        return _service_error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error deleting document {document_id}: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
