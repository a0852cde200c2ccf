"""
Application Documents Service Layer

Business logic for supporting documents attached to admission applications.

Upload Flow:
1. Check the request has a file, an application id and a document type
2. Check the document type against the shared vocabulary
3. Check MIME type, size (``settings.max_upload_mb``) and that the file isn't empty
4. Confirm the application exists
5. Write the file to disk, then record its metadata; the file is removed again
   if the record can't be written

Deletion removes the record first, then the file; a missing file is logged
and otherwise ignored.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.modules.admissions import repository as admissions_repository
from app.modules.application_documents import repository, storage
from app.modules.application_documents.models import ApplicationDocument
from app.modules.shared.document_types import (
    DOCUMENT_TYPE_CODES,
    FALLBACK_DOCUMENT_TYPES,
    DocumentTypeDescriptor,
    is_valid_document_type,
)

logger = logging.getLogger(__name__)


class DocumentServiceError(Exception):
    """Base exception for document service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class MissingUploadFieldsError(DocumentServiceError):
    def __init__(self, message: str = "Application ID and document type are required"):
        super().__init__(message=message, error_code="MISSING_FIELDS", status_code=400)


class InvalidApplicationIdError(DocumentServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid application ID", error_code="INVALID_APPLICATION_ID", status_code=400
        )


class InvalidDocumentTypeError(DocumentServiceError):
    """Raised when the document type isn't in the vocabulary."""

    def __init__(self):
        super().__init__(
            message=f"Invalid document type. Allowed types: {', '.join(DOCUMENT_TYPE_CODES)}",
            error_code="INVALID_DOCUMENT_TYPE",
            status_code=400,
        )


class UnsupportedFileTypeError(DocumentServiceError):
    """Raised when the uploaded file's MIME type isn't accepted."""

    def __init__(self, content_type: str | None):
        super().__init__(
            message=(
                f"File type {content_type or 'unknown'} is not allowed. "
                "Please upload a PDF, Word, Excel, text, CSV, JPEG or PNG file."
            ),
            error_code="UNSUPPORTED_FILE_TYPE",
            status_code=400,
        )


class FileTooLargeError(DocumentServiceError):
    def __init__(self):
        super().__init__(
            message=f"The uploaded file exceeds the maximum allowed size of {settings.max_upload_mb} MB",
            error_code="FILE_TOO_LARGE",
            status_code=413,
        )


class EmptyFileError(DocumentServiceError):
    def __init__(self, message: str = "The uploaded file is empty"):
        super().__init__(message=message, error_code="EMPTY_FILE", status_code=400)


class ApplicationNotFoundError(DocumentServiceError):
    def __init__(self):
        super().__init__(
            message="Application not found", error_code="APPLICATION_NOT_FOUND", status_code=404
        )


class DocumentNotFoundError(DocumentServiceError):
    def __init__(self, message: str = "Document not found"):
        super().__init__(message=message, error_code="DOCUMENT_NOT_FOUND", status_code=404)


def get_document_types() -> list[DocumentTypeDescriptor]:
    """The document type vocabulary with display labels."""
    return list(FALLBACK_DOCUMENT_TYPES)


def _parse_application_id(raw: str) -> int:
    try:
        application_id = int(raw.strip())
    except ValueError as e:
        raise InvalidApplicationIdError() from e
    if application_id <= 0:
        raise InvalidApplicationIdError()
    return application_id


async def upload_document(
    db: AsyncSession,
    *,
    application_id: str | None,
    document_type: str | None,
    filename: str | None,
    content_type: str | None,
    content: bytes | None,
) -> ApplicationDocument:
    """
    Store one supporting document for an application.

    Args:
        db: Database session
        application_id: Raw ``applicationId`` form value
        document_type: Raw ``documentType`` form value
        filename: Name of the uploaded file as sent by the client
        content_type: MIME type sent with the file part
        content: File bytes; None when no file part was sent

    Returns:
        The created ApplicationDocument

    Raises:
        DocumentServiceError: Any of the subclasses above
    """
    if content is None or not filename:
        raise EmptyFileError("No document file provided")
    if not application_id or not document_type:
        raise MissingUploadFieldsError()

    parsed_id = _parse_application_id(application_id)
    document_type = document_type.strip()

    if not is_valid_document_type(document_type):
        raise InvalidDocumentTypeError()
    if not storage.is_allowed_mime_type(content_type):
        raise UnsupportedFileTypeError(content_type)
    if len(content) > settings.max_upload_bytes:
        raise FileTooLargeError()
    if not content:
        raise EmptyFileError()

    if not await admissions_repository.exists(db, parsed_id):
        raise ApplicationNotFoundError()

    stored_name, file_path = await storage.save_file(filename, content)
    try:
        document = await repository.create(
            db,
            application_id=parsed_id,
            file_name=stored_name,
            original_name=filename,
            file_path=file_path,
            file_type=content_type.split(";")[0].strip().lower(),
            file_size=len(content),
            document_type=document_type,
        )
    except Exception:
        await storage.delete_file(file_path)
        raise

    logger.info(
        f"Uploaded document {document.id} ({document_type}, {len(content)} bytes) "
        f"for application {parsed_id}"
    )
    return document


async def list_documents(db: AsyncSession, application_id: int) -> list[ApplicationDocument]:
    """Documents for an application in upload order. Unknown ids yield an empty list."""
    return await repository.list_for_application(db, application_id)


async def get_document(db: AsyncSession, document_id: int) -> ApplicationDocument:
    document = await repository.get_by_id(db, document_id)
    if not document:
        raise DocumentNotFoundError()
    return document


async def get_download(db: AsyncSession, document_id: int) -> ApplicationDocument:
    """
    Look up a document whose file is still on disk.

    Raises:
        DocumentNotFoundError: No such record, or its file is missing
    """
    document = await get_document(db, document_id)
    if not await storage.file_exists(document.file_path):
        logger.error(f"File for document {document_id} is missing from storage")
        raise DocumentNotFoundError("File not found on server")
    return document


async def delete_document(db: AsyncSession, document_id: int) -> None:
    """Delete a document record and its stored file."""
    document = await get_document(db, document_id)
    file_path = document.file_path
    application_id = document.application_id

    await repository.delete(db, document)
    await storage.delete_file(file_path)

    logger.info(f"Deleted document {document_id} from application {application_id}")
