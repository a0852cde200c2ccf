"""
Document Attachment Client

Phase 2 of the workflow: attach supporting documents to an existing
application. Each call is independent, holds no state between calls, and
returns a ``Success``/``Failure`` instead of raising.

Endpoints:
- POST   /application-documents/upload         (multipart: document, applicationId, documentType)
- GET    /application-documents/{applicationId}
- DELETE /application-documents/{documentId}
- GET    /application-documents/download/{documentId}  (reference only, never fetched here)
"""

import io
import logging
from collections.abc import Callable

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.modules.admission_form.api_client import (
    AdmissionsApiBase,
    failure_from_exception,
    failure_from_response,
    parse_json,
)
from app.modules.admission_form.results import (
    UNKNOWN_MESSAGE,
    Failure,
    FailureReason,
    Result,
    Success,
)
from app.modules.admission_form.schemas import DocumentFile, SupportingDocument

logger = logging.getLogger(__name__)

DOCUMENTS_PATH = "/application-documents"

ProgressCallback = Callable[[int], None]

# Progress stays below 100 until the server has confirmed the upload
MAX_IN_FLIGHT_PROGRESS = 99


class _ProgressReporter:
    """
    Monotonic, best-effort progress reporting.

    Values only ever increase; callback errors are logged and dropped so a
    broken progress bar can't fail an upload.
    """

    def __init__(self, callback: ProgressCallback | None):
        self._callback = callback
        self._last = -1

    def report(self, percent: int) -> None:
        percent = max(0, min(100, percent))
        if self._callback is None or percent <= self._last:
            return
        self._last = percent
        try:
            self._callback(percent)
        except Exception as e:
            logger.warning(f"Upload progress callback failed: {e}")

    def report_bytes(self, sent: int, total: int) -> None:
        if total <= 0:
            return
        self.report(min(MAX_IN_FLIGHT_PROGRESS, sent * 100 // total))


class _ProgressReader(io.BytesIO):
    """In-memory file object that reports how much of it has been read."""

    def __init__(self, content: bytes, reporter: _ProgressReporter):
        super().__init__(content)
        self._total = len(content)
        self._reporter = reporter

    def read(self, size: int | None = -1) -> bytes:
        chunk = super().read(size)
        if chunk:
            self._reporter.report_bytes(self.tell(), self._total)
        return chunk


class DocumentAttachmentClient(AdmissionsApiBase):
    """Upload, list and delete supporting documents for an application."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        upload_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout, transport=transport)
        self.upload_timeout = (
            upload_timeout if upload_timeout is not None else settings.upload_timeout_seconds
        )

    async def upload(
        self,
        application_id: int,
        document_type: str,
        file: DocumentFile,
        on_progress: ProgressCallback | None = None,
    ) -> Result[SupportingDocument]:
        """
        Upload one file and bind it to ``application_id`` as ``document_type``.

        Progress (0-100) is reported through ``on_progress`` while the body is
        streamed; 100 is only reported once the server confirms the upload.
        """
        reporter = _ProgressReporter(on_progress)
        reporter.report(0)

        files = {
            "document": (
                file.filename,
                _ProgressReader(file.content, reporter),
                file.content_type,
            )
        }
        data = {"applicationId": str(application_id), "documentType": document_type}

        try:
            async with self._client(timeout=self.upload_timeout) as client:
                response = await client.post(f"{DOCUMENTS_PATH}/upload", data=data, files=files)
        except Exception as exc:
            return failure_from_exception(exc, "Document upload")

        body = parse_json(response)
        if not response.is_success or not isinstance(body, dict) or body.get("success") is not True:
            return failure_from_response(response, "Document upload", body)

        try:
            document = SupportingDocument.model_validate(body.get("data"))
        except ValidationError:
            logger.error("Document upload returned an unreadable document payload")
            return Failure(
                reason=FailureReason.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                status_code=response.status_code,
            )

        reporter.report(100)
        logger.info(
            f"Uploaded document {document.id} ({document.document_type}) "
            f"for application {application_id}"
        )
        return Success(document)

    async def list(self, application_id: int) -> Result[list[SupportingDocument]]:
        """
        Fetch the documents attached to ``application_id``, in server order.

        Calling it again simply re-fetches; no local cache is consulted.
        """
        try:
            async with self._client() as client:
                response = await client.get(f"{DOCUMENTS_PATH}/{application_id}")
        except Exception as exc:
            return failure_from_exception(exc, "Document listing")

        body = parse_json(response)
        if not response.is_success or not isinstance(body, dict) or body.get("success") is not True:
            return failure_from_response(response, "Document listing", body)

        items = body.get("data")
        if not isinstance(items, list):
            logger.error("Document listing returned no data array")
            return Failure(
                reason=FailureReason.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                status_code=response.status_code,
            )

        try:
            documents = [SupportingDocument.model_validate(item) for item in items]
        except ValidationError:
            logger.error("Document listing returned an unreadable document payload")
            return Failure(
                reason=FailureReason.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                status_code=response.status_code,
            )

        return Success(documents)

    async def delete(self, document_id: int) -> Result[int]:
        """
        Delete one document. Irreversible: callers must confirm with the user first.

        Returns:
            Success(document_id) so the caller can drop exactly that entry
        """
        try:
            async with self._client() as client:
                response = await client.delete(f"{DOCUMENTS_PATH}/{document_id}")
        except Exception as exc:
            return failure_from_exception(exc, "Document deletion")

        body = parse_json(response)
        if not response.is_success or (isinstance(body, dict) and body.get("success") is False):
            return failure_from_response(response, "Document deletion", body)

        logger.info(f"Deleted document {document_id}")
        return Success(document_id)

    def resolve_download_reference(self, document_id: int) -> str:
        """Build the download URL for a document. Performs no I/O."""
        return f"{self.base_url}{DOCUMENTS_PATH}/download/{document_id}"
