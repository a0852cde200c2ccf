"""
Document Type Catalog

Fetches the document type vocabulary from the API. ``load_types`` never
blocks the upload stage: if the catalog can't be fetched it returns the
fallback list from ``app.modules.shared.document_types``.
"""

import logging

from pydantic import ValidationError

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
from app.modules.shared.document_types import FALLBACK_DOCUMENT_TYPES, DocumentTypeDescriptor

logger = logging.getLogger(__name__)

TYPES_PATH = "/application-documents/types"


class DocumentTypeCatalog(AdmissionsApiBase):
    """Remote document type catalog with a static fallback."""

    async def fetch_types(self) -> Result[list[DocumentTypeDescriptor]]:
        """Fetch the remote catalog without substituting the fallback."""
        try:
            async with self._client() as client:
                response = await client.get(TYPES_PATH)
        except Exception as exc:
            return failure_from_exception(exc, "Document type catalog")

        body = parse_json(response)
        if not response.is_success or not isinstance(body, dict) or body.get("success") is not True:
            return failure_from_response(response, "Document type catalog", body)

        items = body.get("data")
        try:
            if not isinstance(items, list) or not items:
                raise ValueError("empty catalog")
            return Success([DocumentTypeDescriptor.model_validate(item) for item in items])
        except (ValueError, ValidationError):
            logger.error("Document type catalog returned an unusable payload")
            return Failure(
                reason=FailureReason.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                status_code=response.status_code,
            )

    async def load_types(self) -> list[DocumentTypeDescriptor]:
        """Remote catalog if available, otherwise the built-in fallback list."""
        result = await self.fetch_types()
        if isinstance(result, Success):
            return result.value

        logger.warning(
            f"Using fallback document types ({result.reason.value}): {result.message}"
        )
        return list(FALLBACK_DOCUMENT_TYPES)
