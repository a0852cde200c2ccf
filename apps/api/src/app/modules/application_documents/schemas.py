"""
Application Documents Schemas

Response envelopes for the documents API. Field names are camelCase on the
wire (``fileName``, ``uploadedAt``, ...).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.modules.shared.document_types import DocumentTypeDescriptor


class DocumentRead(BaseModel):
    """One stored supporting document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    file_name: str
    original_name: str
    file_type: str
    file_size: int
    document_type: str
    uploaded_at: datetime
    download_url: str | None = None


class DocumentUploadResponse(BaseModel):
    success: bool = True
    message: str = "Document uploaded successfully"
    data: DocumentRead


class DocumentListResponse(BaseModel):
    success: bool = True
    data: list[DocumentRead]


class DocumentTypesResponse(BaseModel):
    success: bool = True
    data: list[DocumentTypeDescriptor]


class DocumentDeletedResponse(BaseModel):
    success: bool = True
    message: str = "Document deleted successfully"


class DocumentErrorResponse(BaseModel):
    success: bool = False
    error: str
