"""
Admission Form Client Schemas

Wire models returned by the admissions API, as seen by the form workflow.
"""

import mimetypes
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class SupportingDocument(BaseModel):
    """One uploaded supporting document."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int
    stored_name: str = Field(..., alias="fileName")
    original_name: str = Field(..., alias="originalName")
    mime_category: str = Field(..., alias="fileType")
    size_bytes: int = Field(..., alias="fileSize")
    document_type: str = Field(..., alias="documentType")
    uploaded_at: datetime = Field(..., alias="uploadedAt")
    download_url: str | None = Field(None, alias="downloadUrl")


class DocumentFile(BaseModel):
    """A file selected by the applicant for upload."""

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "DocumentFile":
        """Read a file from disk, guessing its MIME type from the extension."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or guessed or "application/octet-stream",
        )


def format_file_size(size_bytes: int) -> str:
    """
    Human-readable file size.

    Example: 1536 -> "1.5 KB"
    """
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {units[index]}"
