"""
Supporting Document Types

Single definition of the document type vocabulary. The documents API uses it
as its allow-list and the form workflow falls back to it when the remote
catalog cannot be fetched.
"""

from pydantic import BaseModel, ConfigDict, Field

DOCUMENT_TYPE_CODES: tuple[str, ...] = (
    "BIRTH_CERTIFICATE",
    "BAPTISM_CERTIFICATE",
    "SCHOOL_REPORT",
    "ID_COPY_MOTHER",
    "ID_COPY_FATHER",
    "PROOF_OF_RESIDENCE",
    "IMMUNIZATION_CERTIFICATE",
    "SALARY_SLIP_MOTHER",
    "SALARY_SLIP_FATHER",
    "BANK_STATEMENT",
    "TAX_CLEARANCE",
    "VISA_DOCUMENT",
    "OTHER",
)


class DocumentTypeDescriptor(BaseModel):
    """A document type code with its display label."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str = Field(..., alias="value")
    label: str


def label_for(code: str) -> str:
    """
    Build the display label for a document type code.

    Example: ID_COPY_MOTHER -> "Id Copy Mother"
    """
    return " ".join(word.capitalize() for word in code.split("_"))


def is_valid_document_type(code: str) -> bool:
    """Check whether a code belongs to the vocabulary."""
    return code in DOCUMENT_TYPE_CODES


FALLBACK_DOCUMENT_TYPES: tuple[DocumentTypeDescriptor, ...] = tuple(
    DocumentTypeDescriptor(code=code, label=label_for(code)) for code in DOCUMENT_TYPE_CODES
)
