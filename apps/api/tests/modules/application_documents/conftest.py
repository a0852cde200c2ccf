"""
Fixtures for application documents tests.
"""

from datetime import UTC, datetime

import pytest

from app.modules.application_documents.models import ApplicationDocument


@pytest.fixture
def make_document():
    """Factory for unsaved document records."""

    def _make(**overrides) -> ApplicationDocument:
        values = {
            "id": 5,
            "application_id": 101,
            "file_name": "birth_certificate-1760000000000-123456789.pdf",
            "original_name": "birth_certificate.pdf",
            "file_path": "uploads/applications/birth_certificate-1760000000000-123456789.pdf",
            "file_type": "application/pdf",
            "file_size": 2048,
            "document_type": "BIRTH_CERTIFICATE",
            "uploaded_at": datetime(2026, 1, 15, 8, 30, tzinfo=UTC),
        }
        values.update(overrides)
        return ApplicationDocument(**values)

    return _make


@pytest.fixture
def pdf_upload():
    """Keyword arguments for a valid upload."""
    return {
        "application_id": "101",
        "document_type": "BIRTH_CERTIFICATE",
        "filename": "birth_certificate.pdf",
        "content_type": "application/pdf",
        "content": b"%PDF-1.4 birth certificate",
    }
