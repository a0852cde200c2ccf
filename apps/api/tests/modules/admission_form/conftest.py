"""
Fixtures for admission form workflow tests.
"""

import httpx
import pytest

from app.modules.admission_form.catalog import DocumentTypeCatalog
from app.modules.admission_form.documents_client import DocumentAttachmentClient
from app.modules.admission_form.draft import ApplicationDraft
from app.modules.admission_form.schemas import DocumentFile
from app.modules.admission_form.transport import SubmissionTransport
from app.modules.admission_form.workflow import ApplicationWorkflow

from .fakes import BASE_URL, COMPLETE_FORM, FakeAdmissionsServer


@pytest.fixture
def server():
    """Fresh fake admissions API."""
    return FakeAdmissionsServer()


@pytest.fixture
def mock_transport(server):
    return httpx.MockTransport(server.handle)


@pytest.fixture
def submission_transport(mock_transport):
    return SubmissionTransport(base_url=BASE_URL, transport=mock_transport)


@pytest.fixture
def documents_client(mock_transport):
    return DocumentAttachmentClient(base_url=BASE_URL, transport=mock_transport)


@pytest.fixture
def catalog(mock_transport):
    return DocumentTypeCatalog(base_url=BASE_URL, transport=mock_transport)


@pytest.fixture
def workflow(submission_transport, documents_client, catalog):
    """Workflow wired to the fake API."""
    return ApplicationWorkflow(
        transport=submission_transport,
        documents_client=documents_client,
        catalog=catalog,
    )


@pytest.fixture
def complete_draft():
    return ApplicationDraft(**COMPLETE_FORM)


@pytest.fixture
def birth_certificate():
    return DocumentFile(
        filename="birth_certificate.pdf",
        content=b"%PDF-1.4 fake birth certificate",
        content_type="application/pdf",
    )

