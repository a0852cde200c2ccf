"""
Fixtures for admissions tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock

import pytest

from app.modules.admissions import repository
from app.modules.admissions.models import Application, ApplicationStatus
from app.modules.admissions.schemas import ApplicationSubmission


@pytest.fixture
def submission_payload():
    """A complete camelCase submit body, as the admission form sends it."""
    return {
        "surname": "Doe",
        "learnerName": "Jane",
        "dateOfBirth": "2019-03-14",
        "placeOfBirth": "Cape Town",
        "gradeApplying": "Grade R",
        "year": "2026",
        "hasRepeated": False,
        "motherFullName": "Mary Doe",
        "motherCellPhone": "082 555 0101",
        "motherAddress": "12 Oak Street, Rondebosch",
        "motherEmail": "mary.doe@example.com",
        "currentSchoolTel": "021 555 0199",
        "currentSchoolContact": "Mrs Smith",
        "paymentMethod": "Cash Deposit",
        "agreeToTerms": True,
        "agreeToPrivacy": True,
    }


@pytest.fixture
def sample_application_model():
    """Create a sample persisted application."""
    application = MagicMock(spec=Application)
    application.id = 42
    application.surname = "Doe"
    application.learner_name = "Jane"
    application.date_of_birth = date(2019, 3, 14)
    application.grade_applying = "Grade R"
    application.year = "2026"
    application.mother_email = "mary.doe@example.com"
    application.status = ApplicationStatus.PENDING
    application.submitted_at = datetime(2026, 1, 15, 8, 0, tzinfo=UTC)
    return application


@pytest.fixture
def stored_application(submission_payload):
    """A real Application row built from the complete payload."""
    submission = ApplicationSubmission.model_validate(submission_payload)
    application = Application(
        **repository._column_values(submission), status=ApplicationStatus.PENDING
    )
    application.id = 42
    application.submitted_at = datetime(2026, 1, 15, 8, 0, tzinfo=UTC)
    application.updated_at = datetime(2026, 1, 15, 8, 0, tzinfo=UTC)
    return application
