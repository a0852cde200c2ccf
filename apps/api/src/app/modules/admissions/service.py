"""
Admissions Service Layer

Business logic for learner admission applications.

Submission Flow:
1. Parse the camelCase form payload (type and format checks)
2. Run the same stage rules the form applies before submitting
3. Create the application record with PENDING status
4. Send a best-effort acknowledgement to the guardian and a notification to
   the admissions office (email failures never fail the submission)

Contact details are never logged; application ids are.
"""

import logging
from typing import Any

from pydantic import ValidationError
from pydantic.alias_generators import to_snake
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_admissions_office_notification, send_application_received
from app.modules.admission_form.draft import GUARDIAN_EMAIL_FIELDS
from app.modules.admission_form.stages import DATA_STAGES
from app.modules.admission_form.validator import GUARDIAN_PARTIES, is_blank, validate
from app.modules.admissions import repository
from app.modules.admissions.models import Application, ApplicationStatus
from app.modules.admissions.repository import InvalidStatusTransitionError
from app.modules.admissions.schemas import ApplicationSubmission, StatusUpdateRequest

logger = logging.getLogger(__name__)


class AdmissionsServiceError(Exception):
    """Base exception for admissions service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ApplicationValidationError(AdmissionsServiceError):
    """Raised when a submitted application fails validation."""

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__(
            message="Validation error",
            error_code="VALIDATION_ERROR",
            status_code=400,
        )


class ApplicationNotFoundError(AdmissionsServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: int | None = None):
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
            status_code=404,
        )


class InvalidStatusChangeError(AdmissionsServiceError):
    """Raised when the requested status can't be reached from the current one."""

    def __init__(self, error: InvalidStatusTransitionError):
        super().__init__(
            message=(
                f"Cannot change status from {error.current_status.value} "
                f"to {error.new_status.value}"
            ),
            error_code="INVALID_STATUS_TRANSITION",
            status_code=409,
        )


def _format_parse_errors(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        loc = [part for part in error["loc"] if isinstance(part, str)]
        field = to_snake(loc[-1]) if loc else "body"
        ctx_error = error.get("ctx", {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error["msg"]
        errors.append({"field": field, "message": message})
    return errors


def parse_submission(payload: Any) -> ApplicationSubmission:
    """
    Validate a raw submit payload.

    Every data stage is checked, so the response lists all problems at once.

    Raises:
        ApplicationValidationError: With one {field, message} entry per problem
    """
    try:
        submission = ApplicationSubmission.model_validate(payload)
    except ValidationError as e:
        raise ApplicationValidationError(_format_parse_errors(e)) from e

    errors = [
        {"field": field, "message": message}
        for stage in DATA_STAGES
        for field, message in validate(stage, submission).items()
    ]
    if errors:
        raise ApplicationValidationError(errors)

    return submission


def _acknowledgement_recipient(submission: ApplicationSubmission) -> tuple[str, str] | None:
    """First guardian email present, with the matching guardian's name."""
    for email_field, party in zip(GUARDIAN_EMAIL_FIELDS, GUARDIAN_PARTIES):
        email = getattr(submission, email_field)
        if not is_blank(email):
            return email.strip(), getattr(submission, party.name_field).strip()
    return None


async def _send_submission_emails(
    application: Application, submission: ApplicationSubmission
) -> None:
    recipient = _acknowledgement_recipient(submission)
    if recipient is not None:
        to_email, guardian_name = recipient
        try:
            sent = await send_application_received(
                to_email=to_email,
                guardian_name=guardian_name,
                learner_name=submission.learner_name.strip(),
                grade_applying=submission.grade_applying.strip(),
                year=submission.year.strip(),
                application_id=application.id,
            )
            if not sent:
                logger.error(f"Failed to send acknowledgement for application {application.id}")
        except Exception as e:
            logger.error(
                f"Exception sending acknowledgement for application {application.id}: {e}"
            )
    else:
        logger.info(f"No guardian email on application {application.id}, skipping acknowledgement")

    if settings.admissions_notify_email:
        try:
            await send_admissions_office_notification(
                to_email=settings.admissions_notify_email,
                surname=submission.surname.strip(),
                learner_name=submission.learner_name.strip(),
                grade_applying=submission.grade_applying.strip(),
                year=submission.year.strip(),
                application_id=application.id,
            )
        except Exception as e:
            logger.error(
                f"Exception notifying admissions office of application {application.id}: {e}"
            )


async def submit_application(db: AsyncSession, payload: Any) -> Application:
    """
    Submit a new admission application.

    Args:
        db: Database session
        payload: Decoded JSON request body

    Returns:
        The created Application

    Raises:
        ApplicationValidationError: If the payload is incomplete or malformed
    """
    submission = parse_submission(payload)

    application = await repository.create(db, submission)
    logger.info(
        f"Created application {application.id} "
        f"(grade {submission.grade_applying.strip()}, {submission.year.strip()})"
    )

    await _send_submission_emails(application, submission)

    return application


async def get_application(db: AsyncSession, application_id: int) -> Application:
    """
    Get an application by ID.

    Raises:
        ApplicationNotFoundError: If the application doesn't exist
    """
    application = await repository.get_by_id(db, application_id)
    if not application:
        raise ApplicationNotFoundError(application_id)
    return application


# ============================================
# Review (admissions office)
# ============================================


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> dict[str, Any]:
    """List applications for the admissions office, newest first."""
    applications, total = await repository.list_applications(
        db, status=status, search=search, skip=skip, limit=limit
    )
    return {"applications": applications, "total": total, "skip": skip, "limit": limit}


async def update_application_status(
    db: AsyncSession, application_id: int, payload: Any
) -> Application:
    """
    Change an application's status and review notes.

    Raises:
        ApplicationValidationError: Unknown status or malformed body
        ApplicationNotFoundError: If the application doesn't exist
        InvalidStatusChangeError: If the transition is not allowed
    """
    try:
        update = StatusUpdateRequest.model_validate(payload)
    except ValidationError as e:
        raise ApplicationValidationError(_format_parse_errors(e)) from e

    application = await get_application(db, application_id)
    previous = application.status

    try:
        application = await repository.update_status(
            db, application, update.status, notes=update.notes
        )
    except InvalidStatusTransitionError as e:
        raise InvalidStatusChangeError(e) from e

    logger.info(
        f"Application {application_id} status changed: {previous.value} -> {update.status.value}"
    )
    return application


async def get_statistics(db: AsyncSession) -> dict[str, Any]:
    return await repository.get_statistics(db)
