"""
Submission Transport

Phase 1 of the workflow: create the application record and return its
identifier. Never raises; returns a Success carrying the application id or a
Failure describing why the record was not created.
"""

import logging

from app.modules.admission_form.api_client import (
    AdmissionsApiBase,
    failure_from_exception,
    failure_from_response,
    parse_json,
)
from app.modules.admission_form.draft import ApplicationDraft
from app.modules.admission_form.results import (
    UNKNOWN_MESSAGE,
    Failure,
    FailureReason,
    Result,
    Success,
)

logger = logging.getLogger(__name__)

SUBMIT_PATH = "/admissions/submit"


class SubmissionTransport(AdmissionsApiBase):
    """Performs the create-application call against ``POST /admissions/submit``."""

    async def create_application(self, draft: ApplicationDraft) -> Result[int]:
        """
        Submit the full draft.

        Args:
            draft: The complete form snapshot

        Returns:
            Success(application_id) or Failure
        """
        try:
            async with self._client() as client:
                response = await client.post(SUBMIT_PATH, json=draft.to_payload())
        except Exception as exc:
            return failure_from_exception(exc, "Application submission")

        body = parse_json(response)

        if not response.is_success or not isinstance(body, dict) or body.get("success") is not True:
            return failure_from_response(response, "Application submission", body)

        application_id = body.get("applicationId")
        if not isinstance(application_id, int) or isinstance(application_id, bool):
            logger.error("Application submission succeeded without a usable applicationId")
            return Failure(
                reason=FailureReason.UNKNOWN,
                message=UNKNOWN_MESSAGE,
                status_code=response.status_code,
            )

        logger.info(f"Application created: id={application_id}")
        return Success(application_id)
