"""
Admissions Router

Public endpoints for learner admission applications (no authentication:
applicants don't have accounts).

Endpoints:
- POST /admissions/submit - Submit a new application
- GET /admissions/{application_id} - Confirm an application was received

Review endpoints for the admissions office (authentication is not wired up
yet; put these behind the office network or a proxy until it is):
- GET /admissions/applications - List applications, newest first
- GET /admissions/applications/{application_id} - Full application
- PATCH /admissions/applications/{application_id} - Change status and notes
- GET /admissions/statistics - Counts by status, grade and month

Errors use the admissions envelope ``{success: false, message, ...}`` so the
form can show the server's message verbatim.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.rate_limit import client_ip_key, rate_limit
from app.modules.admissions import service
from app.modules.admissions.models import ApplicationStatus
from app.modules.admissions.schemas import (
    ApplicationDetail,
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationStatistics,
    ApplicationStatisticsResponse,
    ApplicationSummary,
    ApplicationSummaryResponse,
    SubmitApplicationResponse,
    ValidationErrorResponse,
)
from app.modules.admissions.service import (
    AdmissionsServiceError,
    ApplicationNotFoundError,
    ApplicationValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def _error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


@router.post(
    "/submit",
    response_model=SubmitApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Admission Application",
    description="""
Submit a completed admission form.

The body is the camelCase form payload. The same stage rules the form
enforces are applied here; every problem is reported at once.

Supporting documents are attached afterwards via
`POST /application-documents/upload` using the returned `applicationId`.
""",
    responses={
        201: {"description": "Application created", "model": SubmitApplicationResponse},
        400: {"description": "Validation error", "model": ValidationErrorResponse},
        429: {"description": "Too many submissions from this client"},
    },
)
@rate_limit(
    limit=settings.submit_rate_limit,
    window_seconds=settings.rate_limit_window_seconds,
    key_func=client_ip_key("admissions_submit"),
)
async def submit_application(
    request: Request,
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await service.submit_application(db, payload)
        logger.info(f"Application submitted successfully: id={application.id}")
        return SubmitApplicationResponse(applicationId=application.id)

    except ApplicationValidationError as e:
        logger.info(f"Application rejected with {len(e.errors)} validation error(s)")
        return _error_response(e.status_code, e.message, errors=e.errors)
    except AdmissionsServiceError as e:
        logger.error(f"Admissions service error: {e.message}")
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error submitting application: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


# ============================================
# Review endpoints
# ============================================


@router.get(
    "/applications",
    response_model=ApplicationListResponse,
    summary="List Applications",
    description="""
Newest applications first.

**Filters:**
- `status`: Only applications in this status
- `search`: Case-insensitive match on surname or learner name

**Pagination:** `skip` (default 0) and `limit` (1-100, default 20)
""",
)
async def list_applications(
    status_filter: ApplicationStatus | None = Query(
        None, alias="status", description="Filter by application status"
    ),
    search: str | None = Query(None, min_length=1, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    try:
        result = await service.list_applications(
            db, status=status_filter, search=search, skip=skip, limit=limit
        )
        return ApplicationListResponse(
            applications=[ApplicationSummary.model_validate(a) for a in result["applications"]],
            total=result["total"],
            skip=result["skip"],
            limit=result["limit"],
        )

    except Exception as e:
        logger.exception(f"Error listing applications: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.get(
    "/statistics",
    response_model=ApplicationStatisticsResponse,
    summary="Get Application Statistics",
    description="""
Counts for the admissions office:
- `total` and `byStatus` (every status, zero included)
- `gradeDistribution`: applications per grade, most requested first
- `monthly`: applications per month over the last 12 months, newest first
""",
)
async def get_statistics(db: AsyncSession = Depends(get_db)):
    try:
        statistics = await service.get_statistics(db)
        return ApplicationStatisticsResponse(
            statistics=ApplicationStatistics.model_validate(statistics)
        )

    except Exception as e:
        logger.exception(f"Error computing application statistics: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationDetailResponse,
    summary="Get Full Application",
    responses={404: {"description": "Application not found"}},
)
async def get_application_detail(
    application_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await service.get_application(db, application_id)
        return ApplicationDetailResponse(application=ApplicationDetail.model_validate(application))

    except ApplicationNotFoundError as e:
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error fetching application {application_id}: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.patch(
    "/applications/{application_id}",
    response_model=ApplicationDetailResponse,
    summary="Update Application Status",
    description="""
Body: `{"status": "...", "notes": "..."}`. Notes replace any previous notes;
omit them to clear.

**Transitions:**
- pending -> under_review, approved, rejected
- under_review -> pending, approved, rejected
- approved -> enrolled, rejected
- rejected and enrolled are final

Re-sending the current status only updates the notes.
""",
    responses={
        400: {"description": "Unknown status", "model": ValidationErrorResponse},
        404: {"description": "Application not found"},
        409: {"description": "Transition not allowed from the current status"},
    },
)
async def update_application_status(
    application_id: int,
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await service.update_application_status(db, application_id, payload)
        return ApplicationDetailResponse(application=ApplicationDetail.model_validate(application))

    except ApplicationValidationError as e:
        return _error_response(e.status_code, e.message, errors=e.errors)
    except AdmissionsServiceError as e:
        logger.info(f"Status change rejected for application {application_id}: {e.message}")
        return _error_response(e.status_code, e.message, error=e.error_code)
    except Exception as e:
        logger.exception(f"Unexpected error updating application {application_id}: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


@router.get(
    "/{application_id}",
    response_model=ApplicationSummaryResponse,
    summary="Get Application Summary",
    responses={404: {"description": "Application not found"}},
)
async def get_application(
    application_id: int,
    db: AsyncSession = Depends(get_db),
):
    try:
        application = await service.get_application(db, application_id)
        return ApplicationSummaryResponse(
            application=ApplicationSummary.model_validate(application)
        )

    except ApplicationNotFoundError as e:
        logger.info(f"Application lookup miss: id={application_id}")
        return _error_response(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected error fetching application {application_id}: {e}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
