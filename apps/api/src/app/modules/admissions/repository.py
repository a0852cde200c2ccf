"""
Admissions Repository

Database operations for admission applications. Only data access lives here;
validation and notifications are handled by the service layer.
"""

from datetime import UTC, date, datetime, timedelta
from typing import Any

from sqlalchemy import desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Application, ApplicationStatus
from .schemas import ApplicationSubmission


def _column_values(data: ApplicationSubmission) -> dict[str, Any]:
    """Map a submission to column values: trimmed strings, blanks stored as NULL."""
    values: dict[str, Any] = {}
    for name, value in data.model_dump().items():
        if isinstance(value, str):
            value = value.strip() or None
        values[name] = value

    values["date_of_birth"] = date.fromisoformat(data.date_of_birth.strip()[:10])
    return values


async def create(db: AsyncSession, data: ApplicationSubmission) -> Application:
    """Create a new application with PENDING status."""
    application = Application(**_column_values(data), status=ApplicationStatus.PENDING)

    db.add(application)
    await db.commit()
    await db.refresh(application)

    return application


async def get_by_id(db: AsyncSession, id: int) -> Application | None:
    """Get application by ID."""
    return await db.get(Application, id)


async def exists(db: AsyncSession, id: int) -> bool:
    """Check whether an application with this ID exists."""
    result = await db.execute(select(Application.id).where(Application.id == id))
    return result.scalar_one_or_none() is not None


# Review workflow; setting the current status again only updates the notes
VALID_STATUS_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.PENDING: {
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.UNDER_REVIEW: {
        ApplicationStatus.PENDING,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.APPROVED: {
        ApplicationStatus.ENROLLED,
        ApplicationStatus.REJECTED,
    },
    # Terminal
    ApplicationStatus.REJECTED: set(),
    ApplicationStatus.ENROLLED: set(),
}


class InvalidStatusTransitionError(ValueError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current_status: ApplicationStatus, new_status: ApplicationStatus):
        self.current_status = current_status
        self.new_status = new_status
        valid_transitions = sorted(s.value for s in VALID_STATUS_TRANSITIONS[current_status])
        super().__init__(
            f"Invalid status transition: {current_status.value} -> {new_status.value}. "
            f"Valid transitions: {valid_transitions}"
        )


async def update_status(
    db: AsyncSession,
    application: Application,
    status: ApplicationStatus,
    notes: str | None = None,
) -> Application:
    """
    Move an application to ``status`` and replace its review notes.

    Raises:
        InvalidStatusTransitionError: If the transition is not allowed
    """
    current_status = application.status
    if status != current_status and status not in VALID_STATUS_TRANSITIONS[current_status]:
        raise InvalidStatusTransitionError(current_status, status)

    application.status = status
    application.notes = (notes or "").strip() or None

    await db.commit()
    await db.refresh(application)

    return application


async def list_applications(
    db: AsyncSession,
    *,
    status: ApplicationStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Application], int]:
    """
    Newest applications first, with optional status and name filters.

    Returns:
        Tuple of (page of applications, total count matching filters)
    """
    query = select(Application)

    if status:
        query = query.where(Application.status == status)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Application.surname.ilike(pattern),
                Application.learner_name.ilike(pattern),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    query = (
        query.order_by(desc(Application.submitted_at), desc(Application.id))
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(query)

    return list(result.scalars().all()), total


async def get_statistics(db: AsyncSession) -> dict[str, Any]:
    """
    Aggregate counts for the admissions office.

    Returns:
        Dict with:
        - total: int
        - by_status: dict of status value -> count (every status present)
        - grade_distribution: list of {grade, count}, most requested first
        - monthly: list of {month, count} for the last 12 months, newest first
    """
    status_rows = await db.execute(
        select(Application.status, func.count()).group_by(Application.status)
    )
    by_status = {status.value: 0 for status in ApplicationStatus}
    for status, count in status_rows.all():
        by_status[ApplicationStatus(status).value] = count

    grade_rows = await db.execute(
        select(Application.grade_applying, func.count())
        .group_by(Application.grade_applying)
        .order_by(desc(func.count()), Application.grade_applying)
    )
    grade_distribution = [{"grade": grade, "count": count} for grade, count in grade_rows.all()]

    month = func.date_trunc("month", Application.submitted_at)
    since = datetime.now(UTC) - timedelta(days=365)
    monthly_rows = await db.execute(
        select(month.label("month"), func.count())
        .where(Application.submitted_at >= since)
        .group_by(month)
        .order_by(desc(month))
    )
    monthly = [{"month": row_month, "count": count} for row_month, count in monthly_rows.all()]

    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "grade_distribution": grade_distribution,
        "monthly": monthly,
    }
