"""
Admissions Schemas

Pydantic schemas for the submit request and the admissions responses.
The request body is the camelCase form payload produced by
``ApplicationDraft.to_payload()``.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from app.modules.admission_form.draft import GUARDIAN_EMAIL_FIELDS, ApplicationDraft
from app.modules.admissions.models import ApplicationStatus

_email_adapter = TypeAdapter(EmailStr)


class ApplicationSubmission(ApplicationDraft):
    """
    Submitted application form.

    Same fields as the client draft; unknown keys are ignored and the free-text
    formats the form can't enforce (emails, date of birth) are checked here.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator(*GUARDIAN_EMAIL_FIELDS)
    @classmethod
    def validate_optional_email(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                _email_adapter.validate_python(value)
            except ValueError as e:
                raise ValueError("Please enter a valid email address") from e
        return value

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, value: str) -> str:
        value = value.strip()
        if value:
            try:
                parsed = date.fromisoformat(value[:10])
            except ValueError as e:
                raise ValueError("Date of birth must be a valid date (YYYY-MM-DD)") from e
            if parsed > date.today():
                raise ValueError("Date of birth cannot be in the future")
        return value


class FieldError(BaseModel):
    field: str
    message: str


class SubmitApplicationResponse(BaseModel):
    """Response after creating an application."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Application submitted successfully"
    application_id: int = Field(..., alias="applicationId")


class ValidationErrorResponse(BaseModel):
    success: bool = False
    message: str = "Validation error"
    errors: list[FieldError]


class ApplicationSummary(BaseModel):
    """Non-sensitive view of an application, used to confirm it was received."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    surname: str
    learner_name: str
    grade_applying: str
    year: str
    status: ApplicationStatus
    submitted_at: datetime


class ApplicationSummaryResponse(BaseModel):
    success: bool = True
    application: ApplicationSummary


# ============================================
# Review (admissions office) schemas
# ============================================


class ApplicationDetail(ApplicationDraft):
    """Every captured field plus review state; blank optional columns read as ''."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )

    id: int
    date_of_birth: date
    status: ApplicationStatus
    notes: str | None = None
    submitted_at: datetime
    updated_at: datetime

    @field_validator(
        *(name for name in ApplicationDraft.model_fields if name != "date_of_birth"),
        mode="before",
    )
    @classmethod
    def null_as_blank(cls, value):
        return "" if value is None else value


class ApplicationDetailResponse(BaseModel):
    success: bool = True
    application: ApplicationDetail


class ApplicationListResponse(BaseModel):
    """One page of applications, newest first."""

    success: bool = True
    applications: list[ApplicationSummary]
    total: int = Field(..., ge=0)
    skip: int = Field(..., ge=0)
    limit: int = Field(..., ge=1, le=100)


class StatusUpdateRequest(BaseModel):
    status: ApplicationStatus
    notes: str | None = Field(None, max_length=2000)


class GradeCount(BaseModel):
    grade: str
    count: int


class MonthlyCount(BaseModel):
    month: datetime
    count: int


class ApplicationStatistics(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    by_status: dict[str, int]
    grade_distribution: list[GradeCount]
    monthly: list[MonthlyCount]


class ApplicationStatisticsResponse(BaseModel):
    success: bool = True
    statistics: ApplicationStatistics
