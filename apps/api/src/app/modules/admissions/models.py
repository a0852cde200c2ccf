"""
Admissions Models

Database model for learner admission applications. One row per submitted
form; supporting documents live in ``application_documents``.
"""

import enum
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared.models import BaseModel


class ApplicationStatus(str, enum.Enum):
    """Status of an admission application."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    ENROLLED = "enrolled"


class Application(BaseModel):
    """
    Learner admission application.

    Optional text fields are stored as NULL when the applicant left them blank.
    """

    __tablename__ = "applications"

    # Learner
    surname: Mapped[str] = mapped_column(String(100), nullable=False)
    learner_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    place_of_birth: Mapped[str] = mapped_column(String(100), nullable=False)
    grade_applying: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[str] = mapped_column(String(10), nullable=False)
    last_grade_passed: Mapped[str | None] = mapped_column(String(20), nullable=True)
    has_repeated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    repeated_grade: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Mother
    mother_full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    mother_home_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mother_work_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mother_cell_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Father
    father_full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    father_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    father_home_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    father_work_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    father_cell_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Responsible party
    responsible_party_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    responsible_party_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    responsible_party_relationship: Mapped[str | None] = mapped_column(String(100), nullable=True)
    responsible_party_home_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    responsible_party_work_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    responsible_party_cell_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    learner_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Religious
    religious_denomination: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_baptised: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parish_church: Mapped[str | None] = mapped_column(String(200), nullable=True)
    refugee_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    home_language: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Family
    number_of_children: Mapped[str | None] = mapped_column(String(10), nullable=True)
    children_ages: Mapped[str | None] = mapped_column(String(100), nullable=True)
    siblings_at_school: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sibling_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sibling_grade: Mapped[str | None] = mapped_column(String(20), nullable=True)

    # Employment
    mother_occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    mother_place_of_employment: Mapped[str | None] = mapped_column(String(200), nullable=True)
    mother_work_tel: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mother_work_cell: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mother_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    father_occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    father_place_of_employment: Mapped[str | None] = mapped_column(String(200), nullable=True)
    father_work_tel: Mapped[str | None] = mapped_column(String(30), nullable=True)
    father_work_cell: Mapped[str | None] = mapped_column(String(30), nullable=True)
    father_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    responsible_party_occupation: Mapped[str | None] = mapped_column(String(100), nullable=True)
    responsible_party_place_of_employment: Mapped[str | None] = mapped_column(
        String(200), nullable=True
    )
    responsible_party_work_tel: Mapped[str | None] = mapped_column(String(30), nullable=True)
    responsible_party_work_cell: Mapped[str | None] = mapped_column(String(30), nullable=True)
    responsible_party_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    self_employed_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    marital_status: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Current school / creche
    current_school: Mapped[str | None] = mapped_column(String(200), nullable=True)
    current_school_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_school_tel: Mapped[str] = mapped_column(String(30), nullable=False)
    current_school_contact: Mapped[str] = mapped_column(String(200), nullable=False)

    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    agree_to_terms: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    agree_to_privacy: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Status tracking
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(
            ApplicationStatus,
            name="admission_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_applications_status", "status"),
        Index("ix_applications_submitted_at", "submitted_at"),
        Index("ix_applications_surname_learner_name", "surname", "learner_name"),
    )
