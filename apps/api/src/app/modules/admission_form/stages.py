"""
Form Stages

Ordered screens of the admission form. Stages up to and including
PAYMENT_CONSENT collect data; advancing past it submits the application.
"""

import enum


class FormStage(enum.IntEnum):
    """Stages of the admission form, in order."""

    LEARNER = 0
    GUARDIANS = 1
    RELIGIOUS_FAMILY = 2
    EMPLOYMENT = 3
    CURRENT_SCHOOL = 4
    PAYMENT_CONSENT = 5
    DOCUMENTS = 6
    REVIEW = 7


FIRST_STAGE = FormStage.LEARNER
LAST_DATA_STAGE = FormStage.PAYMENT_CONSENT

DATA_STAGES: tuple[FormStage, ...] = tuple(
    stage for stage in FormStage if stage <= LAST_DATA_STAGE
)

STAGE_LABELS: dict[FormStage, str] = {
    FormStage.LEARNER: "Learner Information",
    FormStage.GUARDIANS: "Parents & Guardians",
    FormStage.RELIGIOUS_FAMILY: "Religious & Family",
    FormStage.EMPLOYMENT: "Employment Details",
    FormStage.CURRENT_SCHOOL: "Current School",
    FormStage.PAYMENT_CONSENT: "Payment & Documents",
    FormStage.DOCUMENTS: "Supporting Documents",
    FormStage.REVIEW: "Review & Complete",
}
