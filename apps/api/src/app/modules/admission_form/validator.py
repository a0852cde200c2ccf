"""
Stage Validator

Pure validation of a draft for one form stage. Returns a StageErrorSet
(field name -> message); an empty mapping means the stage may be left.

Rules:
- Learner: identity fields are required; repeated_grade only when
  has_repeated is set.
- Guardians: at least one of mother / father / responsible party must have
  both a full name and a cell phone, and at least one must have an address.
  When a group fails, every field of that group is flagged so the applicant
  sees all the ways to complete it.
- Current school: telephone and contact person are required for background
  verification.
- Payment & consent: payment method and both consents are required.

Errors are collected exhaustively for the stage, never short-circuited.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from app.modules.admission_form.draft import ApplicationDraft
from app.modules.admission_form.stages import DATA_STAGES, FormStage

StageErrorSet = dict[str, str]

T = TypeVar("T")


@dataclass(frozen=True)
class GuardianParty:
    """Field names describing one contactable party on the guardians stage."""

    label: str
    name_field: str
    phone_field: str
    address_field: str


GUARDIAN_PARTIES: tuple[GuardianParty, ...] = (
    GuardianParty("Mother", "mother_full_name", "mother_cell_phone", "mother_address"),
    GuardianParty("Father", "father_full_name", "father_cell_phone", "father_address"),
    GuardianParty(
        "Responsible party",
        "responsible_party_name",
        "responsible_party_cell_phone",
        "responsible_party_address",
    ),
)

REQUIRED_FIELDS: dict[FormStage, dict[str, str]] = {
    FormStage.LEARNER: {
        "surname": "Surname is required",
        "learner_name": "Learner name is required",
        "date_of_birth": "Date of birth is required",
        "place_of_birth": "Place of birth is required",
        "grade_applying": "Grade applying for is required",
        "year": "Year is required",
    },
    FormStage.CURRENT_SCHOOL: {
        "current_school_tel": "Current school telephone is required for background verification",
        "current_school_contact": "Current school contact person is required for background verification",
    },
    FormStage.PAYMENT_CONSENT: {
        "payment_method": "Please select a payment method",
    },
}

REQUIRED_CONSENTS: dict[str, str] = {
    "agree_to_terms": "You must agree to the terms and conditions",
    "agree_to_privacy": "You must agree to the privacy policy",
}

CONTACT_GROUP_MESSAGE = (
    "Provide a full name and cell phone for at least one parent or responsible party"
)
ADDRESS_GROUP_MESSAGE = "Provide an address for at least one parent or responsible party"


def is_blank(value: object) -> bool:
    """True for None, empty strings and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def at_least_one(
    records: Iterable[T],
    predicate: Callable[[T], bool],
    flagged_fields: Iterable[str],
    message: str,
) -> StageErrorSet:
    """
    Or-group rule: satisfied when any record meets ``predicate``.

    When no record qualifies, every field in ``flagged_fields`` is reported
    with the same message.
    """
    if any(predicate(record) for record in records):
        return {}
    return {field: message for field in flagged_fields}


def _required(draft: ApplicationDraft, fields: dict[str, str]) -> StageErrorSet:
    return {
        field: message for field, message in fields.items() if is_blank(getattr(draft, field))
    }


def _validate_learner(draft: ApplicationDraft) -> StageErrorSet:
    errors = _required(draft, REQUIRED_FIELDS[FormStage.LEARNER])
    if draft.has_repeated and is_blank(draft.repeated_grade):
        errors["repeated_grade"] = "Please specify which grade was repeated"
    return errors


def _validate_guardians(draft: ApplicationDraft) -> StageErrorSet:
    def has_contact(party: GuardianParty) -> bool:
        return not is_blank(getattr(draft, party.name_field)) and not is_blank(
            getattr(draft, party.phone_field)
        )

    def has_address(party: GuardianParty) -> bool:
        return not is_blank(getattr(draft, party.address_field))

    errors = at_least_one(
        GUARDIAN_PARTIES,
        has_contact,
        [field for party in GUARDIAN_PARTIES for field in (party.name_field, party.phone_field)],
        CONTACT_GROUP_MESSAGE,
    )
    errors.update(
        at_least_one(
            GUARDIAN_PARTIES,
            has_address,
            [party.address_field for party in GUARDIAN_PARTIES],
            ADDRESS_GROUP_MESSAGE,
        )
    )
    return errors


def _validate_current_school(draft: ApplicationDraft) -> StageErrorSet:
    return _required(draft, REQUIRED_FIELDS[FormStage.CURRENT_SCHOOL])


def _validate_payment_consent(draft: ApplicationDraft) -> StageErrorSet:
    errors = _required(draft, REQUIRED_FIELDS[FormStage.PAYMENT_CONSENT])
    for field, message in REQUIRED_CONSENTS.items():
        if getattr(draft, field) is not True:
            errors[field] = message
    return errors


_STAGE_RULES: dict[FormStage, Callable[[ApplicationDraft], StageErrorSet]] = {
    FormStage.LEARNER: _validate_learner,
    FormStage.GUARDIANS: _validate_guardians,
    FormStage.CURRENT_SCHOOL: _validate_current_school,
    FormStage.PAYMENT_CONSENT: _validate_payment_consent,
}


def validate(stage: FormStage | int, draft: ApplicationDraft) -> StageErrorSet:
    """
    Validate ``draft`` for a single stage.

    Stages without blocking rules (religious/family, employment, documents,
    review) always return an empty mapping.

    Raises:
        ValueError: If ``stage`` is not a known stage index
    """
    rule = _STAGE_RULES.get(FormStage(stage))
    if rule is None:
        return {}
    return rule(draft)


def validate_all(draft: ApplicationDraft) -> tuple[FormStage | None, StageErrorSet]:
    """
    Validate every data-entry stage in order.

    Returns:
        (first failing stage, its errors), or (None, {}) when the draft is
        complete
    """
    for stage in DATA_STAGES:
        errors = validate(stage, draft)
        if errors:
            return stage, errors
    return None, {}
