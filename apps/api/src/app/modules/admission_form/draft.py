"""
Application Draft

The mutable form snapshot owned by the workflow controller. Every field is a
flat string or boolean; the wire format uses camelCase aliases.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.modules.admission_form.stages import FormStage


class ApplicationDraft(BaseModel):
    """All fields captured by the admission form."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )

    # Learner
    surname: str = ""
    learner_name: str = ""
    date_of_birth: str = ""
    place_of_birth: str = ""
    grade_applying: str = ""
    year: str = ""
    last_grade_passed: str = ""
    has_repeated: bool = False
    repeated_grade: str = ""

    # Mother
    mother_full_name: str = ""
    mother_address: str = ""
    mother_home_phone: str = ""
    mother_work_phone: str = ""
    mother_cell_phone: str = ""

    # Father
    father_full_name: str = ""
    father_address: str = ""
    father_home_phone: str = ""
    father_work_phone: str = ""
    father_cell_phone: str = ""

    # Responsible party (if not the parents)
    responsible_party_name: str = ""
    responsible_party_address: str = ""
    responsible_party_relationship: str = ""
    responsible_party_home_phone: str = ""
    responsible_party_work_phone: str = ""
    responsible_party_cell_phone: str = ""

    # Learner address (if different from the parents)
    learner_address: str = ""

    # Religious
    religious_denomination: str = ""
    is_baptised: bool = False
    parish_church: str = ""
    refugee_status: bool = False
    home_language: str = ""

    # Family
    number_of_children: str = ""
    children_ages: str = ""
    siblings_at_school: bool = False
    sibling_name: str = ""
    sibling_grade: str = ""

    # Employment
    mother_occupation: str = ""
    mother_place_of_employment: str = ""
    mother_work_tel: str = ""
    mother_work_cell: str = ""
    mother_email: str = ""

    father_occupation: str = ""
    father_place_of_employment: str = ""
    father_work_tel: str = ""
    father_work_cell: str = ""
    father_email: str = ""

    responsible_party_occupation: str = ""
    responsible_party_place_of_employment: str = ""
    responsible_party_work_tel: str = ""
    responsible_party_work_cell: str = ""
    responsible_party_email: str = ""

    self_employed_details: str = ""
    marital_status: str = ""

    # Current school / creche
    current_school: str = ""
    current_school_address: str = ""
    current_school_tel: str = ""
    current_school_contact: str = ""

    # Payment
    payment_method: str = ""

    # Consent
    agree_to_terms: bool = False
    agree_to_privacy: bool = False

    def to_payload(self) -> dict:
        """Serialize to the camelCase request body expected by the API."""
        return self.model_dump(by_alias=True)


GUARDIAN_EMAIL_FIELDS: tuple[str, ...] = (
    "mother_email",
    "father_email",
    "responsible_party_email",
)


def has_field(name: str) -> bool:
    """Check whether ``name`` is a draft field (snake_case)."""
    return name in ApplicationDraft.model_fields


# Which form stage collects each field
STAGE_FIELDS: dict[FormStage, tuple[str, ...]] = {
    FormStage.LEARNER: (
        "surname",
        "learner_name",
        "date_of_birth",
        "place_of_birth",
        "grade_applying",
        "year",
        "last_grade_passed",
        "has_repeated",
        "repeated_grade",
    ),
    FormStage.GUARDIANS: (
        "mother_full_name",
        "mother_address",
        "mother_home_phone",
        "mother_work_phone",
        "mother_cell_phone",
        "father_full_name",
        "father_address",
        "father_home_phone",
        "father_work_phone",
        "father_cell_phone",
        "responsible_party_name",
        "responsible_party_address",
        "responsible_party_relationship",
        "responsible_party_home_phone",
        "responsible_party_work_phone",
        "responsible_party_cell_phone",
        "learner_address",
    ),
    FormStage.RELIGIOUS_FAMILY: (
        "religious_denomination",
        "is_baptised",
        "parish_church",
        "refugee_status",
        "home_language",
        "number_of_children",
        "children_ages",
        "siblings_at_school",
        "sibling_name",
        "sibling_grade",
    ),
    FormStage.EMPLOYMENT: (
        "mother_occupation",
        "mother_place_of_employment",
        "mother_work_tel",
        "mother_work_cell",
        "mother_email",
        "father_occupation",
        "father_place_of_employment",
        "father_work_tel",
        "father_work_cell",
        "father_email",
        "responsible_party_occupation",
        "responsible_party_place_of_employment",
        "responsible_party_work_tel",
        "responsible_party_work_cell",
        "responsible_party_email",
        "self_employed_details",
        "marital_status",
    ),
    FormStage.CURRENT_SCHOOL: (
        "current_school",
        "current_school_address",
        "current_school_tel",
        "current_school_contact",
    ),
    FormStage.PAYMENT_CONSENT: (
        "payment_method",
        "agree_to_terms",
        "agree_to_privacy",
    ),
}

FIELD_STAGES: dict[str, FormStage] = {
    field: stage for stage, fields in STAGE_FIELDS.items() for field in fields
}
