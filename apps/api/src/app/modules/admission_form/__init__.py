"""
Admission Form Module

Client-side intake workflow for learner admissions:
1. Multi-stage form with per-stage validation (conditional and or-group rules)
2. Phase 1: create the application record (POST /admissions/submit)
3. Phase 2: attach typed supporting documents to the new application
4. Review, then finalize and start over with an empty draft

Network calls go through httpx with bounded timeouts and return
``Success``/``Failure`` results instead of raising.
"""

from app.modules.admission_form.catalog import DocumentTypeCatalog
from app.modules.admission_form.documents_client import DocumentAttachmentClient
from app.modules.admission_form.draft import ApplicationDraft
from app.modules.admission_form.results import Failure, FailureReason, Result, Success
from app.modules.admission_form.stages import FormStage
from app.modules.admission_form.transport import SubmissionTransport
from app.modules.admission_form.validator import validate, validate_all
from app.modules.admission_form.workflow import (
    ApplicationWorkflow,
    AttachingDocuments,
    Completed,
    Editing,
    Reviewing,
    Submitting,
    WorkflowActionError,
)

__all__ = [
    "ApplicationDraft",
    "ApplicationWorkflow",
    "AttachingDocuments",
    "Completed",
    "DocumentAttachmentClient",
    "DocumentTypeCatalog",
    "Editing",
    "Failure",
    "FailureReason",
    "FormStage",
    "Result",
    "Reviewing",
    "SubmissionTransport",
    "Submitting",
    "Success",
    "WorkflowActionError",
    "validate",
    "validate_all",
]
