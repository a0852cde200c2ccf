"""
Application Workflow Controller

Drives the admission form as an explicit state machine:

    Editing(stage) --advance, stage valid--> Editing(stage + 1)
    Editing(PAYMENT_CONSENT) --advance--> Submitting --ok--> AttachingDocuments(id)
                                                     --failed--> Editing(PAYMENT_CONSENT)
                                                     --rejected field--> Editing(its stage)
    AttachingDocuments(id) --advance--> Reviewing(id)
    Reviewing(id) --retreat--> AttachingDocuments(id)
    Reviewing(id) --finalize--> Completed(id) --> Editing(LEARNER) with a fresh draft
    Editing(stage) --retreat--> Editing(stage - 1)

The application id only exists on the states that may use it, so document
operations can't run against a missing id, and once assigned it never
changes for the rest of the session.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Union

from app.modules.admission_form.catalog import DocumentTypeCatalog
from app.modules.admission_form.documents_client import DocumentAttachmentClient, ProgressCallback
from app.modules.admission_form.draft import FIELD_STAGES, ApplicationDraft, has_field
from app.modules.admission_form.results import (
    UNKNOWN_MESSAGE,
    Failure,
    FailureReason,
    Result,
    Success,
)
from app.modules.admission_form.schemas import DocumentFile, SupportingDocument, format_file_size
from app.modules.admission_form.stages import (
    FIRST_STAGE,
    LAST_DATA_STAGE,
    STAGE_LABELS,
    FormStage,
)
from app.modules.admission_form.transport import SubmissionTransport
from app.modules.admission_form.validator import StageErrorSet, validate, validate_all
from app.modules.shared.document_types import DocumentTypeDescriptor

logger = logging.getLogger(__name__)

STAGE_INCOMPLETE_MESSAGE = "Please complete the highlighted fields before continuing."
COMPLETION_MESSAGE = (
    "Thank you! Application {application_id} and its supporting documents have been "
    "received. The admissions office will be in touch."
)


@dataclass(frozen=True)
class Editing:
    stage: FormStage


@dataclass(frozen=True)
class Submitting:
    pass


@dataclass(frozen=True)
class AttachingDocuments:
    application_id: int


@dataclass(frozen=True)
class Reviewing:
    application_id: int


@dataclass(frozen=True)
class Completed:
    application_id: int


WorkflowState = Union[Editing, Submitting, AttachingDocuments, Reviewing, Completed]

ConfirmCallback = Callable[[SupportingDocument], Union[bool, Awaitable[bool]]]
StateListener = Callable[[WorkflowState], None]


class WorkflowActionError(Exception):
    """Raised when the caller asks for an action the workflow can't perform."""


class ApplicationWorkflow:
    """
    Owns the draft, the workflow state and the per-stage errors.

    Attributes:
        draft: The form snapshot. Replaced with a fresh one only on finalize.
        state: Current WorkflowState.
        errors: StageErrorSet for the current stage.
        banner: Stage-level message (transport errors, completion notices).
        documents: Documents attached to the application, as last listed by the server.
        document_types: Options for the upload stage.
    """

    def __init__(
        self,
        transport: SubmissionTransport | None = None,
        documents_client: DocumentAttachmentClient | None = None,
        catalog: DocumentTypeCatalog | None = None,
        on_state_change: StateListener | None = None,
    ):
        self.transport = transport or SubmissionTransport()
        self.documents_client = documents_client or DocumentAttachmentClient()
        self.catalog = catalog or DocumentTypeCatalog()
        self._on_state_change = on_state_change

        self.draft = ApplicationDraft()
        self.state: WorkflowState = Editing(FIRST_STAGE)
        self.errors: StageErrorSet = {}
        self.banner: str | None = None
        self.documents: list[SupportingDocument] = []
        self.document_types: list[DocumentTypeDescriptor] = []
        self._in_flight = False

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def stage(self) -> FormStage:
        """The form stage the applicant is looking at."""
        state = self.state
        if isinstance(state, Editing):
            return state.stage
        if isinstance(state, Submitting):
            return LAST_DATA_STAGE
        if isinstance(state, AttachingDocuments):
            return FormStage.DOCUMENTS
        return FormStage.REVIEW

    @property
    def application_id(self) -> int | None:
        state = self.state
        if isinstance(state, (AttachingDocuments, Reviewing, Completed)):
            return state.application_id
        return None

    @property
    def can_advance(self) -> bool:
        """False while an advance/submit is in flight; the UI disables its button."""
        return not self._in_flight and not isinstance(self.state, (Submitting, Completed))

    @property
    def can_retreat(self) -> bool:
        state = self.state
        if self._in_flight:
            return False
        if isinstance(state, Editing):
            return state.stage > FIRST_STAGE
        return isinstance(state, Reviewing)

    # ------------------------------------------------------------------
    # Form editing
    # ------------------------------------------------------------------

    def update_field(self, name: str, value: str | bool) -> None:
        """
        Set one draft field and clear that field's error.

        Raises:
            WorkflowActionError: Unknown field, or the application was already submitted
        """
        if not has_field(name):
            raise WorkflowActionError(f"Unknown application field: {name}")
        if not isinstance(self.state, Editing):
            raise WorkflowActionError("The application has already been submitted")

        setattr(self.draft, name, value)
        self.errors.pop(name, None)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def advance(self) -> WorkflowState:
        """
        Move forward one stage.

        Validates the current data stage first; advancing from the last data
        stage submits the application. A call made while another advance is
        in flight is ignored.
        """
        if not self.can_advance:
            return self.state

        state = self.state
        if isinstance(state, AttachingDocuments):
            self._set_state(Reviewing(state.application_id))
            self.banner = None
            return self.state

        if isinstance(state, Reviewing):
            return self.finalize()

        if not isinstance(state, Editing):
            return self.state

        errors = validate(state.stage, self.draft)
        if errors:
            self.errors = errors
            self.banner = STAGE_INCOMPLETE_MESSAGE
            return self.state

        if state.stage < LAST_DATA_STAGE:
            self._move_to_stage(FormStage(state.stage + 1))
            return self.state

        await self._submit()
        return self.state

    def retreat(self) -> WorkflowState:
        """Move back one stage. Never validates and never discards entered data."""
        if not self.can_retreat:
            return self.state

        state = self.state
        if isinstance(state, Editing):
            self._move_to_stage(FormStage(state.stage - 1))
        elif isinstance(state, Reviewing):
            self._set_state(AttachingDocuments(state.application_id))
            self.errors = {}
            self.banner = None
        return self.state

    def finalize(self) -> WorkflowState:
        """
        Complete the application from the review stage.

        Does not contact the server: the record already exists. Acknowledges
        completion, then resets the draft and returns to the first stage.
        """
        state = self.state
        if not isinstance(state, Reviewing):
            return self.state

        logger.info(f"Application {state.application_id} completed by applicant")
        self._set_state(Completed(state.application_id))

        self.draft = ApplicationDraft()
        self.documents = []
        self.errors = {}
        self._set_state(Editing(FIRST_STAGE))
        self.banner = COMPLETION_MESSAGE.format(application_id=state.application_id)
        return self.state

    # ------------------------------------------------------------------
    # Phase 1: create the application
    # ------------------------------------------------------------------

    async def _submit(self) -> None:
        # Earlier stages may have been edited after they were passed
        failing_stage, errors = validate_all(self.draft)
        if failing_stage is not None:
            self._move_to_stage(failing_stage)
            self.errors = errors
            self.banner = (
                f"Please complete the {STAGE_LABELS[failing_stage]} section before submitting."
            )
            return

        self._in_flight = True
        self._set_state(Submitting())
        try:
            result = await self.transport.create_application(self.draft)
        except Exception:
            logger.exception("Application submission raised unexpectedly")
            result = Failure(reason=FailureReason.UNKNOWN, message=UNKNOWN_MESSAGE)
        finally:
            self._in_flight = False

        if isinstance(result, Failure):
            logger.warning(f"Application submission failed ({result.reason.value})")
            self._show_submit_failure(result)
            return

        self._set_state(AttachingDocuments(result.value))
        self.errors = {}
        self.banner = None
        self.document_types = await self.catalog.load_types()
        await self.refresh_documents()

    def _show_submit_failure(self, failure: Failure) -> None:
        """
        Return to the form after a failed create.

        Field errors reported by the server are shown on the earliest stage
        they belong to; anything that can't be placed goes in the banner.
        """
        field_errors: StageErrorSet = {}
        other_messages: list[str] = []
        for detail in failure.details:
            field, message = detail.get("field"), detail.get("message")
            if not isinstance(message, str) or not message:
                continue
            if isinstance(field, str) and has_field(field):
                field_errors.setdefault(field, message)
            else:
                other_messages.append(message)

        if not field_errors:
            self._set_state(Editing(LAST_DATA_STAGE))
            self.banner = failure.message
            if other_messages:
                self.banner = f"{failure.message}: {'; '.join(other_messages)}"
            return

        stage = min(FIELD_STAGES[field] for field in field_errors)
        self._move_to_stage(stage)
        self.errors = {
            field: message
            for field, message in field_errors.items()
            if FIELD_STAGES[field] == stage
        }
        self.banner = " ".join(
            [
                f"{failure.message}. Please correct the highlighted fields in the "
                f"{STAGE_LABELS[stage]} section.",
                *other_messages,
            ]
        )

    # ------------------------------------------------------------------
    # Phase 2: supporting documents
    # ------------------------------------------------------------------

    def _document_stage_id(self) -> int | None:
        state = self.state
        if isinstance(state, (AttachingDocuments, Reviewing)):
            return state.application_id
        return None

    def _not_submitted(self) -> Failure:
        return Failure(
            reason=FailureReason.VALIDATION,
            message="Submit the application before managing documents.",
        )

    async def refresh_documents(self) -> Result[list[SupportingDocument]]:
        """Re-fetch the document list from the server and replace the local cache."""
        application_id = self._document_stage_id()
        if application_id is None:
            return self._not_submitted()

        result = await self.documents_client.list(application_id)
        if self._document_stage_id() != application_id:
            return result

        if isinstance(result, Success):
            self.documents = list(result.value)
        else:
            self.banner = result.message
        return result

    async def upload_document(
        self,
        document_type: str,
        file: DocumentFile | None,
        on_progress: ProgressCallback | None = None,
    ) -> Result[SupportingDocument]:
        """Upload one supporting document, then refresh the document list."""
        application_id = self._document_stage_id()
        if application_id is None:
            return self._not_submitted()

        if file is None or not document_type:
            failure = Failure(
                reason=FailureReason.VALIDATION,
                message="Please select a file and document type",
            )
            self.banner = failure.message
            return failure

        result = await self.documents_client.upload(
            application_id, document_type, file, on_progress=on_progress
        )
        # The applicant may have finished the application while this was uploading
        if self._document_stage_id() != application_id:
            return result

        if isinstance(result, Failure):
            self.banner = result.message
            return result

        self.banner = f"{file.filename} ({format_file_size(file.size)}) uploaded successfully"
        await self.refresh_documents()
        return result

    async def delete_document(
        self,
        document_id: int,
        confirm: ConfirmCallback,
    ) -> Result[int] | None:
        """
        Delete a document after the applicant confirms.

        Returns None when the applicant declines; nothing is sent in that case.
        """
        application_id = self._document_stage_id()
        if application_id is None:
            return self._not_submitted()

        document = next((doc for doc in self.documents if doc.id == document_id), None)
        if document is None:
            failure = Failure(
                reason=FailureReason.VALIDATION,
                message="That document is no longer attached to this application.",
            )
            self.banner = failure.message
            return failure

        confirmed = confirm(document)
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            return None

        result = await self.documents_client.delete(document_id)
        if self._document_stage_id() != application_id:
            return result

        if isinstance(result, Failure):
            self.banner = result.message
            return result

        self.documents = [doc for doc in self.documents if doc.id != result.value]
        self.banner = "Document deleted successfully"
        await self.refresh_documents()
        return result

    def download_reference(self, document_id: int) -> str:
        return self.documents_client.resolve_download_reference(document_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _move_to_stage(self, stage: FormStage) -> None:
        self._set_state(Editing(stage))
        self.errors = {}
        self.banner = None

    def _set_state(self, state: WorkflowState) -> None:
        self.state = state
        if self._on_state_change is not None:
            try:
                self._on_state_change(state)
            except Exception as e:
                logger.warning(f"Workflow state listener failed: {e}")
