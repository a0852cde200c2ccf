"""
Operation Results

Network-facing operations of the form workflow never raise; they return a
tagged ``Success`` or ``Failure``. Callers branch on ``result.ok`` (or
``isinstance``).
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class FailureReason(str, enum.Enum):
    """Why an operation failed."""

    # Local input problem caught before any request was made
    VALIDATION = "validation"
    # Timeout, connection failure, 5xx, throttling: safe to retry as-is
    TRANSPORT = "transport"
    # Server rejected the input (4xx with a structured body): retrying unchanged fails again
    SERVER_REJECTION = "server_rejection"
    UNKNOWN = "unknown"


TRANSPORT_MESSAGE = (
    "We couldn't reach the admissions office. Please check your connection and try again."
)
UNKNOWN_MESSAGE = "Something went wrong. Please try again later."


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str
    status_code: int | None = None
    details: list[dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    @property
    def retry_safe(self) -> bool:
        return self.reason is FailureReason.TRANSPORT


Result = Union[Success[T], Failure]
