"""
Admissions API HTTP Helpers

Shared by the submission transport, the document client and the catalog:
client construction with bounded timeouts, and mapping of HTTP outcomes to
``Failure`` values.

Mapping:
- httpx transport errors (timeouts, connection failures) -> TRANSPORT
- 408, 429 and 5xx responses -> TRANSPORT
- other 4xx responses with a JSON object body -> SERVER_REJECTION, message verbatim
- anything else -> UNKNOWN
"""

import logging
from typing import Any

import httpx

from app.core.config import settings
from app.modules.admission_form.results import (
    TRANSPORT_MESSAGE,
    UNKNOWN_MESSAGE,
    Failure,
    FailureReason,
)

logger = logging.getLogger(__name__)

RETRY_SAFE_STATUS_CODES = {408, 429}


class AdmissionsApiBase:
    """
    Common configuration for clients of the admissions API.

    Attributes:
        base_url: API root including the prefix, e.g. "http://host/api".
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout if timeout is not None else self.timeout),
            transport=self._transport,
            headers={"Accept": "application/json"},
        )


def parse_json(response: httpx.Response) -> Any:
    """Decode a JSON body, returning None when it isn't JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def _extract_message(body: dict[str, Any]) -> str | None:
    for key in ("error", "message"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, dict):
        value = detail.get("message")
        if isinstance(value, str) and value:
            return value
    return None


def _extract_details(body: dict[str, Any]) -> list[dict[str, Any]]:
    errors = body.get("errors")
    if isinstance(errors, list):
        return [item for item in errors if isinstance(item, dict)]
    return []


def failure_from_exception(exc: Exception, operation: str) -> Failure:
    """Map an exception raised while performing ``operation`` to a Failure."""
    if isinstance(exc, httpx.TransportError):
        logger.warning(f"{operation} failed with transport error: {exc!r}")
        return Failure(reason=FailureReason.TRANSPORT, message=TRANSPORT_MESSAGE)

    logger.exception(f"{operation} failed unexpectedly")
    return Failure(reason=FailureReason.UNKNOWN, message=UNKNOWN_MESSAGE)


def failure_from_response(
    response: httpx.Response,
    operation: str,
    body: Any = None,
) -> Failure:
    """Map an unsuccessful HTTP response to a Failure."""
    status_code = response.status_code
    if body is None:
        body = parse_json(response)

    if status_code in RETRY_SAFE_STATUS_CODES or status_code >= 500:
        logger.warning(f"{operation} failed with retry-safe status {status_code}")
        return Failure(
            reason=FailureReason.TRANSPORT,
            message=TRANSPORT_MESSAGE,
            status_code=status_code,
        )

    if isinstance(body, dict):
        message = _extract_message(body)
        if message and (400 <= status_code < 500 or body.get("success") is False):
            logger.info(f"{operation} rejected by server ({status_code}): {message}")
            return Failure(
                reason=FailureReason.SERVER_REJECTION,
                message=message,
                status_code=status_code,
                details=_extract_details(body),
            )

    logger.error(f"{operation} returned an unexpected response ({status_code})")
    return Failure(reason=FailureReason.UNKNOWN, message=UNKNOWN_MESSAGE, status_code=status_code)
