"""
Tests for the submission transport and HTTP failure mapping.
"""

import json

import httpx
import pytest

from app.modules.admission_form.api_client import failure_from_exception, failure_from_response
from app.modules.admission_form.results import (
    TRANSPORT_MESSAGE,
    UNKNOWN_MESSAGE,
    Failure,
    FailureReason,
    Success,
)

SUBMIT = "/admissions/submit"


class TestCreateApplication:
    @pytest.mark.asyncio
    async def test_returns_application_id(self, server, submission_transport, complete_draft):
        result = await submission_transport.create_application(complete_draft)

        assert isinstance(result, Success)
        assert result.ok
        assert result.value == 101
        assert server.submit_calls == 1

    @pytest.mark.asyncio
    async def test_posts_camel_case_payload(self, server, submission_transport, complete_draft):
        await submission_transport.create_application(complete_draft)

        body = json.loads(server.requests[-1].content)
        assert body["learnerName"] == "Jane"
        assert body["motherCellPhone"] == "082 555 0101"
        assert body["agreeToTerms"] is True
        assert "learner_name" not in body

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_failure(
        self, server, submission_transport, complete_draft
    ):
        server.fail_next("POST", SUBMIT, httpx.ConnectError("connection refused"))

        result = await submission_transport.create_application(complete_draft)

        assert isinstance(result, Failure)
        assert result.reason is FailureReason.TRANSPORT
        assert result.retry_safe
        assert result.message == TRANSPORT_MESSAGE

    @pytest.mark.asyncio
    async def test_timeout_is_transport_failure(self, server, submission_transport, complete_draft):
        server.fail_next("POST", SUBMIT, httpx.ReadTimeout("timed out"))

        result = await submission_transport.create_application(complete_draft)

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_validation_rejection_keeps_server_message(
        self, server, submission_transport, complete_draft
    ):
        server.fail_next(
            "POST",
            SUBMIT,
            httpx.Response(
                400,
                json={
                    "success": False,
                    "message": "Validation error",
                    "errors": [{"field": "payment_method", "message": "Please select a payment method"}],
                },
            ),
        )

        result = await submission_transport.create_application(complete_draft)

        assert result.reason is FailureReason.SERVER_REJECTION
        assert not result.retry_safe
        assert result.message == "Validation error"
        assert result.status_code == 400
        assert result.details == [
            {"field": "payment_method", "message": "Please select a payment method"}
        ]

    @pytest.mark.asyncio
    async def test_server_error_is_transport_failure(
        self, server, submission_transport, complete_draft
    ):
        server.fail_next(
            "POST", SUBMIT, httpx.Response(500, json={"success": False, "message": "boom"})
        )

        result = await submission_transport.create_application(complete_draft)

        assert result.reason is FailureReason.TRANSPORT
        assert result.status_code == 500

    @pytest.mark.asyncio
    async def test_success_without_id_is_unknown(
        self, server, submission_transport, complete_draft
    ):
        server.fail_next("POST", SUBMIT, httpx.Response(201, json={"success": True}))

        result = await submission_transport.create_application(complete_draft)

        assert result.reason is FailureReason.UNKNOWN
        assert result.message == UNKNOWN_MESSAGE

    @pytest.mark.asyncio
    async def test_non_json_body_is_unknown(self, server, submission_transport, complete_draft):
        server.fail_next("POST", SUBMIT, httpx.Response(200, text="<html>proxy page</html>"))

        result = await submission_transport.create_application(complete_draft)

        assert result.reason is FailureReason.UNKNOWN


class TestFailureMapping:
    def _response(self, status_code, **kwargs):
        request = httpx.Request("GET", "http://admissions.test/api/x")
        return httpx.Response(status_code, request=request, **kwargs)

    @pytest.mark.parametrize("status_code", [408, 429, 502, 503])
    def test_retry_safe_statuses(self, status_code):
        failure = failure_from_response(self._response(status_code, json={}), "Test")
        assert failure.reason is FailureReason.TRANSPORT

    def test_error_field_used_as_message(self):
        response = self._response(404, json={"success": False, "error": "Application not found"})
        failure = failure_from_response(response, "Test")
        assert failure.reason is FailureReason.SERVER_REJECTION
        assert failure.message == "Application not found"

    def test_nested_detail_message(self):
        response = self._response(
            409, json={"detail": {"error": "CONFLICT", "message": "Already exists"}}
        )
        failure = failure_from_response(response, "Test")
        assert failure.message == "Already exists"

    def test_4xx_without_message_is_unknown(self):
        failure = failure_from_response(self._response(400, json={"success": False}), "Test")
        assert failure.reason is FailureReason.UNKNOWN
        assert failure.message

    def test_unexpected_exception_is_unknown(self):
        failure = failure_from_exception(RuntimeError("bug"), "Test")
        assert failure.reason is FailureReason.UNKNOWN
        assert failure.message == UNKNOWN_MESSAGE
