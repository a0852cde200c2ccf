"""
Tests for the document type catalog and its fallback.
"""

import httpx
import pytest

from app.modules.admission_form.results import FailureReason, Success
from app.modules.shared.document_types import (
    DOCUMENT_TYPE_CODES,
    FALLBACK_DOCUMENT_TYPES,
    label_for,
)

TYPES = "/application-documents/types"


class TestFetchTypes:
    @pytest.mark.asyncio
    async def test_returns_remote_catalog(self, catalog):
        result = await catalog.fetch_types()

        assert isinstance(result, Success)
        assert [t.code for t in result.value] == ["BIRTH_CERTIFICATE", "SCHOOL_REPORT"]
        assert result.value[0].label == "Birth Certificate"

    @pytest.mark.asyncio
    async def test_unavailable_catalog_is_failure(self, server, catalog):
        server.types_available = False

        result = await catalog.fetch_types()

        assert result.reason is FailureReason.TRANSPORT

    @pytest.mark.asyncio
    async def test_empty_catalog_is_failure(self, server, catalog):
        server.fail_next("GET", TYPES, httpx.Response(200, json={"success": True, "data": []}))

        result = await catalog.fetch_types()

        assert result.reason is FailureReason.UNKNOWN


class TestLoadTypes:
    @pytest.mark.asyncio
    async def test_uses_remote_when_available(self, catalog):
        types = await catalog.load_types()
        assert len(types) == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_fixed_list(self, server, catalog):
        server.fail_next("GET", TYPES, httpx.ConnectError("offline"))

        types = await catalog.load_types()

        assert len(types) == 13
        assert [t.code for t in types] == list(DOCUMENT_TYPE_CODES)
        assert types == list(FALLBACK_DOCUMENT_TYPES)


class TestLabels:
    @pytest.mark.parametrize(
        ("code", "label"),
        [
            ("BIRTH_CERTIFICATE", "Birth Certificate"),
            ("ID_COPY_MOTHER", "Id Copy Mother"),
            ("OTHER", "Other"),
        ],
    )
    def test_label_for(self, code, label):
        assert label_for(code) == label

    def test_fallback_descriptors_serialize_with_value_key(self):
        dumped = FALLBACK_DOCUMENT_TYPES[0].model_dump(by_alias=True)
        assert dumped == {"value": "BIRTH_CERTIFICATE", "label": "Birth Certificate"}
