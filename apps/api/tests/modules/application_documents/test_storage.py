"""
Tests for local document storage.
"""

import re
from unittest.mock import patch

import pytest

from app.modules.application_documents import storage

STORED_NAME = re.compile(r"^(?P<stem>[A-Za-z0-9_]+)-\d{13}-\d{1,9}(?P<ext>\.[A-Za-z0-9]+)?$")


class TestIsAllowedMimeType:
    @pytest.mark.parametrize(
        "content_type",
        [
            "application/pdf",
            "IMAGE/JPEG",
            "image/png",
            "text/csv; charset=utf-8",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
    )
    def test_allowed(self, content_type):
        assert storage.is_allowed_mime_type(content_type)

    @pytest.mark.parametrize("content_type", [None, "", "image/gif", "application/zip"])
    def test_rejected(self, content_type):
        assert not storage.is_allowed_mime_type(content_type)


class TestBuildStoredName:
    def test_sanitizes_stem_and_keeps_extension(self):
        match = STORED_NAME.match(storage.build_stored_name("Birth Cert (1).pdf"))
        assert match
        assert match.group("stem") == "Birth_Cert__1_"
        assert match.group("ext") == ".pdf"

    def test_directory_components_dropped(self):
        for original in ("../../etc/passwd", "C:\\Users\\me\\report.PDF"):
            name = storage.build_stored_name(original)
            assert "/" not in name
            assert "\\" not in name
            assert ".." not in name

    def test_windows_path_keeps_file_name(self):
        match = STORED_NAME.match(storage.build_stored_name("C:\\Users\\me\\report.PDF"))
        assert match.group("stem") == "report"
        assert match.group("ext") == ".PDF"

    def test_names_are_unique(self):
        names = {storage.build_stored_name("scan.png") for _ in range(50)}
        assert len(names) == 50


class TestFileOperations:
    @pytest.mark.asyncio
    async def test_save_exists_delete(self, tmp_path):
        with patch.object(storage, "_upload_root", return_value=tmp_path / "applications"):
            stored_name, file_path = await storage.save_file("report.pdf", b"%PDF-1.4")

            assert (tmp_path / "applications" / stored_name).read_bytes() == b"%PDF-1.4"
            assert await storage.file_exists(file_path)

            assert await storage.delete_file(file_path) is True
            assert not await storage.file_exists(file_path)

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, tmp_path):
        assert await storage.delete_file(str(tmp_path / "gone.pdf")) is False
