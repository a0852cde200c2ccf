"""
Tests for the application documents HTTP endpoints.
"""

from unittest.mock import AsyncMock, MagicMock, patch

from app.modules.application_documents.service import DocumentNotFoundError, FileTooLargeError

SERVICE = "app.modules.application_documents.service"
BASE = "/api/application-documents"


class TestTypesEndpoint:
    def test_lists_vocabulary(self, client):
        response = client.get(f"{BASE}/types")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 13
        assert body["data"][0] == {"value": "BIRTH_CERTIFICATE", "label": "Birth Certificate"}


class TestUploadEndpoint:
    def test_created(self, client, make_document):
        with patch(f"{SERVICE}.upload_document", new=AsyncMock(return_value=make_document())) as mock_upload:
            response = client.post(
                f"{BASE}/upload",
                data={"applicationId": "101", "documentType": "BIRTH_CERTIFICATE"},
                files={"document": ("birth_certificate.pdf", b"%PDF-1.4", "application/pdf")},
            )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Document uploaded successfully"
        assert body["data"]["id"] == 5
        assert body["data"]["originalName"] == "birth_certificate.pdf"
        assert body["data"]["documentType"] == "BIRTH_CERTIFICATE"
        assert body["data"]["fileSize"] == 2048

        kwargs = mock_upload.call_args.kwargs
        assert kwargs["application_id"] == "101"
        assert kwargs["document_type"] == "BIRTH_CERTIFICATE"
        assert kwargs["filename"] == "birth_certificate.pdf"
        assert kwargs["content"] == b"%PDF-1.4"

    def test_missing_file(self, client):
        response = client.post(
            f"{BASE}/upload",
            data={"applicationId": "101", "documentType": "BIRTH_CERTIFICATE"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "No document file provided"}

    def test_unsupported_file_type(self, client):
        response = client.post(
            f"{BASE}/upload",
            data={"applicationId": "101", "documentType": "OTHER"},
            files={"document": ("setup.exe", b"MZ", "application/x-msdownload")},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("File type application/x-msdownload")

    def test_too_large(self, client):
        with patch(f"{SERVICE}.upload_document", new=AsyncMock(side_effect=FileTooLargeError())):
            response = client.post(
                f"{BASE}/upload",
                data={"applicationId": "101", "documentType": "OTHER"},
                files={"document": ("scan.pdf", b"%PDF", "application/pdf")},
            )

        assert response.status_code == 413
        assert response.json()["success"] is False

    def test_reads_no_further_than_the_size_limit(self, client):
        with (
            patch(
                "app.modules.application_documents.router.settings",
                new=MagicMock(max_upload_bytes=8),
            ),
            patch(f"{SERVICE}.upload_document", new=AsyncMock(side_effect=FileTooLargeError())) as mock_upload,
        ):
            response = client.post(
                f"{BASE}/upload",
                data={"applicationId": "101", "documentType": "OTHER"},
                files={"document": ("scan.pdf", b"%PDF" + b"0" * 1000, "application/pdf")},
            )

        assert response.status_code == 413
        assert len(mock_upload.call_args.kwargs["content"]) == 9

    def test_unexpected_error(self, client):
        with patch(f"{SERVICE}.upload_document", new=AsyncMock(side_effect=OSError("disk full"))):
            response = client.post(
                f"{BASE}/upload",
                data={"applicationId": "101", "documentType": "OTHER"},
                files={"document": ("scan.pdf", b"%PDF", "application/pdf")},
            )

        assert response.status_code == 500
        assert "disk" not in response.json()["error"]


class TestListEndpoint:
    def test_includes_download_url(self, client, make_document):
        documents = [make_document(id=5), make_document(id=6, document_type="SCHOOL_REPORT")]
        with patch(f"{SERVICE}.list_documents", new=AsyncMock(return_value=documents)):
            response = client.get(f"{BASE}/101")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [doc["id"] for doc in data] == [5, 6]
        assert data[0]["downloadUrl"] == f"{BASE}/download/5"
        assert data[1]["documentType"] == "SCHOOL_REPORT"

    def test_empty(self, client):
        with patch(f"{SERVICE}.list_documents", new=AsyncMock(return_value=[])):
            response = client.get(f"{BASE}/999")

        assert response.json() == {"success": True, "data": []}


class TestDownloadEndpoint:
    def test_serves_file_with_original_name(self, client, make_document, tmp_path):
        stored = tmp_path / "stored.pdf"
        stored.write_bytes(b"%PDF-1.4 content")
        document = make_document(file_path=str(stored))

        with patch(f"{SERVICE}.get_download", new=AsyncMock(return_value=document)):
            response = client.get(f"{BASE}/download/5")

        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 content"
        assert "birth_certificate.pdf" in response.headers["content-disposition"]

    def test_missing_file(self, client):
        error = DocumentNotFoundError("File not found on server")
        with patch(f"{SERVICE}.get_download", new=AsyncMock(side_effect=error)):
            response = client.get(f"{BASE}/download/5")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "File not found on server"}


class TestDeleteEndpoint:
    def test_deleted(self, client):
        with patch(f"{SERVICE}.delete_document", new=AsyncMock()) as mock_delete:
            response = client.delete(f"{BASE}/5")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Document deleted successfully"}
        assert mock_delete.call_args.args[1] == 5

    def test_not_found(self, client):
        with patch(f"{SERVICE}.delete_document", new=AsyncMock(side_effect=DocumentNotFoundError())):
            response = client.delete(f"{BASE}/5")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Document not found"}
