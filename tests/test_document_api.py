"""
문서 파싱 API 테스트
- TestClient 로 엔드포인트 동작 검증
- AI 기능은 비활성화 (API 키 없는 설정 주입)
"""
import io

import pytest
from fastapi.testclient import TestClient

from docparse.api.document_routes import get_document_service
from docparse.core.config import Settings
from docparse.main import app
from docparse.service.document_service import DocumentParseService

SMALL_LIMIT = 1024


def _service(**overrides) -> DocumentParseService:
    return DocumentParseService(settings=Settings(OPENAI_API_KEY=None, **overrides))


@pytest.fixture
def client():
    app.dependency_overrides[get_document_service] = lambda: _service()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def small_limit_client():
    app.dependency_overrides[get_document_service] = lambda: _service(MAX_FILE_SIZE=SMALL_LIMIT)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.mark.integration
class TestParseDocumentAPI:
    """POST /parse-document"""

    def test_parses_text_file(self, client):
        response = client.post(
            "/parse-document",
            files={"file": ("notes.txt", io.BytesIO(b"The cat sat. The dog ran."), "text/plain")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["content"] == "The cat sat. The dog ran."
        assert body["wordCount"] == 6
        assert body["stats"]["avgWordsPerSentence"] == 3
        assert body["metadata"]["type"] == "txt"
        assert body["metadata"]["extractionMethod"] == "direct-text"

    def test_extension_beats_declared_mime(self, client, ooxml):
        data = ooxml.docx(ooxml.docx_paragraph("Offer letter"))
        response = client.post(
            "/parse-document",
            files={"file": ("offer.docx", io.BytesIO(data), "application/octet-stream")},
        )
        assert response.status_code == 200
        assert response.json()["metadata"]["detectedType"] == "docx"
        assert response.json()["content"] == "Offer letter"

    def test_random_pdf_bytes_never_fail(self, client):
        data = bytes((i * 37 + 11) % 256 for i in range(8192))
        response = client.post("/parse-document", files={"file": ("x.pdf", io.BytesIO(data), "application/pdf")})

        assert response.status_code == 200
        body = response.json()
        assert 0.0 <= body["metadata"]["confidence"] <= 1.0
        assert body["content"]

    def test_image_without_api_key(self, client):
        response = client.post("/parse-document", files={"file": ("scan.png", io.BytesIO(b"\x89PNG"), "image/png")})
        assert response.status_code == 200
        assert response.json()["metadata"]["extractionMethod"] == "ocr-unavailable"

    def test_missing_file_field(self, client):
        response = client.post("/parse-document", files={"attachment": ("a.txt", io.BytesIO(b"x"), "text/plain")})
        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_empty_request(self, client):
        response = client.post("/parse-document")
        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_oversized_upload_is_rejected(self, small_limit_client):
        response = small_limit_client.post(
            "/parse-document",
            files={"file": ("big.txt", io.BytesIO(b"a" * (SMALL_LIMIT + 1)), "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("File too large.")

    def test_upload_at_limit_is_accepted(self, small_limit_client):
        response = small_limit_client.post(
            "/parse-document",
            files={"file": ("limit.txt", io.BytesIO(b"a" * SMALL_LIMIT), "text/plain")},
        )
        assert response.status_code == 200

    @pytest.mark.slow
    def test_default_limit_is_fifty_megabytes(self, client):
        data = b"a" * (50 * 1024 * 1024 + 1)
        response = client.post("/parse-document", files={"file": ("huge.txt", io.BytesIO(data), "text/plain")})
        assert response.status_code == 400
        assert response.json() == {"error": "File too large. Maximum size is 50MB."}

    def test_unexpected_failure_returns_500(self, client):
        class BrokenService(DocumentParseService):
            async def parse(self, file_name, declared_mime, data):
                raise RuntimeError("disk on fire")

        app.dependency_overrides[get_document_service] = lambda: BrokenService(settings=Settings(OPENAI_API_KEY=None))
        response = client.post("/parse-document", files={"file": ("a.txt", io.BytesIO(b"x"), "text/plain")})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to parse document", "details": "disk on fire"}


@pytest.mark.integration
class TestBatchAndInfoAPI:
    """POST /parse-documents, GET /supported-types, /health, /"""

    def test_batch_upload(self, small_limit_client):
        response = small_limit_client.post(
            "/parse-documents",
            files=[
                ("files", ("a.txt", io.BytesIO(b"first file"), "text/plain")),
                ("files", ("b.txt", io.BytesIO(b"b" * (SMALL_LIMIT + 1)), "text/plain")),
                ("files", ("c.json", io.BytesIO(b'{"k": 1}'), "application/json")),
            ],
        )

        assert response.status_code == 200
        body = response.json()
        assert body["totalProcessed"] == 3
        assert body["successful"] == 2
        assert body["failed"] == 1
        assert body["results"][0]["result"]["content"] == "first file"
        assert body["results"][1]["success"] is False
        assert body["results"][1]["error"].startswith("File too large.")
        assert body["results"][2]["result"]["structuredData"] == {"k": 1}

    def test_batch_without_files(self, client):
        response = client.post("/parse-documents")
        assert response.status_code == 400
        assert response.json() == {"error": "No file provided"}

    def test_supported_types(self, client):
        response = client.get("/supported-types")

        assert response.status_code == 200
        body = response.json()
        assert list(body["types"])[:3] == ["pdf", "docx", "doc"]
        assert body["types"]["pptx"]["category"] == "presentation"
        assert body["types"]["jpg"]["mimeTypes"] == ["image/jpeg"]
        assert set(body["categories"]) == {"document", "text", "spreadsheet", "presentation", "image", "data"}

    def test_health_and_root(self, client):
        health = client.get("/health")
        assert health.status_code == 200
        assert health.json()["status"] == "healthy"
        assert "aiEnabled" in health.json()

        root = client.get("/")
        assert root.status_code == 200
        assert "/parse-document" in root.json()["endpoints"].values()
