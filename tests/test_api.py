"""Tests for the HTTP API"""
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from artist_extractor import api, llm_client
from artist_extractor import enhancer as enhancer_module
from artist_extractor.enhancer import AIEnhancer
from artist_extractor.errors import ExtractionFailed, FileNotFound
from artist_extractor.models import ExtractionMetadata, ExtractionResult
from artist_extractor.normalizer import TextNormalizer

from .fakes import FakeLLM, SAMPLE_PROFILE


class FakeExtractor:
    """Returns a canned result, or raises the configured error"""

    def __init__(self, error=None):
        self.error = error
        self.calls = []
        self.existed = []
        self.image_adapter = SimpleNamespace(cloud_client=None)

    def extract(self, file_path, file_type):
        path = Path(file_path)
        self.calls.append((path, file_type))
        self.existed.append(path.exists())
        if self.error is not None:
            raise self.error
        normalizer = TextNormalizer()
        raw_text = normalizer.sanitize(SAMPLE_PROFILE)
        metadata = ExtractionMetadata(
            method="Tesseract (Preprocessed)",
            confidence="medium",
            fallback_used=False,
            processing_time_ms=5,
            text_length=len(raw_text),
            word_count=len(raw_text.split()),
            file_type=file_type,
        )
        return ExtractionResult(raw_text, normalizer.normalize(SAMPLE_PROFILE), metadata)


class TestApi:
    """Tests for upload validation, error mapping and health."""

    @pytest.fixture(autouse=True)
    def fake_pipeline(self, monkeypatch):
        self.extractor = FakeExtractor()
        monkeypatch.setattr(api, "extractor", self.extractor)
        monkeypatch.setattr(api, "enhancer", AIEnhancer(llm_client=FakeLLM(error=RuntimeError("offline"))))
        self.client = TestClient(api.app)

    def upload(self, filename="profile.png", content=b"image-bytes", **data):
        return self.client.post(
            "/extract-upload",
            files={"document": (filename, content, "application/octet-stream")},
            data=data,
        )

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json()["extractor_initialized"] is True
        assert response.json()["cloud_ocr_available"] is False

    def test_upload_success_removes_temp_file(self):
        response = self.upload()

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["filename"] == "profile.png"
        assert body["fields"]["artistName"] == "Ravi Shankar"
        assert "enhanced" not in body

        temp_path, file_type = self.extractor.calls[0]
        assert file_type == "png"
        assert self.extractor.existed == [True]
        assert not temp_path.exists()

    def test_upload_with_enhancement(self):
        response = self.upload(enhance="true")

        assert response.status_code == 200
        assert response.json()["enhanced"]["_metadata"]["provider"] == "deterministic"

    def test_default_enhancer_stays_deterministic(self, monkeypatch):
        def fail_to_build(*args, **kwargs):
            raise AssertionError("LLM client should not be constructed")

        monkeypatch.setattr(api, "enhancer", None)
        monkeypatch.setattr(llm_client, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(enhancer_module, "LLMClient", fail_to_build)

        response = self.upload(enhance="true")

        assert response.status_code == 200
        assert response.json()["enhanced"]["_metadata"]["llm_used"] is False

    def test_unsupported_extension(self):
        response = self.upload(filename="notes.txt")
        assert response.status_code == 400
        assert self.extractor.calls == []

    def test_oversize_upload(self, monkeypatch):
        monkeypatch.setattr(api, "MAX_UPLOAD_BYTES", 10)
        response = self.upload(content=b"x" * 20)
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_extraction_failure_is_422(self):
        self.extractor.error = ExtractionFailed("png", RuntimeError("no text"))

        response = self.upload()

        assert response.status_code == 422
        assert "Failed to extract text from png document" in response.json()["detail"]
        assert not self.extractor.calls[0][0].exists()

    def test_batch_reports_failures_per_item(self):
        self.extractor.error = FileNotFound("/data/missing.pdf")

        response = self.client.post("/extract", json=[{"file_path": "/data/missing.pdf"}])

        assert response.status_code == 200
        item = response.json()[0]
        assert item["success"] is False
        assert item["status_code"] == 404
        assert self.extractor.calls[0][1] == "pdf"

    def test_uninitialized_extractor(self, monkeypatch):
        monkeypatch.setattr(api, "extractor", None)
        assert self.upload().status_code == 500
