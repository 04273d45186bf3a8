"""Tests for the artist-extract command"""
import json

import fitz
import pytest
from click.testing import CliRunner

from artist_extractor import cli, llm_client
from artist_extractor.extractor import DocumentExtractor

from .fakes import FakeEngine, SAMPLE_PROFILE


def make_pdf(path, lines):
    doc = fitz.open()
    page = doc.new_page()
    for index, line in enumerate(lines):
        page.insert_text((72, 72 + 20 * index), line)
    doc.save(str(path))
    doc.close()
    return path


class TestCli:
    """Tests for single-file and folder modes."""

    @pytest.fixture(autouse=True)
    def offline_pipeline(self, monkeypatch):
        monkeypatch.setattr(cli, "create_extractor", lambda: DocumentExtractor(ocr_engine=FakeEngine()))
        monkeypatch.setattr(llm_client, "OPENAI_API_KEY", None)
        self.runner = CliRunner()

    def test_single_file_prints_json(self, tmp_path):
        pdf_path = make_pdf(tmp_path / "profile.pdf", SAMPLE_PROFILE.splitlines())

        result = self.runner.invoke(cli.main, [str(pdf_path)])

        assert result.exit_code == 0
        assert "Method: PDF Parser" in result.output
        assert '"artistName": "Ravi Shankar"' in result.output

    def test_single_file_with_enhancement(self, tmp_path):
        pdf_path = make_pdf(tmp_path / "profile.pdf", SAMPLE_PROFILE.splitlines())

        result = self.runner.invoke(cli.main, [str(pdf_path), "--enhance"])

        assert result.exit_code == 0
        assert "LLM used: no" in result.output
        assert '"provider": "deterministic"' in result.output

    def test_folder_writes_per_file_and_combined_results(self, tmp_path):
        docs = tmp_path / "docs"
        docs.mkdir()
        make_pdf(docs / "ravi.pdf", SAMPLE_PROFILE.splitlines())
        (docs / "broken.pdf").write_bytes(b"this is not a pdf document")
        (docs / "notes.txt").write_text("Artist Name: Someone Else")
        output_dir = tmp_path / "results"

        result = self.runner.invoke(cli.main, [str(docs), "--output-dir", str(output_dir)])

        assert result.exit_code == 0
        assert "Found 2 document(s)" in result.output
        assert "Processed 1 of 2 document(s) successfully" in result.output

        single = json.loads((output_dir / "ravi_extraction.json").read_text(encoding="utf-8"))
        assert single["fields"]["artistName"] == "Ravi Shankar"
        assert not (output_dir / "broken_extraction.json").exists()

        combined = json.loads((output_dir / "all_extractions.json").read_text(encoding="utf-8"))
        assert list(combined) == ["ravi.pdf"]
        assert combined["ravi.pdf"]["metadata"]["fileType"] == "pdf"

    def test_empty_folder(self, tmp_path):
        result = self.runner.invoke(cli.main, [str(tmp_path)])

        assert result.exit_code == 0
        assert "Found" not in result.output
