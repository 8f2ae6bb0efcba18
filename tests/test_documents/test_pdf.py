"""Tests for PDF text extraction."""

import asyncio

import fitz
import pytest

from quiz_extractor.documents.pdf import extract_pdf_text, format_pages, subject_from_filename
from quiz_extractor.errors import DocumentExtractionError


def build_pdf(path, pages: list[str], **save_kwargs) -> None:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    doc.save(str(path), **save_kwargs)
    doc.close()


class TestExtractPdfText:
    """Test page extraction and formatting."""

    def test_pages_in_order_across_batches(self, tmp_path):
        """Test that batching keeps document order."""
        path = tmp_path / "doc.pdf"
        build_pdf(path, [f"Page text {n}" for n in range(1, 13)])

        text = asyncio.run(extract_pdf_text(path, batch_size=5))

        markers = [line for line in text.splitlines() if line.startswith("--- Page")]
        assert markers == [f"--- Page {n} ---" for n in range(1, 13)]
        assert text.splitlines()[1] == "Page text 1"

    def test_empty_pages_dropped(self, tmp_path):
        """Test that pages without text are left out."""
        path = tmp_path / "doc.pdf"
        build_pdf(path, ["First", "", "Third"])

        text = asyncio.run(extract_pdf_text(path))

        assert "--- Page 2 ---" not in text
        assert text == "--- Page 1 ---\nFirst\n--- Page 3 ---\nThird"

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises DocumentExtractionError."""
        with pytest.raises(DocumentExtractionError):
            asyncio.run(extract_pdf_text(tmp_path / "nope.pdf"))

    def test_invalid_file(self, tmp_path):
        """Test that a corrupt file raises DocumentExtractionError."""
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf at all")

        with pytest.raises(DocumentExtractionError):
            asyncio.run(extract_pdf_text(path))

    def test_encrypted_file(self, tmp_path):
        """Test that a password-protected file raises with a clear message."""
        path = tmp_path / "secret.pdf"
        build_pdf(
            path,
            ["Hidden"],
            encryption=fitz.PDF_ENCRYPT_AES_256,
            user_pw="user",
            owner_pw="owner",
        )

        with pytest.raises(DocumentExtractionError, match="password-protected"):
            asyncio.run(extract_pdf_text(path))


class TestHelpers:
    """Test formatting helpers."""

    def test_format_pages(self):
        """Test page joining."""
        assert format_pages([(1, "a"), (2, ""), (3, "c")]) == "--- Page 1 ---\na\n--- Page 3 ---\nc"

    def test_subject_from_filename(self):
        """Test subject suggestion from a file name."""
        assert subject_from_filename("/tmp/world_war-two.pdf") == "world war two"
