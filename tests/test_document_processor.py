"""
Unit tests for DocumentProcessor class.
"""
import io
from unittest.mock import Mock, patch

import pytest
from docx import Document
from pypdf import PdfWriter

from deadline_tracker.processing.document_processor import (
    EMPTY_TEXT_ERROR,
    IMAGE_ONLY_PDF_ERROR,
    DocumentProcessor,
)


@pytest.fixture
def processor():
    """Document processor instance."""
    return DocumentProcessor()


def _docx_bytes(*paragraphs):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes(pages=1):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestDocumentProcessorInit:
    """Test suite for DocumentProcessor initialization."""

    def test_initialization(self, processor):
        """Test processor initialization from config/api_config.yaml."""
        assert processor.max_file_size_mb == 40
        assert processor.max_files == 3
        assert processor.min_pdf_chars == 50

    def test_supported_formats_loaded(self, processor):
        """Test that supported formats are loaded."""
        assert '.pdf' in processor.supported_formats
        assert '.docx' in processor.supported_formats
        assert '.txt' in processor.supported_formats

    def test_explicit_config(self):
        """Test configuration passed directly."""
        processor = DocumentProcessor({"document_processing": {"max_files": 1, "supported_formats": [".txt"]}})
        assert processor.max_files == 1
        assert processor.supported_formats == [".txt"]
        assert processor.max_file_size_mb == 40


class TestValidateFile:
    """Test suite for validate_file method."""

    def test_validate_supported_format(self, processor):
        """Test validation of supported file format."""
        is_valid, error = processor.validate_file("test.pdf", 1024)
        assert is_valid is True
        assert error == ""

    def test_validate_unsupported_format(self, processor):
        """Test validation of unsupported file format."""
        is_valid, error = processor.validate_file("test.exe", 1024)
        assert is_valid is False
        assert "Unsupported file format" in error

    def test_validate_file_too_large(self, processor):
        """Test validation of file that's too large."""
        large_size = (processor.max_file_size_mb + 1) * 1024 * 1024
        is_valid, error = processor.validate_file("test.pdf", large_size)
        assert is_valid is False
        assert "File too large" in error

    def test_validate_file_at_limit(self, processor):
        """Test validation of file at size limit."""
        limit_size = processor.max_file_size_mb * 1024 * 1024
        is_valid, _ = processor.validate_file("test.pdf", limit_size)
        assert is_valid is True

    def test_validate_case_insensitive_extension(self, processor):
        """Test that file extension validation is case insensitive."""
        is_valid, _ = processor.validate_file("test.DOCX", 1024)
        assert is_valid is True


class TestExtractText:
    """Test suite for extract_text method."""

    def test_extract_txt(self, processor):
        """Test UTF-8 text decoding."""
        assert processor.extract_text("Renewal on 2026-01-01 ✓".encode("utf-8"), "a.txt") == "Renewal on 2026-01-01 ✓"

    def test_extract_txt_ignores_invalid_bytes(self, processor):
        """Test that undecodable bytes are dropped."""
        assert processor.extract_text(b"due \xff\xfe2026-01-01", "a.txt") == "due 2026-01-01"

    def test_extract_docx(self, processor):
        """Test DOCX paragraphs joined by newlines."""
        content = _docx_bytes("Master Services Agreement", "Fees are due on 2026-02-01.")
        assert processor.extract_text(content, "msa.docx") == "Master Services Agreement\nFees are due on 2026-02-01."

    def test_extract_pdf_page_markers(self, processor):
        """Test that every PDF page is preceded by a page marker."""
        pages = [Mock(extract_text=Mock(return_value="First page")),
                 Mock(extract_text=Mock(return_value=None))]
        with patch("deadline_tracker.processing.document_processor.PdfReader") as mock_reader:
            mock_reader.return_value.pages = pages
            text = processor.extract_text(b"%PDF", "msa.pdf")

        assert text == "\n[[[TT_PAGE_1]]]\nFirst page\n[[[TT_PAGE_2]]]\n"

    def test_extract_unsupported(self, processor):
        """Test unsupported formats."""
        with pytest.raises(ValueError):
            processor.extract_text(b"data", "sheet.xlsx")


class TestProcessDocument:
    """Test suite for process_document method."""

    def test_process_txt(self, processor):
        """Test a readable text document."""
        result = processor.process_document(b"Fees are due on 2026-02-01.", "fees.txt")

        assert result["filename"] == "fees.txt"
        assert result["full_text"] == "Fees are due on 2026-02-01."
        assert result["total_characters"] == 27
        assert result["error"] is None

    def test_empty_text_reported(self, processor):
        """Test whitespace-only documents."""
        result = processor.process_document(b"   \n\n  ", "blank.txt")
        assert result["error"] == EMPTY_TEXT_ERROR

    def test_image_only_pdf(self, processor):
        """Test that PDFs without a text layer are reported as scans."""
        result = processor.process_document(_blank_pdf_bytes(2), "scan.pdf")
        assert result["error"] == IMAGE_ONLY_PDF_ERROR
        assert "[[[TT_PAGE_2]]]" in result["full_text"]

    def test_invalid_file_raises(self, processor):
        """Test that validation failures raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported file format"):
            processor.process_document(b"data", "malware.exe")

    def test_corrupt_pdf_raises(self, processor):
        """Test that decode errors propagate to the caller."""
        with pytest.raises(Exception):
            processor.process_document(b"not a pdf at all", "broken.pdf")
