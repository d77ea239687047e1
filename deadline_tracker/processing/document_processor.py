"""
Document Processor for Deadline Tracker.
Validates uploaded files and decodes PDF, DOCX and TXT into plain text.
PDF pages are prefixed with page markers so extracted items can cite pages.
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from docx import Document
from pypdf import PdfReader

from deadline_tracker.processing.normalizer import normalize_snippet
from deadline_tracker.utils.config import get_api_config

logger = logging.getLogger(__name__)

PAGE_MARKER_TEMPLATE = "\n[[[TT_PAGE_{page}]]]\n"

IMAGE_ONLY_PDF_ERROR = (
    "This PDF appears to be image-only (scanned). "
    "Please paste text or upload a text-based document."
)
EMPTY_TEXT_ERROR = "No readable text found in file."


class DocumentProcessor:
    """Turns uploaded contract files into text for the extractor."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize document processor with configuration.

        Args:
            config: API configuration mapping (default: config/api_config.yaml)
        """
        config = config if config is not None else get_api_config()

        doc_config = config.get('document_processing', {})
        self.supported_formats = doc_config.get('supported_formats', ['.pdf', '.docx', '.txt'])
        self.max_file_size_mb = doc_config.get('max_file_size_mb', 40)
        self.max_files = doc_config.get('max_files', 3)
        self.min_pdf_chars = doc_config.get('min_pdf_chars', 50)

        logger.info(
            f"Document processor initialized. Formats: {self.supported_formats}, "
            f"max size: {self.max_file_size_mb}MB, max files: {self.max_files}"
        )

    def validate_file(self, filename: str, file_size: int) -> tuple[bool, str]:
        """
        Validate file format and size.

        Args:
            filename: Name of the file
            file_size: Size of file in bytes

        Returns:
            Tuple of (is_valid, error_message)
        """
        ext = Path(filename).suffix.lower()

        if ext not in self.supported_formats:
            return False, f"Unsupported file format: {ext}. Supported: {self.supported_formats}"

        max_size_bytes = self.max_file_size_mb * 1024 * 1024
        if file_size > max_size_bytes:
            return False, f"File too large: {file_size / (1024*1024):.2f}MB. Max: {self.max_file_size_mb}MB"

        return True, ""

    def extract_text(self, file_content: bytes, filename: str) -> str:
        """
        Extract text from document based on file type.

        Args:
            file_content: Raw file bytes
            filename: Name of the file

        Returns:
            Extracted text content
        """
        ext = Path(filename).suffix.lower()

        if ext == '.txt':
            return self._extract_from_txt(file_content)
        elif ext == '.pdf':
            return self._extract_from_pdf(file_content)
        elif ext == '.docx':
            return self._extract_from_docx(file_content)
        else:
            raise ValueError(f"Unsupported format: {ext}")

    def _extract_from_txt(self, content: bytes) -> str:
        """Extract text from TXT file."""
        return content.decode('utf-8', errors='ignore')

    def _extract_from_pdf(self, content: bytes) -> str:
        """Extract text from PDF file, one page marker before each page."""
        reader = PdfReader(io.BytesIO(content))
        parts = []
        for page_number, page in enumerate(reader.pages, start=1):
            parts.append(PAGE_MARKER_TEMPLATE.format(page=page_number))
            parts.append(page.extract_text() or "")
        return "".join(parts)

    def _extract_from_docx(self, content: bytes) -> str:
        """Extract text from DOCX file."""
        doc = Document(io.BytesIO(content))
        return "\n".join(para.text for para in doc.paragraphs)

    def readable_text_error(self, text: str, filename: str) -> Optional[str]:
        """Return why decoded text is unusable, or None when it can be extracted."""
        readable = normalize_snippet(text)
        if filename.lower().endswith('.pdf') and len(readable) < self.min_pdf_chars:
            return IMAGE_ONLY_PDF_ERROR
        if not readable:
            return EMPTY_TEXT_ERROR
        return None

    def process_document(self, file_content: bytes, filename: str) -> Dict[str, Any]:
        """
        Validate and decode one file.

        Args:
            file_content: Raw file bytes
            filename: Name of the file

        Returns:
            Dict with filename, full_text, total_characters and error
            (error is None when the text is ready for extraction)

        Raises:
            ValueError: If the file fails format or size validation
        """
        is_valid, error = self.validate_file(filename, len(file_content))
        if not is_valid:
            raise ValueError(error)

        text = self.extract_text(file_content, filename)
        error = self.readable_text_error(text, filename)
        if error:
            logger.warning(f"{filename}: {error}")

        return {
            "filename": filename,
            "full_text": text,
            "total_characters": len(text),
            "error": error
        }
