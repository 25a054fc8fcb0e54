"""PDF text extraction using pypdf.

Extracts raw page text and metadata from PDF files with validation.

The reader shows one PDF page per screen and pages are normalized one at a
time, so the boundaries between pages must survive extraction. Each page
contributes exactly one chunk of text, joined with form feeds that the
segmenter splits on before any cleanup runs. A page with no extractable text
(an image-only page, or one pypdf fails on) still contributes an empty
chunk, so page N of the text is always page N of the PDF.

No cleanup happens here: hyphen removal and whitespace collapsing would
erase the form feeds.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

# Constants
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"
PAGE_SEPARATOR = "\f"


class PDFContent(BaseModel):
    """Extracted content from a PDF file.

    Attributes:
        text: Raw text of all pages, separated by form feeds.
        pages: Total number of pages in the document.
        metadata: Document metadata (title, author, etc.).
    """

    text: str
    pages: int = Field(ge=0)
    metadata: dict[str, str | None]


class ExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""

    pass


def _validate_pdf_bytes(file_content: bytes) -> None:
    """Validate PDF file content before parsing.

    Args:
        file_content: Raw bytes of the PDF file.

    Raises:
        ExtractionError: If validation fails.
    """
    if not file_content:
        raise ExtractionError("Empty file provided")

    if len(file_content) > MAX_FILE_SIZE:
        size_mb = len(file_content) / (1024 * 1024)
        raise ExtractionError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not file_content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise ExtractionError("Invalid PDF: file does not start with PDF header")


def _extract_metadata(reader: PdfReader) -> dict[str, str | None]:
    """Extract metadata from PDF reader.

    Args:
        reader: Initialized PdfReader instance.

    Returns:
        Dictionary of metadata fields.
    """
    metadata: dict[str, str | None] = {}

    try:
        if reader.metadata:
            metadata["title"] = reader.metadata.get("/Title")
            metadata["author"] = reader.metadata.get("/Author")
            metadata["subject"] = reader.metadata.get("/Subject")
            metadata["creator"] = reader.metadata.get("/Creator")

            creation_date = reader.metadata.get("/CreationDate")
            if creation_date:
                metadata["creation_date"] = str(creation_date)
    except Exception as e:
        logger.warning(f"Failed to extract some metadata: {e}")

    return {k: str(v) for k, v in metadata.items() if v is not None}


def parse_pdf(file_content: bytes) -> PDFContent:
    """Extract the raw text of every page of a PDF.

    Pages whose text cannot be extracted contribute an empty string, so the
    page count of the text always matches the document.

    Args:
        file_content: Raw bytes of the PDF file.

    Returns:
        PDFContent with raw text, page count, and metadata.

    Raises:
        ExtractionError: If the file is invalid, too large, empty, or corrupt.
    """
    _validate_pdf_bytes(file_content)

    try:
        reader = PdfReader(io.BytesIO(file_content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise ExtractionError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise ExtractionError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise ExtractionError("PDF contains no pages")

    text_parts: list[str] = []
    for i, page in enumerate(reader.pages):
        try:
            text_parts.append(page.extract_text() or "")
        except Exception as e:
            logger.warning(f"Failed to extract text from page {i + 1}: {e}")
            # Keep the slot so later pages keep their numbers
            text_parts.append("")

    text = PAGE_SEPARATOR.join(text_parts)

    if not text.strip():
        logger.warning("PDF contains no extractable text (may be scanned/image-based)")
    else:
        logger.debug(f"Raw extracted text: {text[:500]!r}")

    return PDFContent(
        text=text,
        pages=pages,
        metadata=_extract_metadata(reader),
    )
