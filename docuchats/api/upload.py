"""PDF upload endpoint for document ingestion.

Handles file upload, validation, extraction, pagination and storage.
"""

import logging

from fastapi import APIRouter, HTTPException, UploadFile, status

from docuchats.api.documents import extract_document
from docuchats.models.schemas import DocumentResponse
from docuchats.parsing.pdf_parser import MAX_FILE_SIZE, ExtractionError
from docuchats.storage.local import InvalidDocumentNameError, get_storage, key_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])

# 10MB limit matches pdf_parser constant
MAX_UPLOAD_SIZE = MAX_FILE_SIZE


def _validate_file_extension(filename: str | None) -> str:
    """Validate that file has .pdf extension.

    Args:
        filename: The uploaded filename.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if extension is invalid.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    return filename


async def _read_and_validate_size(file: UploadFile) -> bytes:
    """Read file content and validate size.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > MAX_UPLOAD_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)",
        )

    return content


@router.post("/pdf", response_model=DocumentResponse)
async def upload_pdf(file: UploadFile) -> DocumentResponse:
    """Upload a PDF, extract its text, and store it.

    Args:
        file: The uploaded PDF file (multipart/form-data).

    Returns:
        DocumentResponse with the normalized pages of the document.

    Raises:
        400: Invalid file (not PDF, empty, corrupt, bad name).
        413: File exceeds 10MB limit.
        500: Storage failure.
    """
    filename = _validate_file_extension(file.filename)
    content = await _read_and_validate_size(file)

    try:
        document = extract_document(filename, key_for(filename), content)
    except ExtractionError as e:
        logger.warning(f"PDF extraction failed for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    try:
        get_storage().put(content, filename)
    except InvalidDocumentNameError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except OSError as e:
        logger.error(f"Failed to store {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store document",
        ) from e

    logger.info(f"Ingested PDF: {filename} ({document.page_count} pages)")
    return document
