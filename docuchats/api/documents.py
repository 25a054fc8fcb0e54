"""Stored document endpoints: list, download, re-extract, delete."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from docuchats.models.schemas import DocumentInfo, DocumentResponse, document_path
from docuchats.parsing.pdf_parser import ExtractionError, parse_pdf
from docuchats.parsing.segmenter import paginate
from docuchats.storage.local import (
    DocumentNotFoundError,
    InvalidDocumentNameError,
    get_storage,
    key_for,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def extract_document(filename: str, key: str, content: bytes) -> DocumentResponse:
    """Run the extraction pipeline on PDF bytes.

    Pages are split on the raw text first, then each page is normalized and
    broken into paragraphs and sentences.

    Raises:
        ExtractionError: If the PDF cannot be read.
    """
    pdf_content = parse_pdf(content)
    pages = paginate(pdf_content.text)
    text = "\n\n".join(page.text for page in pages if page.text)
    logger.debug(f"Normalized text for {filename}: {text[:500]!r}")

    return DocumentResponse(
        filename=filename,
        key=key,
        page_count=pdf_content.pages,
        text=text,
        pages=pages,
        metadata=pdf_content.metadata,
    )


def _read_stored(name: str) -> tuple[str, bytes]:
    key = key_for(name)
    try:
        return key, get_storage().get(key)
    except InvalidDocumentNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e


@router.get("", response_model=list[DocumentInfo])
async def list_documents() -> list[DocumentInfo]:
    """List uploaded documents, oldest first."""
    return [
        DocumentInfo(
            name=doc.name,
            url=document_path(doc.name, "pdf"),
            uploaded_at=doc.uploaded_at,
        )
        for doc in get_storage().list_documents()
    ]


@router.get("/{name}/pdf")
async def get_pdf(name: str) -> Response:
    """Return the stored PDF bytes."""
    _, content = _read_stored(name)
    return Response(content=content, media_type="application/pdf")


@router.get("/{name}/pages", response_model=DocumentResponse)
async def get_pages(name: str) -> DocumentResponse:
    """Extract a stored PDF again and return its pages.

    Raises:
        400: Stored file can no longer be parsed.
        404: No document with this name.
    """
    key, content = _read_stored(name)
    try:
        return extract_document(name, key, content)
    except ExtractionError as e:
        logger.warning(f"Extraction failed for stored document {name}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.delete("/{name}")
async def delete_document(name: str) -> dict[str, str]:
    """Delete a stored document."""
    try:
        get_storage().delete(key_for(name))
    except InvalidDocumentNameError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found") from e
    return {"message": "PDF deleted successfully"}
