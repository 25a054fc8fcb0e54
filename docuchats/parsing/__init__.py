"""PDF parsing and text reconstruction.

Turns uploaded PDFs into readable, structured text.

Responsibilities:
    - Raw text extraction with pypdf
    - Normalization of extraction artifacts (hyphens, joined words, spacing)
    - Segmentation into pages, paragraphs and sentences

Page splitting runs on raw text, normalization per page afterwards.
"""

from docuchats.parsing.normalizer import normalize
from docuchats.parsing.pdf_parser import ExtractionError, PDFContent, parse_pdf
from docuchats.parsing.segmenter import (
    Page,
    PageSegment,
    Paragraph,
    paginate,
    segment_pages,
    split_paragraphs,
    split_sentences,
)

__all__ = [
    "ExtractionError",
    "PDFContent",
    "Page",
    "PageSegment",
    "Paragraph",
    "normalize",
    "paginate",
    "parse_pdf",
    "segment_pages",
    "split_paragraphs",
    "split_sentences",
]
