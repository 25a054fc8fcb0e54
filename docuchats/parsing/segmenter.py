"""Page, paragraph and sentence segmentation of extracted PDF text.

Page boundaries are detected on the RAW text (form feeds or long newline
runs) because normalization folds newlines away. Each raw page is then
normalized on its own and split into paragraphs and sentences.
"""

import re

from pydantic import BaseModel, Field

from docuchats.parsing.normalizer import normalize

PAGE_BREAK = re.compile(r"\f|\n{10,}")
PARAGRAPH_BREAK = re.compile(r"\n{2,}")
# Split after a run of terminators; the delimiter stays with its sentence
SENTENCE_BREAK = re.compile(r"(?<=[.!?])(?![.!?])\s*")
_WORD_CHARACTER = re.compile(r"[A-Za-z0-9]")


class PageSegment(BaseModel):
    """Normalized text of one page, in document order.

    Attributes:
        index: Zero-based page position.
        text: Normalized page text.
    """

    index: int = Field(ge=0)
    text: str


class Paragraph(BaseModel):
    """A paragraph with its sentence breakdown.

    Attributes:
        text: Flat paragraph text, used as chat context.
        sentences: Ordered sentences, used for click-to-speak and highlighting.
    """

    text: str
    sentences: list[str] = Field(default_factory=list)


class Page(BaseModel):
    """A page segment together with its paragraphs."""

    index: int = Field(ge=0)
    text: str
    paragraphs: list[Paragraph] = Field(default_factory=list)


def _capitalize(sentence: str) -> str:
    return sentence[:1].upper() + sentence[1:]


def split_sentences(text: str) -> list[str]:
    """Split paragraph text into capitalized sentences.

    Pieces with no letters or digits (stray punctuation) are dropped.

    Args:
        text: Normalized paragraph text.

    Returns:
        Sentences in order; empty when nothing readable remains.
    """
    sentences: list[str] = []
    for piece in SENTENCE_BREAK.split(text):
        piece = piece.strip()
        if piece and _WORD_CHARACTER.search(piece):
            sentences.append(_capitalize(piece))
    return sentences


def split_paragraphs(text: str) -> list[Paragraph]:
    """Split a normalized page segment into paragraphs.

    Args:
        text: Normalized segment text with blank-line paragraph breaks.

    Returns:
        Non-empty paragraphs in order. An empty list means the page has no
        text, which callers must handle before indexing.
    """
    paragraphs: list[Paragraph] = []
    for block in PARAGRAPH_BREAK.split(text):
        block = block.strip()
        if not block:
            continue
        paragraphs.append(Paragraph(text=block, sentences=split_sentences(block)))
    return paragraphs


def segment_pages(raw: str) -> list[PageSegment]:
    """Split raw extracted text into normalized page segments.

    Splitting must run before normalization: the normalizer turns newline
    runs into single paragraph breaks, erasing the page signal.

    Args:
        raw: Raw extracted text, pages separated by form feeds.

    Returns:
        One segment per raw page. Empty pages are kept so indices line up
        with PDF pages; text with nothing visible gives an empty list.
    """
    if not raw.strip():
        return []

    return [
        PageSegment(index=index, text=normalize(chunk))
        for index, chunk in enumerate(PAGE_BREAK.split(raw))
    ]


def paginate(raw: str) -> list[Page]:
    """Segment raw text into pages of paragraphs and sentences."""
    return [
        Page(index=segment.index, text=segment.text, paragraphs=split_paragraphs(segment.text))
        for segment in segment_pages(raw)
    ]
