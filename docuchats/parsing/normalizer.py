"""Text normalization for raw PDF-extracted text.

PDF text extraction discards most layout information: words wrapped at the end
of a line come back hyphenated, kerning gaps vanish so words run together,
and soft line wraps are indistinguishable from real line breaks. The
normalizer applies a fixed sequence of repair steps to get readable text back.

Known limitation: every hyphen is removed (step 3). Wrap artifacts such as
"extrac-\\ntion" are far more common in extracted text than real compounds,
so "well-known" also becomes "wellknown".
"""

import logging
import re

logger = logging.getLogger(__name__)

# Marker some earlier processing passes used for paragraph breaks
PARA_BREAK_SENTINEL = "__PARA_BREAK__"

# Upper bound on full pipeline passes before giving up on a fixed point
MAX_PASSES = 5

_HYPHEN_VARIANTS = re.compile(r"[\u2010-\u2015\u2043\u2212\ufe58\ufe63\uff0d]")
_PARAGRAPH_BREAK = re.compile(r"\n(?:[^\S\n]*\n)+")

# Word boundaries lost during extraction, applied in order
_WORD_BOUNDARIES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"([a-z])([A-Z])"), r"\1 \2"),  # lowerUpper
    (re.compile(r"([A-Z])([A-Z][a-z])"), r"\1 \2"),  # ACRONYMWord
    (re.compile(r"([a-zA-Z])([0-9])"), r"\1 \2"),  # letter5
    (re.compile(r"([0-9])([a-zA-Z])"), r"\1 \2"),  # 5letter
    (re.compile(r"([^\s0-9A-Z])([A-Z])"), r"\1 \2"),
]

_MULTI_SPACE = re.compile(r" {2,}")
_PARENTHESIS = re.compile(r"[^\S\n]*([()])[^\S\n]*")
_SPACE_BEFORE_PUNCT = re.compile(r"[^\S\n]+([.,!?;:])")
_MISSING_SPACE_AFTER_PUNCT = re.compile(r"([.,!?;:])(?![.,!?;:\s]|$)")
_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\n]")


def _strip_sentinels(text: str) -> str:
    return text.replace(PARA_BREAK_SENTINEL, " ")


def _remove_hyphens(text: str) -> str:
    text = _HYPHEN_VARIANTS.sub("-", text)
    return text.replace("-", "")


def _normalize_breaks(text: str) -> str:
    text = text.replace("\xa0", " ")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _PARAGRAPH_BREAK.sub("\n\n", text)
    # Single newlines left over are soft wraps inside a paragraph
    return re.sub(r"(?<!\n)\n(?!\n)", " ", text)


def _split_joined_words(text: str) -> str:
    for pattern, replacement in _WORD_BOUNDARIES:
        text = pattern.sub(replacement, text)
    return _MULTI_SPACE.sub(" ", text)


def _space_punctuation(text: str) -> str:
    text = _PARENTHESIS.sub(r" \1 ", text)
    text = _MULTI_SPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    return _MISSING_SPACE_AFTER_PUNCT.sub(r"\1 ", text)


def _strip_non_printable(text: str) -> str:
    text = _NON_PRINTABLE.sub("", text)
    return _MULTI_SPACE.sub(" ", text)


def _trim(text: str) -> str:
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _PARAGRAPH_BREAK.sub("\n\n", text)
    return text.strip()


def _normalize_once(text: str) -> str:
    text = _strip_sentinels(text)
    text = _remove_hyphens(text)
    text = _normalize_breaks(text)
    text = _split_joined_words(text)
    text = _space_punctuation(text)
    text = _strip_non_printable(text)
    return _trim(text)


def normalize(raw: str) -> str:
    """Clean raw PDF-extracted text into readable paragraphs.

    Stripping non-printable characters late in the pipeline can expose
    patterns the earlier steps would have handled (two words joined around a
    removed glyph), so the pipeline is re-applied until the text stops
    changing.

    Args:
        raw: Text as returned by the PDF extractor.

    Returns:
        Normalized text with paragraphs separated by a blank line.
    """
    text = raw
    for _ in range(MAX_PASSES):
        cleaned = _normalize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned

    logger.debug(f"Normalization did not settle after {MAX_PASSES} passes")
    return text
