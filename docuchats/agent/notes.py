"""Study notes generated from a document's text."""

import re

# Document text sent for notes is cut to this many characters
NOTES_CHAR_BUDGET = 15000

NOTES_INSTRUCTIONS = [
    "You summarize text and extract key information.",
    "Provide concise, vital notes or a summary based on the given text.",
    "Separate topics with blank lines.",
]


def truncate_for_notes(text: str) -> str:
    return text[:NOTES_CHAR_BUDGET]


def format_notes(text: str) -> str:
    """Tidy model output for display as paragraphs."""
    text = re.sub(r"\n{3,}", "\n\n", text)
    text = re.sub(r"\.([A-Z])", r". \1", text)
    text = re.sub(r"([.,!?;:])(\S)", r"\1 \2", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return text.strip()
