from datetime import datetime
from enum import Enum
from urllib.parse import quote

from pydantic import BaseModel, Field, field_validator

from docuchats.parsing.segmenter import Page
from docuchats.speech.config import MAX_SPEED, MIN_SPEED, Voice


class StreamStatus(str, Enum):
    """Status values for streaming updates."""

    RECEIVED = "received"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


class ChatRequest(BaseModel):
    """Request payload for chat completion endpoints.

    Attributes:
        message: User's question or prompt.
        session_id: Optional session for conversation continuity.
        document: Name of the document being discussed.
        context: Text of the paragraph on screen, sent as context.
    """

    message: str = Field(..., min_length=1)
    session_id: str | None = None
    document: str | None = None
    context: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Complete reply from the assistant."""

    response: str
    session_id: str


class StreamChunk(BaseModel):
    """A chunk of streamed response data.

    Attributes:
        content: The text content of this chunk.
        done: Whether this is the final chunk.
        status: Current processing status (received, generating, complete, error).
        error: Error message if something went wrong.
    """

    content: str
    done: bool
    status: StreamStatus | None = None
    error: str | None = None


class DocumentResponse(BaseModel):
    """An extracted document split into pages.

    Attributes:
        filename: Name of the document.
        key: Storage key of the PDF.
        page_count: Number of pages in the PDF.
        text: Normalized text of the whole document, for notes and chat.
        pages: Normalized pages with paragraphs and sentences.
        metadata: PDF metadata (title, author, etc.).
    """

    filename: str
    key: str
    page_count: int
    text: str
    pages: list[Page]
    metadata: dict[str, str | None] = Field(default_factory=dict)


def document_path(name: str, *parts: str) -> str:
    """API path for a stored document, with the name escaped as one segment."""
    return "/".join(["/documents", quote(name, safe=""), *parts])


class DocumentInfo(BaseModel):
    """Listing entry for a stored document."""

    name: str
    url: str
    uploaded_at: datetime


class NotesRequest(BaseModel):
    """Request for study notes on document text."""

    text: str = Field(..., min_length=1)


class NotesResponse(BaseModel):
    notes: str


class SpeechRequest(BaseModel):
    """Request for synthesized speech.

    Attributes:
        text: Sentence to read aloud.
        voice: Voice to read with.
        speed: Speaking speed multiplier.
    """

    text: str = Field(..., min_length=1, max_length=4096)
    voice: Voice = Voice.ALLOY
    speed: float = Field(default=1.0, ge=MIN_SPEED, le=MAX_SPEED)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v
