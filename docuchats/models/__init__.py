"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatRequest / ChatResponse / StreamChunk: Chat about a document
    - DocumentResponse / DocumentInfo: Extracted and stored documents
    - NotesRequest / NotesResponse: Study notes
    - SpeechRequest: Text-to-speech for one sentence
"""

from docuchats.models.schemas import (
    ChatRequest,
    ChatResponse,
    DocumentInfo,
    DocumentResponse,
    NotesRequest,
    NotesResponse,
    SpeechRequest,
    StreamChunk,
    StreamStatus,
    document_path,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "DocumentInfo",
    "DocumentResponse",
    "NotesRequest",
    "NotesResponse",
    "SpeechRequest",
    "StreamChunk",
    "StreamStatus",
    "document_path",
]
