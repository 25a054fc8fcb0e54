"""DocuChats - read, listen to, and chat about PDF documents.

Combines FastAPI for HTTP streaming, Agno for agent orchestration,
NiceGUI for the reader interface, and Pydantic for data validation.

Components:
    - parsing: PDF extraction, text normalization and pagination
    - playback: Sentence-by-sentence read-aloud state machine
    - speech: Text-to-speech synthesis
    - agent: LLM chat and notes with per-conversation history
    - storage: Uploaded document storage
    - api: HTTP endpoints and streaming responses
    - ui: Web interface for reading and chatting
    - models: Request/response schemas
"""

__version__ = "0.1.0"
