"""FastAPI endpoints for DocuChats.

HTTP and streaming routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /upload/pdf: Upload, extract and paginate a PDF
    - GET /documents, GET /documents/{name}/pdf, GET /documents/{name}/pages,
      DELETE /documents/{name}: Stored documents
    - POST /chat, POST /chat/stream: Chat about the current paragraph
    - POST /notes: Study notes for document text
    - POST /tts/speech: Sentence audio
"""

from docuchats.api.app import app, create_app

__all__ = ["app", "create_app"]
