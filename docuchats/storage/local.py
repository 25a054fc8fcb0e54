"""Local disk storage for uploaded PDF documents.

Documents live under ``<root>/pdfs/`` and are addressed by keys of the form
``pdfs/<filename>``. Uploading a file with an existing name replaces it.
"""

import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

logger = logging.getLogger(__name__)

KEY_PREFIX = "pdfs/"


class StorageConfig(BaseModel):
    """Configuration for document storage.

    Attributes:
        root: Directory holding the stored documents.
    """

    root: Path = Field(
        default_factory=lambda: Path(os.getenv("DOCUCHATS_DATA_DIR", "data")),
        description="Root data directory",
    )


class StoredDocument(BaseModel):
    """A document held in storage."""

    name: str
    key: str
    uploaded_at: datetime


class DocumentNotFoundError(Exception):
    """Raised when a storage key does not exist."""

    pass


class InvalidDocumentNameError(ValueError):
    """Raised when a filename would escape the storage directory."""

    pass


def key_for(name: str) -> str:
    """Build the storage key for a filename."""
    return f"{KEY_PREFIX}{name}"


class DocumentStorage:
    """Store, fetch, list and delete PDF files on local disk."""

    def __init__(self, config: StorageConfig | None = None) -> None:
        self._config = config or StorageConfig()
        self._dir = self._config.root / KEY_PREFIX.rstrip("/")
        self._dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        name = key.removeprefix(KEY_PREFIX)
        if not name or name in (".", "..") or Path(name).name != name:
            raise InvalidDocumentNameError(f"Invalid document name: {name!r}")
        return self._dir / name

    def put(self, content: bytes, name: str) -> str:
        """Write a document and return its key."""
        key = key_for(name)
        self._path_for(key).write_bytes(content)
        logger.info(f"Stored document {key} ({len(content)} bytes)")
        return key

    def get(self, key: str) -> bytes:
        """Read a document by key.

        Raises:
            DocumentNotFoundError: If no document has this key.
        """
        path = self._path_for(key)
        if not path.is_file():
            raise DocumentNotFoundError(f"Document not found: {key}")
        return path.read_bytes()

    def list_documents(self) -> list[StoredDocument]:
        """List stored documents, oldest upload first."""
        documents = [
            StoredDocument(
                name=path.name,
                key=key_for(path.name),
                uploaded_at=datetime.fromtimestamp(path.stat().st_mtime, tz=UTC),
            )
            for path in self._dir.iterdir()
            if path.is_file()
        ]
        return sorted(documents, key=lambda doc: (doc.uploaded_at, doc.name))

    def delete(self, key: str) -> None:
        """Delete a document by key.

        Raises:
            DocumentNotFoundError: If no document has this key.
        """
        path = self._path_for(key)
        if not path.is_file():
            raise DocumentNotFoundError(f"Document not found: {key}")
        path.unlink()
        logger.info(f"Deleted document {key}")


# Module-level singleton instance
_storage: DocumentStorage | None = None


def get_storage() -> DocumentStorage:
    """Get or create the global document storage."""
    global _storage
    if _storage is None:
        _storage = DocumentStorage()
    return _storage
