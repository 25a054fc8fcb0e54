"""Document storage for uploaded PDFs."""

from docuchats.storage.local import (
    DocumentNotFoundError,
    DocumentStorage,
    InvalidDocumentNameError,
    StorageConfig,
    StoredDocument,
    get_storage,
    key_for,
)

__all__ = [
    "DocumentNotFoundError",
    "DocumentStorage",
    "InvalidDocumentNameError",
    "StorageConfig",
    "StoredDocument",
    "get_storage",
    "key_for",
]
