"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - async_client: HTTPX client for API testing
    - storage: Document storage in a temporary directory
    - pdf_factory: Builds small text PDFs in memory
    - sample_pdf_bytes: Two-page PDF with a few paragraphs
    - mock_session_id: Consistent session ID for tests
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from docuchats.api import app
from docuchats.storage.local import DocumentStorage, StorageConfig


def _escape_pdf_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: list[list[str]]) -> bytes:
    """Build a PDF with one Helvetica text line per entry of each page.

    Object layout: 1 catalog, 2 page tree, 3 font, then a page object and
    its content stream for every page.
    """
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, lines in enumerate(pages):
        objects.append(
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {5 + 2 * i} 0 R >>"
        )
        operations = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
        operations += [f"({_escape_pdf_string(line)}) Tj T*" for line in lines]
        operations.append("ET")
        stream = "\n".join(operations)
        objects.append(f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream")

    output = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(output))
        output += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")

    xref_offset = len(output)
    output += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
    for offset in offsets:
        output += f"{offset:010d} 00000 n \n".encode()
    output += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return output


@pytest.fixture
def pdf_factory() -> Callable[[list[list[str]]], bytes]:
    """Return the in-memory PDF builder."""
    return build_pdf


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Two-page PDF; the first page holds two paragraphs."""
    return build_pdf([
        ["Information security protects data.", "", "Access control limits who can read it."],
        ["Encryption keeps secrets safe. Keys must rotate."],
    ])


@pytest.fixture
def storage(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> DocumentStorage:
    """Document storage rooted in a temporary directory, used by the API.

    Returns:
        The storage instance returned by get_storage() during the test.
    """
    instance = DocumentStorage(StorageConfig(root=tmp_path))
    monkeypatch.setattr("docuchats.storage.local._storage", instance)
    return instance


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "test-session-12345"


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
