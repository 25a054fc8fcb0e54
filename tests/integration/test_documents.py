"""Integration tests for stored document endpoints."""

import pytest
import pytest_check as check
from httpx import AsyncClient

from docuchats.models.schemas import DocumentInfo, DocumentResponse, document_path
from docuchats.storage.local import DocumentStorage


class TestDocumentEndpoints:
    """Tests for listing, downloading, re-extracting and deleting documents."""

    async def test_list_documents(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """Stored documents are listed with a download URL."""
        storage.put(sample_pdf_bytes, "notes.pdf")

        response = await async_client.get("/documents")

        assert response.status_code == 200
        documents = [DocumentInfo.model_validate(doc) for doc in response.json()]
        check.equal([doc.name for doc in documents], ["notes.pdf"])
        check.equal(documents[0].url, "/documents/notes.pdf/pdf")

    async def test_list_empty(self, async_client: AsyncClient, storage: DocumentStorage) -> None:
        """With nothing uploaded the list is empty."""
        response = await async_client.get("/documents")

        assert response.status_code == 200
        assert response.json() == []

    async def test_download_pdf(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """The raw PDF is returned with a PDF media type."""
        storage.put(sample_pdf_bytes, "notes.pdf")

        response = await async_client.get("/documents/notes.pdf/pdf")

        assert response.status_code == 200
        check.equal(response.headers["content-type"], "application/pdf")
        check.equal(response.content, sample_pdf_bytes)

    async def test_get_pages(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """A stored document is extracted and paginated again on request."""
        storage.put(sample_pdf_bytes, "notes.pdf")

        response = await async_client.get("/documents/notes.pdf/pages")

        assert response.status_code == 200
        data = DocumentResponse.model_validate(response.json())
        check.equal(data.filename, "notes.pdf")
        check.equal(data.page_count, 2)
        check.is_in("Encryption", data.pages[1].text)

    async def test_get_pages_of_unreadable_document(
        self, async_client: AsyncClient, storage: DocumentStorage
    ) -> None:
        """A stored file that is not a PDF gives 400."""
        storage.put(b"garbage", "broken.pdf")

        response = await async_client.get("/documents/broken.pdf/pages")

        assert response.status_code == 400

    @pytest.mark.parametrize("path", ["/documents/missing.pdf/pdf", "/documents/missing.pdf/pages"])
    async def test_missing_document_returns_404(
        self, async_client: AsyncClient, storage: DocumentStorage, path: str
    ) -> None:
        """Unknown documents give 404."""
        response = await async_client.get(path)

        assert response.status_code == 404
        assert response.json()["detail"] == "File not found"

    async def test_delete_document(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """Deleting removes the document from storage."""
        storage.put(sample_pdf_bytes, "notes.pdf")

        response = await async_client.delete("/documents/notes.pdf")

        assert response.status_code == 200
        check.equal(storage.list_documents(), [])

    async def test_delete_missing_document_returns_404(
        self, async_client: AsyncClient, storage: DocumentStorage
    ) -> None:
        """Deleting an unknown document gives 404."""
        response = await async_client.delete("/documents/missing.pdf")

        assert response.status_code == 404

    async def test_upload_then_list(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """An uploaded document shows up in the list."""
        await async_client.post(
            "/upload/pdf",
            files={"file": ("fresh.pdf", sample_pdf_bytes, "application/pdf")},
        )

        response = await async_client.get("/documents")

        check.equal([doc["name"] for doc in response.json()], ["fresh.pdf"])


class TestHealth:
    """Tests for the health endpoint."""

    async def test_health(self, async_client: AsyncClient) -> None:
        """The service reports itself healthy."""
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "docuchats"}


class TestDocumentNamesInUrls:
    """Names with URL delimiters survive the round trip through paths."""

    NAME = "lab #2 ?draft.pdf"

    def test_paths_escape_the_name(self) -> None:
        """The name becomes a single escaped path segment."""
        from docuchats.ui.chat_page import reader_path

        check.equal(
            document_path(self.NAME, "pages"), "/documents/lab%20%232%20%3Fdraft.pdf/pages"
        )
        check.equal(reader_path(self.NAME), "/reader/lab%20%232%20%3Fdraft.pdf")

    async def test_listed_url_downloads_the_document(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """The URL in the listing points at the stored file."""
        storage.put(sample_pdf_bytes, self.NAME)

        listing = await async_client.get("/documents")
        response = await async_client.get(listing.json()[0]["url"])

        assert response.status_code == 200
        check.equal(response.content, sample_pdf_bytes)

    async def test_pages_and_delete_by_escaped_name(
        self,
        async_client: AsyncClient,
        storage: DocumentStorage,
        sample_pdf_bytes: bytes,
    ) -> None:
        """The reader's fetch and the library's delete reach the right document."""
        storage.put(sample_pdf_bytes, self.NAME)

        pages = await async_client.get(document_path(self.NAME, "pages"))
        deleted = await async_client.delete(document_path(self.NAME))

        assert pages.status_code == 200
        check.equal(pages.json()["filename"], self.NAME)
        assert deleted.status_code == 200
        check.equal(storage.list_documents(), [])
