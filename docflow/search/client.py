from typing import Any, ClassVar

import httpx

from docflow.documents.models import Document
from docflow.logging.logger import Log
from docflow.search.exceptions import SearchUnavailableError, classify_status


class SearchIndexClient:
    """Minimal Elasticsearch REST client for the document index."""

    MAPPINGS: ClassVar[dict[str, Any]] = {
        "properties": {
            "ocr_text": {"type": "text"},
            "file_name": {"type": "text"},
            "summary": {"type": "text"},
            "tags": {"type": "keyword"},
            "uploaded_at": {"type": "date"},
        }
    }
    SEARCH_FIELDS: ClassVar[list[str]] = ["ocr_text", "file_name", "summary"]

    def __init__(
        self,
        *,
        base_url: str,
        index_name: str,
        timeout_seconds: float,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._index = index_name
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    def ensure_index(self) -> bool:
        """Create the index if it does not exist.

        Returns:
            True if this call created the index.
        """
        response = self._send("HEAD", f"/{self._index}")
        if response.status_code == 200:
            Log.info(f"Search index '{self._index}' exists")
            return False
        if response.status_code != 404:
            raise classify_status(response.status_code, response.text[:500])

        response = self._send("PUT", f"/{self._index}", json={"mappings": self.MAPPINGS})
        if response.is_success:
            Log.info(f"Created search index '{self._index}'")
            return True
        if response.status_code == 400 and "resource_already_exists_exception" in response.text:
            Log.info(f"Search index '{self._index}' was created concurrently")
            return False
        raise classify_status(response.status_code, response.text[:500])

    def index_document(self, document: Document, refresh: bool = False) -> None:
        """Write the document under its id, replacing any earlier version."""
        params = {"refresh": "wait_for"} if refresh else None
        response = self._send(
            "PUT",
            f"/{self._index}/_doc/{document.id}",
            json=self.to_index_body(document),
            params=params,
        )
        if not response.is_success:
            raise classify_status(response.status_code, response.text[:500])

    def search(self, keyword: str, size: int = 10) -> list[dict[str, Any]]:
        """Full-text search over OCR text, file name and summary."""
        response = self._send(
            "POST",
            f"/{self._index}/_search",
            json={
                "size": size,
                "query": {
                    "multi_match": {
                        "query": keyword,
                        "fields": self.SEARCH_FIELDS,
                        "fuzziness": "AUTO",
                    }
                },
            },
        )
        if not response.is_success:
            raise classify_status(response.status_code, response.text[:500])
        try:
            hits = response.json()["hits"]["hits"]
        except (ValueError, KeyError, TypeError) as exc:
            raise SearchUnavailableError(f"Unexpected search response: {exc}") from exc
        return [hit["_source"] for hit in hits]

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def to_index_body(document: Document) -> dict[str, Any]:
        return {
            "id": document.id,
            "file_name": document.file_name,
            "file_path": document.file_path,
            "ocr_text": document.ocr_text,
            "summary": document.summary,
            "tags": [tag.name for tag in document.tags],
            "uploaded_at": document.uploaded_at.isoformat() if document.uploaded_at else None,
        }

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise SearchUnavailableError(f"Search index unreachable: {exc}") from exc
