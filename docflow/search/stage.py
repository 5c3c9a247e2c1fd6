import threading

from docflow.config.settings import Settings
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.logging.logger import Log
from docflow.messaging.models import DocumentMessage
from docflow.search.client import SearchIndexClient
from docflow.worker.handler import StageHandler, check_cancelled


class IndexingStage(StageHandler):
    """Writes the current state of a document into the search index."""

    name = "indexing"

    def __init__(
        self,
        document_repo: DocumentRepository,
        search_client: SearchIndexClient,
        settings: Settings,
    ) -> None:
        self._document_repo = document_repo
        self._search_client = search_client
        self._settings = settings

    @property
    def queue_name(self) -> str:
        return self._settings.queue_indexing

    def on_startup(self) -> None:
        self._search_client.ensure_index()

    def handle(
        self,
        message: DocumentMessage,
        delivery_tag: int,
        stop_event: threading.Event,
    ) -> None:
        document_id = message.document_id
        document = self._document_repo.get_by_id(document_id)
        if document is None:
            Log.warning(f"Document {document_id} not found, skipping indexing")
            return
        if not document.has_ocr_text:
            Log.warning(f"Document {document_id} has no OCR text, skipping indexing")
            return

        check_cancelled(stop_event)
        self._search_client.index_document(document)
        Log.info(f"Indexed document {document_id}")
