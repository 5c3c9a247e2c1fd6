import threading

from docflow.config.settings import Settings
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.documents.exceptions import DocumentNotFoundError
from docflow.logging.logger import Log
from docflow.messaging.models import DocumentMessage
from docflow.messaging.publisher import MessagePublisher
from docflow.ocr.ocr_service import OcrService
from docflow.storage.base import BaseDocumentStore
from docflow.worker.handler import StageHandler, check_cancelled


class OcrStage(StageHandler):
    """Extracts text from an uploaded PDF and fans the document out.

    Pipeline: fetch -> load -> OCR -> persist -> publish to indexing and genai.
    """

    name = "ocr"

    def __init__(
        self,
        document_store: BaseDocumentStore,
        document_repo: DocumentRepository,
        ocr_service: OcrService,
        publisher: MessagePublisher,
        settings: Settings,
    ) -> None:
        self._document_store = document_store
        self._document_repo = document_repo
        self._ocr_service = ocr_service
        self._publisher = publisher
        self._settings = settings

    @property
    def queue_name(self) -> str:
        return self._settings.queue_documents

    def handle(
        self,
        message: DocumentMessage,
        delivery_tag: int,
        stop_event: threading.Event,
    ) -> None:
        document_id = message.document_id

        # Step 1: Fetch the original file
        pdf_bytes = self._document_store.fetch(message.file_path)
        Log.info(f"Fetched {len(pdf_bytes)} bytes for document {document_id}")
        check_cancelled(stop_event)

        # Step 2: Load the document record
        document = self._document_repo.get_by_id(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        # Step 3: OCR every page
        result = self._ocr_service.extract_text(pdf_bytes, stop_event)
        check_cancelled(stop_event)

        # Step 4: Persist, only once all pages succeeded
        document.ocr_text = result.text
        document.add_log(
            "OCR Completed", f"{result.page_count} pages, {len(result.text)} characters"
        )
        self._document_repo.update(document)
        Log.info(f"Stored OCR text for document {document_id}")

        # Step 5: Hand off to the next stages
        self._publisher.publish(self._settings.queue_indexing, message)
        self._publisher.publish(self._settings.queue_genai, message)
