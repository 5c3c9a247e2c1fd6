import threading

from docflow.config.settings import Settings
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.documents.locks import DocumentLocks
from docflow.documents.models import Document, Tag
from docflow.errors import ErrorKind, error_kind
from docflow.genai.service import GenAIService
from docflow.logging.logger import Log
from docflow.messaging.models import DocumentMessage
from docflow.messaging.publisher import MessagePublisher
from docflow.worker.handler import StageHandler, check_cancelled


class GenAIStage(StageHandler):
    """Adds an AI summary and tags to a document, then re-queues it for indexing.

    The summary is written at most once. Tags are generated on every run and
    merged by case-insensitive name, so redelivery never duplicates them.
    Permanent provider errors are logged and swallowed; transient ones are
    re-raised after persisting and publishing whatever was already computed.
    A document that carries a summary or tags is published to indexing on
    every delivery, including redeliveries that add nothing new.
    """

    name = "genai"

    def __init__(
        self,
        document_repo: DocumentRepository,
        genai_service: GenAIService,
        publisher: MessagePublisher,
        settings: Settings,
        locks: DocumentLocks | None = None,
    ) -> None:
        self._document_repo = document_repo
        self._genai_service = genai_service
        self._publisher = publisher
        self._settings = settings
        self._locks = locks or DocumentLocks()

    @property
    def queue_name(self) -> str:
        return self._settings.queue_genai

    def handle(
        self,
        message: DocumentMessage,
        delivery_tag: int,
        stop_event: threading.Event,
    ) -> None:
        document_id = message.document_id
        with self._locks.hold(document_id):
            document = self._document_repo.get_by_id(document_id)
            if document is None:
                Log.warning(f"Document {document_id} not found, skipping")
                return
            if not document.has_ocr_text:
                Log.info(f"Document {document_id} has no OCR text yet, skipping")
                return
            text = document.ocr_text or ""

            summary_added = self._add_summary(document, text)

            try:
                check_cancelled(stop_event)
                added_tags = self._add_tags(document, text)
            except Exception:
                if summary_added:
                    self._persist(document, summary_added, [])
                    self._publish_for_indexing(message)
                raise

            if summary_added or added_tags:
                self._persist(document, summary_added, added_tags)
            else:
                Log.info(f"Document {document_id} already enriched, nothing new to store")
            enriched = document.has_summary or bool(document.tags)

        # Stored enrichment is re-published on every delivery; indexing overwrites by id.
        if enriched:
            self._publish_for_indexing(message)

    def _publish_for_indexing(self, message: DocumentMessage) -> None:
        self._publisher.publish(self._settings.queue_indexing, message)

    def _add_summary(self, document: Document, text: str) -> bool:
        if document.has_summary:
            Log.info(f"Document {document.id} already has a summary, skipping generation")
            return False
        try:
            document.summary = self._genai_service.generate_summary(text)
        except Exception as exc:
            if error_kind(exc) is not ErrorKind.PERMANENT:
                raise
            Log.error(f"Summary generation for document {document.id} failed permanently: {exc}")
            return False
        return True

    def _add_tags(self, document: Document, text: str) -> list[Tag]:
        try:
            tags = self._genai_service.generate_tags(text)
        except Exception as exc:
            if error_kind(exc) is not ErrorKind.PERMANENT:
                raise
            Log.error(f"Tag generation for document {document.id} failed permanently: {exc}")
            return []
        added = document.merge_tags(tags)
        if tags and not added:
            Log.info(f"All {len(tags)} generated tags already on document {document.id}")
        return added

    def _persist(self, document: Document, summary_added: bool, added_tags: list[Tag]) -> None:
        if summary_added:
            document.add_log("Summary Generated", f"{len(document.summary or '')} characters")
        if added_tags:
            names = ", ".join(tag.name for tag in added_tags)
            document.add_log("Tags Added", names)
        self._document_repo.update(document)
        Log.info(
            f"Stored enrichment for document {document.id}: "
            f"summary={'new' if summary_added else 'unchanged'}, {len(added_tags)} new tags"
        )
