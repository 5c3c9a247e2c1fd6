import signal
import sys
import threading
from collections.abc import Callable
from functools import partial
from types import FrameType

from docflow.batch.access_import import AccessLogImporter
from docflow.config.settings import Settings
from docflow.database.connection import close_pool, init_pool
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.genai.factory import GenAIClientFactory
from docflow.genai.model_selector import ModelSelector
from docflow.genai.service import GenAIService
from docflow.genai.stage import GenAIStage
from docflow.logging.logger import Log
from docflow.messaging.connection import BrokerConnection
from docflow.messaging.consumer import MessageConsumer
from docflow.messaging.publisher import MessagePublisher
from docflow.messaging.runner import MessageRunner
from docflow.ocr.ocr_service import OcrService
from docflow.ocr.stage import OcrStage
from docflow.ocr.tesseract_runner import TesseractCliRunner
from docflow.pdf.factory import PdfRasterizerFactory
from docflow.search.client import SearchIndexClient
from docflow.search.stage import IndexingStage
from docflow.storage.factory import DocumentStoreFactory
from docflow.worker.batch_worker import BatchWorker
from docflow.worker.handler import StageHandler
from docflow.worker.worker import StageWorker

HandlerBuilder = Callable[[Settings, BrokerConnection], StageHandler]


def build_ocr_stage(settings: Settings, broker: BrokerConnection) -> StageHandler:
    runner = TesseractCliRunner(
        executable=settings.tesseract_executable,
        language=settings.tesseract_language,
        dpi=settings.ocr_render_dpi,
        page_timeout=settings.ocr_page_timeout_seconds,
    )
    return OcrStage(
        document_store=DocumentStoreFactory.create(settings),
        document_repo=DocumentRepository(),
        ocr_service=OcrService(PdfRasterizerFactory.create(settings), runner),
        publisher=MessagePublisher(broker, settings.broker_publish_max_retries),
        settings=settings,
    )


def build_genai_stage(settings: Settings, broker: BrokerConnection) -> StageHandler:
    client = GenAIClientFactory.create(settings)
    selector = ModelSelector(
        client,
        family=settings.genai_model_family,
        preferred_keywords=settings.genai_preferred_model_keywords,
        fallback_model=settings.genai_model_name,
    )
    return GenAIStage(
        document_repo=DocumentRepository(),
        genai_service=GenAIService(client, selector, settings),
        publisher=MessagePublisher(broker, settings.broker_publish_max_retries),
        settings=settings,
    )


def build_indexing_stage(settings: Settings, broker: BrokerConnection) -> StageHandler:
    search_client = SearchIndexClient(
        base_url=settings.search_url,
        index_name=settings.search_index_name,
        timeout_seconds=settings.search_timeout_seconds,
    )
    return IndexingStage(DocumentRepository(), search_client, settings)


def install_shutdown_handler(stop_event: threading.Event) -> None:
    """Set stop_event on SIGTERM so the worker finishes its current step and exits."""

    def _on_sigterm(signum: int, frame: FrameType | None) -> None:
        Log.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGTERM, _on_sigterm)


def run_stage(build_handler: HandlerBuilder) -> None:
    """Entry point: settings -> pool -> build stage -> consume until stopped."""
    settings = Settings()
    Log.configure(settings.log_level)
    stop_event = threading.Event()
    install_shutdown_handler(stop_event)
    init_pool(settings)
    broker = BrokerConnection(settings)

    try:
        try:
            handler = build_handler(settings, broker)
        except Exception as exc:
            Log.critical(f"Cannot start worker: {exc}")
            sys.exit(1)
        consumer = MessageConsumer(
            broker,
            runner_factory=partial(
                MessageRunner, max_delivery_attempts=settings.max_delivery_attempts
            ),
            drain_timeout=settings.broker_drain_timeout_seconds,
        )
        StageWorker(consumer, handler, settings).run(stop_event)
    finally:
        broker.close()
        close_pool()


def ocr_worker() -> None:
    run_stage(build_ocr_stage)


def genai_worker() -> None:
    run_stage(build_genai_stage)


def indexing_worker() -> None:
    run_stage(build_indexing_stage)


def batch_worker() -> None:
    """Entry point for the daily access-count import."""
    settings = Settings()
    Log.configure(settings.log_level)
    stop_event = threading.Event()
    install_shutdown_handler(stop_event)
    init_pool(settings)

    try:
        importer = AccessLogImporter(DocumentRepository(), settings)
        BatchWorker(importer, settings).run(stop_event)
    finally:
        close_pool()


WORKERS: dict[str, Callable[[], None]] = {
    "ocr": ocr_worker,
    "genai": genai_worker,
    "indexing": indexing_worker,
    "batch": batch_worker,
}


def main() -> None:
    """Run the worker named by the first argument: ocr, genai, indexing or batch."""
    name = sys.argv[1] if len(sys.argv) > 1 else ""
    worker = WORKERS.get(name)
    if worker is None:
        print(f"usage: python -m docflow.main {{{','.join(WORKERS)}}}", file=sys.stderr)
        sys.exit(2)
    worker()


if __name__ == "__main__":
    main()
