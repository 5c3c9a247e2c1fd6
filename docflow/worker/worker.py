import threading

from docflow.config.settings import Settings
from docflow.logging.logger import Log
from docflow.messaging.consumer import MessageConsumer
from docflow.worker.handler import StageHandler


class StageWorker:
    """Consume loop: start up -> consume -> back off on failure -> repeat."""

    def __init__(
        self,
        consumer: MessageConsumer,
        handler: StageHandler,
        settings: Settings,
    ) -> None:
        self._consumer = consumer
        self._handler = handler
        self._backoff = settings.worker_retry_backoff_seconds

    def run(self, stop_event: threading.Event, max_failures: int | None = None) -> None:
        """Keep the consumer alive until stop_event is set or interrupted.

        If max_failures is set, give up after that many failed attempts (for testing).
        """
        Log.info(f"{self._handler.name} worker started on '{self._handler.queue_name}'")
        failures = 0
        started = False
        try:
            while not stop_event.is_set():
                try:
                    if not started:
                        self._handler.on_startup()
                        started = True
                    self._consumer.consume(
                        self._handler.queue_name, self._handler.handle, stop_event
                    )
                except Exception as exc:
                    failures += 1
                    Log.error(
                        f"{self._handler.name} worker failed: {exc}. "
                        f"Retrying in {self._backoff}s"
                    )
                    if max_failures is not None and failures >= max_failures:
                        break
                    if stop_event.wait(self._backoff):
                        break
        except KeyboardInterrupt:
            Log.info(f"{self._handler.name} worker interrupted")
        Log.info(f"{self._handler.name} worker shutting down gracefully")
