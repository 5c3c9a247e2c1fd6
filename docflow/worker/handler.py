import threading
from abc import ABC, abstractmethod

from docflow.errors import OperationCancelledError
from docflow.messaging.models import DocumentMessage


def check_cancelled(stop_event: threading.Event) -> None:
    """Raise OperationCancelledError if shutdown was requested."""
    if stop_event.is_set():
        raise OperationCancelledError("Shutdown requested, abandoning message")


class StageHandler(ABC):
    """Contract for one pipeline stage consuming one queue."""

    name: str = "stage"

    @property
    @abstractmethod
    def queue_name(self) -> str:
        """Queue this stage consumes from."""

    def on_startup(self) -> None:
        """Prepare external resources before consuming. Must be idempotent."""

    @abstractmethod
    def handle(
        self,
        message: DocumentMessage,
        delivery_tag: int,
        stop_event: threading.Event,
    ) -> None:
        """Process one message.

        Returning normally acknowledges the message. Raised exceptions are
        classified by their ErrorKind.
        """
