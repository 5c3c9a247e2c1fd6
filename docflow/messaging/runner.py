import threading
from collections.abc import Callable

import pydantic

from docflow.errors import ErrorKind, error_kind
from docflow.logging.logger import Log
from docflow.messaging.exceptions import MessageDecodeError
from docflow.messaging.models import DeliveryAttempt, DeliveryOutcome, DocumentMessage

MessageHandler = Callable[[DocumentMessage, int, threading.Event], None]


class MessageRunner:
    """Run one delivery through a handler and decide how to acknowledge it.

    Decoding failures and validation errors are rejected without requeue,
    permanent service errors are acknowledged, and everything else is
    requeued for redelivery.
    """

    def __init__(self, handler: MessageHandler, max_delivery_attempts: int = 0) -> None:
        self._handler = handler
        self._max_delivery_attempts = max_delivery_attempts

    def run(
        self,
        body: bytes | str,
        delivery_tag: int,
        stop_event: threading.Event,
        delivery_count: int | None = None,
    ) -> DeliveryAttempt:
        """Decode and handle a single delivery."""
        try:
            message = self.decode(body)
        except MessageDecodeError as exc:
            Log.error(f"Dropping malformed message (delivery {delivery_tag}): {exc}")
            return DeliveryAttempt(
                delivery_tag=delivery_tag,
                outcome=DeliveryOutcome.REJECT,
                error_kind=ErrorKind.VALIDATION,
                reason=str(exc),
            )

        with Log.correlation(message.correlation_id):
            Log.info(f"Handling document {message.document_id} (delivery {delivery_tag})")
            try:
                self._handler(message, delivery_tag, stop_event)
            except Exception as exc:
                return self._handle_failure(message, delivery_tag, delivery_count, exc)
            return DeliveryAttempt(
                delivery_tag=delivery_tag,
                outcome=DeliveryOutcome.ACK,
                correlation_id=message.correlation_id,
            )

    @staticmethod
    def decode(body: bytes | str) -> DocumentMessage:
        if not body:
            raise MessageDecodeError("Empty message body")
        try:
            return DocumentMessage.from_json_bytes(body)
        except pydantic.ValidationError as exc:
            raise MessageDecodeError(
                f"Invalid document message ({exc.error_count()} errors): {exc}"
            ) from exc

    def _handle_failure(
        self,
        message: DocumentMessage,
        delivery_tag: int,
        delivery_count: int | None,
        exc: Exception,
    ) -> DeliveryAttempt:
        """Map the error kind to an outcome. Must be called from an except block."""
        kind = error_kind(exc)
        document_id = message.document_id

        if kind is ErrorKind.VALIDATION:
            Log.error(f"Rejecting document {document_id}: invalid input: {exc}")
            outcome = DeliveryOutcome.REJECT
        elif kind is ErrorKind.PERMANENT:
            Log.error(f"Document {document_id} will never succeed, dropping: {exc}")
            outcome = DeliveryOutcome.ACK
        elif kind is ErrorKind.CANCELLED:
            Log.warning(f"Processing of document {document_id} cancelled, requeueing")
            outcome = DeliveryOutcome.REQUEUE
        elif kind is ErrorKind.FATAL:
            Log.exception(f"Fatal error on document {document_id}, requeueing and stopping: {exc}")
            outcome = DeliveryOutcome.REQUEUE
        elif self._exceeds_delivery_limit(delivery_count):
            Log.exception(
                f"Document {document_id} failed on delivery attempt "
                f"{(delivery_count or 0) + 1} of {self._max_delivery_attempts}, rejecting"
            )
            outcome = DeliveryOutcome.REJECT
        else:
            Log.exception(f"Processing of document {document_id} failed, requeueing: {exc}")
            outcome = DeliveryOutcome.REQUEUE

        return DeliveryAttempt(
            delivery_tag=delivery_tag,
            outcome=outcome,
            error_kind=kind,
            reason=str(exc),
            correlation_id=message.correlation_id,
            propagate=exc if kind is ErrorKind.FATAL else None,
        )

    def _exceeds_delivery_limit(self, delivery_count: int | None) -> bool:
        if self._max_delivery_attempts <= 0 or delivery_count is None:
            return False
        return delivery_count + 1 >= self._max_delivery_attempts
