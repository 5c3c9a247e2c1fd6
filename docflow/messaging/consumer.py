import socket
import threading
from collections.abc import Callable

from kombu import Consumer
from kombu.message import Message

from docflow.logging.logger import Log
from docflow.messaging.connection import BrokerConnection
from docflow.messaging.exceptions import MessagingError
from docflow.messaging.models import DeliveryAttempt, DeliveryOutcome
from docflow.messaging.runner import MessageHandler, MessageRunner

DELIVERY_COUNT_HEADER = "x-delivery-count"


class MessageConsumer:
    """Drains one queue, one message at a time, with manual acknowledgement."""

    def __init__(
        self,
        broker: BrokerConnection,
        runner_factory: Callable[[MessageHandler], MessageRunner] = MessageRunner,
        drain_timeout: float = 1.0,
    ) -> None:
        self._broker = broker
        self._runner_factory = runner_factory
        self._drain_timeout = drain_timeout

    def consume(
        self,
        queue_name: str,
        handler: MessageHandler,
        stop_event: threading.Event,
    ) -> None:
        """Consume ``queue_name`` until ``stop_event`` is set.

        Raises:
            BrokerUnavailableError: if the broker cannot be reached.
            MessagingError: if the connection drops while consuming.
            Any FATAL error raised by ``handler``, after its message was requeued.
        """
        runner = self._runner_factory(handler)
        queue = self._broker.declare_queue(queue_name)
        connection = self._broker.ensure_connected()

        def on_message(message: Message) -> None:
            attempt = runner.run(
                message.body,
                message.delivery_tag,
                stop_event,
                delivery_count=self._delivery_count(message),
            )
            self._settle(message, attempt)
            if attempt.propagate is not None:
                raise attempt.propagate

        consumer = Consumer(
            connection.default_channel,
            queues=[queue],
            on_message=on_message,
            no_ack=False,
            prefetch_count=1,
        )
        Log.info(f"Consuming from '{queue_name}'")
        try:
            with consumer:
                while not stop_event.is_set():
                    try:
                        connection.drain_events(timeout=self._drain_timeout)
                    except socket.timeout:
                        continue
        except connection.connection_errors as exc:
            self._broker.mark_disconnected()
            raise MessagingError(f"Lost broker connection while consuming '{queue_name}': {exc}") from exc
        Log.info(f"Stopped consuming from '{queue_name}'")

    @staticmethod
    def _settle(message: Message, attempt: DeliveryAttempt) -> None:
        with Log.correlation(attempt.correlation_id):
            if attempt.outcome is DeliveryOutcome.ACK:
                message.ack()
            elif attempt.outcome is DeliveryOutcome.REJECT:
                message.reject(requeue=False)
            else:
                message.requeue()
            reason = f" ({attempt.error_kind.value}: {attempt.reason})" if attempt.error_kind else ""
            Log.info(f"Delivery {attempt.delivery_tag} settled as {attempt.outcome.value}{reason}")

    @staticmethod
    def _delivery_count(message: Message) -> int | None:
        value = (message.headers or {}).get(DELIVERY_COUNT_HEADER)
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None
