from kombu import Producer

from docflow.logging.logger import Log
from docflow.messaging.connection import BrokerConnection
from docflow.messaging.exceptions import PublishError
from docflow.messaging.models import DocumentMessage


class MessagePublisher:
    """Publishes DocumentMessages to durable queues on the default exchange."""

    def __init__(self, broker: BrokerConnection, max_retries: int = 3) -> None:
        self._broker = broker
        self._max_retries = max_retries

    def publish(self, queue_name: str, message: DocumentMessage) -> None:
        """Persistently enqueue ``message`` on ``queue_name``.

        Raises:
            BrokerUnavailableError: if the broker cannot be reconnected.
            PublishError: if the publish keeps failing after retries.
        """
        queue = self._broker.declare_queue(queue_name)
        connection = self._broker.ensure_connected()
        try:
            producer = Producer(connection)
            producer.publish(
                message.to_json_bytes(),
                routing_key=queue_name,
                exchange="",
                content_type="application/json",
                content_encoding="utf-8",
                delivery_mode=2,
                correlation_id=message.correlation_id,
                declare=[queue],
                retry=True,
                retry_policy={
                    "max_retries": self._max_retries,
                    "interval_start": 0,
                    "interval_step": 1,
                    "interval_max": 5,
                },
            )
        except Exception as exc:
            self._broker.mark_disconnected()
            raise PublishError(
                f"Failed to publish document {message.document_id} to '{queue_name}': {exc}"
            ) from exc
        Log.info(f"Published document {message.document_id} to '{queue_name}'")
