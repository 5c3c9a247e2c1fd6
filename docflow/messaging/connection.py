from collections.abc import Callable
from enum import Enum

from kombu import Connection, Queue

from docflow.config.settings import Settings
from docflow.logging.logger import Log
from docflow.messaging.exceptions import BrokerUnavailableError


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"


class BrokerConnection:
    """Owns the worker's broker connection and reconnects it on demand.

    Callers ask for a usable connection with ``ensure_connected()`` before
    every publish or consume. A dropped connection is rebuilt transparently;
    only a failed reconnect surfaces, as ``BrokerUnavailableError``.
    """

    def __init__(
        self,
        settings: Settings,
        connection_factory: Callable[..., Connection] = Connection,
    ) -> None:
        self._url = settings.broker_url
        self._heartbeat = settings.broker_heartbeat_seconds
        self._max_retries = settings.broker_connect_max_retries
        self._connection_factory = connection_factory
        self._connection: Connection | None = None
        self._state = ConnectionState.DISCONNECTED
        self._declared: set[str] = set()

    @property
    def state(self) -> ConnectionState:
        return self._state

    def ensure_connected(self) -> Connection:
        """Return a connected kombu Connection, reconnecting if needed.

        Raises:
            BrokerUnavailableError: if the broker cannot be reached.
        """
        if (
            self._state is ConnectionState.READY
            and self._connection is not None
            and self._connection.connected
        ):
            return self._connection

        self._state = ConnectionState.CONNECTING
        self._declared.clear()
        if self._connection is None:
            self._connection = self._connection_factory(
                self._url, heartbeat=self._heartbeat
            )
        Log.info(f"Connecting to broker at {self._connection.as_uri()}")
        try:
            self._connection.ensure_connection(
                errback=self._on_connect_error,
                max_retries=self._max_retries,
            )
        except Exception as exc:
            self._drop_connection()
            raise BrokerUnavailableError(f"Broker unavailable: {exc}") from exc

        self._state = ConnectionState.READY
        Log.info("Connected to broker")
        return self._connection

    def declare_queue(self, name: str) -> Queue:
        """Declare a durable, shared queue. Safe to call repeatedly."""
        queue = Queue(
            name,
            routing_key=name,
            durable=True,
            exclusive=False,
            auto_delete=False,
        )
        connection = self.ensure_connected()
        if name not in self._declared:
            queue(connection.default_channel).declare()
            self._declared.add(name)
            Log.info(f"Declared queue '{name}'")
        return queue

    def mark_disconnected(self) -> None:
        """Forget the current connection so the next call reconnects."""
        if self._connection is not None:
            Log.warning("Broker connection marked as lost")
        self._drop_connection()

    def close(self) -> None:
        if self._connection is not None:
            Log.info("Closing broker connection")
        self._drop_connection()

    def _drop_connection(self) -> None:
        connection, self._connection = self._connection, None
        self._state = ConnectionState.DISCONNECTED
        self._declared.clear()
        if connection is None:
            return
        try:
            connection.release()
        except Exception as exc:
            Log.warning(f"Error while releasing broker connection: {exc}")

    @staticmethod
    def _on_connect_error(exc: Exception, interval: float) -> None:
        Log.warning(f"Broker connection failed: {exc}. Retrying in {interval}s")
