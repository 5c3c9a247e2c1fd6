import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docflow.errors import ErrorKind


class DocumentMessage(BaseModel):
    """Broker envelope for one document. Immutable once published."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    document_id: int
    file_name: str
    file_path: str
    uploaded_at: datetime
    correlation_id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_json_bytes(cls, body: bytes | str) -> "DocumentMessage":
        """Parse a broker body. Raises pydantic.ValidationError on malformed input."""
        return cls.model_validate_json(body)


class DeliveryOutcome(str, Enum):
    ACK = "ack"
    REQUEUE = "requeue"
    REJECT = "reject"


@dataclass(frozen=True)
class DeliveryAttempt:
    """Result of handling one delivery. Lives only until the outcome is applied."""

    delivery_tag: int
    outcome: DeliveryOutcome
    error_kind: ErrorKind | None = None
    reason: str = ""
    correlation_id: str = "-"
    propagate: BaseException | None = None
