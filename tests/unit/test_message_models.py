import json
from datetime import datetime, timezone

import pydantic
import pytest

from docflow.messaging.models import DocumentMessage


def _body(**overrides: object) -> bytes:
    payload: dict[str, object] = {
        "documentId": 1,
        "fileName": "a.pdf",
        "filePath": "obj/a.pdf",
        "uploadedAt": "2025-01-10T12:00:00Z",
        "correlationId": "corr-1",
    }
    payload.update(overrides)
    return json.dumps(payload).encode("utf-8")


class TestDocumentMessageDecode:
    def test_reads_camel_case_fields(self) -> None:
        message = DocumentMessage.from_json_bytes(_body())
        assert message.document_id == 1
        assert message.file_name == "a.pdf"
        assert message.file_path == "obj/a.pdf"
        assert message.uploaded_at == datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        assert message.correlation_id == "corr-1"

    def test_ignores_unknown_fields(self) -> None:
        message = DocumentMessage.from_json_bytes(_body(extra="ignored"))
        assert message.document_id == 1

    def test_generates_correlation_id_when_missing(self) -> None:
        payload = json.loads(_body())
        del payload["correlationId"]
        message = DocumentMessage.from_json_bytes(json.dumps(payload))
        assert len(message.correlation_id) == 32

    def test_missing_required_field_raises(self) -> None:
        payload = json.loads(_body())
        del payload["documentId"]
        with pytest.raises(pydantic.ValidationError):
            DocumentMessage.from_json_bytes(json.dumps(payload))

    def test_non_json_body_raises(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            DocumentMessage.from_json_bytes(b"not json")

    def test_wrong_type_raises(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            DocumentMessage.from_json_bytes(_body(documentId="abc"))


class TestDocumentMessageEncode:
    def test_writes_camel_case_aliases(self, document_message: DocumentMessage) -> None:
        payload = json.loads(document_message.to_json_bytes())
        assert set(payload) == {
            "documentId",
            "fileName",
            "filePath",
            "uploadedAt",
            "correlationId",
        }
        assert payload["uploadedAt"].startswith("2025-01-10T12:00:00")

    def test_is_immutable(self, document_message: DocumentMessage) -> None:
        with pytest.raises(pydantic.ValidationError):
            document_message.document_id = 2  # type: ignore[misc]

    def test_correlation_id_survives_reencoding(self, document_message: DocumentMessage) -> None:
        again = DocumentMessage.from_json_bytes(document_message.to_json_bytes())
        assert again.correlation_id == "corr-1"
