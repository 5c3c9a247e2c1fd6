import io
from datetime import datetime, timezone

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docflow.config.settings import Settings
from docflow.messaging.models import DocumentMessage


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings(tmp_path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        storage_backend="local",
        storage_local_root=str(tmp_path / "files"),
        genai_provider="example",
        batch_input_path=str(tmp_path / "import"),
        batch_archive_path=str(tmp_path / "archive"),
        worker_retry_backoff_seconds=0,
    )


@pytest.fixture()
def document_message() -> DocumentMessage:
    return DocumentMessage(
        document_id=1,
        file_name="a.pdf",
        file_path="obj/a.pdf",
        uploaded_at=datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc),
        correlation_id="corr-1",
    )
