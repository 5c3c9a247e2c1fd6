import threading
from unittest.mock import MagicMock

import pytest

from docflow.errors import OperationCancelledError
from docflow.ocr.exceptions import OcrGenerationError
from docflow.ocr.ocr_service import OcrService
from docflow.pdf.exceptions import PdfRasterizationError


def _make_service(pages: list[bytes], texts: list[str] | Exception) -> tuple[OcrService, MagicMock]:
    rasterizer = MagicMock()
    rasterizer.iter_pages.return_value = iter(pages)
    runner = MagicMock()
    runner.run.side_effect = texts
    return OcrService(rasterizer, runner), runner


class TestExtractText:
    def test_joins_pages_one_per_line(self) -> None:
        service, _runner = _make_service(
            [b"p1", b"p2", b"p3"], ["first page\n\n", "second page \f", "third"]
        )

        result = service.extract_text(b"%PDF", threading.Event())

        assert result.text == "first page\nsecond page\nthird"
        assert result.page_count == 3

    def test_runs_pages_in_order(self) -> None:
        service, runner = _make_service([b"p1", b"p2"], ["a", "b"])
        stop_event = threading.Event()

        service.extract_text(b"%PDF", stop_event)

        assert [call.args for call in runner.run.call_args_list] == [
            (b"p1", stop_event),
            (b"p2", stop_event),
        ]

    def test_blank_pages_keep_their_line(self) -> None:
        service, _runner = _make_service([b"p1", b"p2", b"p3"], ["a", "   \n", "c"])

        result = service.extract_text(b"%PDF", threading.Event())

        assert result.text == "a\n\nc"

    def test_pdf_without_pages_raises(self) -> None:
        service, _runner = _make_service([], [])

        with pytest.raises(PdfRasterizationError, match="no pages"):
            service.extract_text(b"%PDF", threading.Event())

    def test_page_failure_aborts_document(self) -> None:
        service, runner = _make_service([b"p1", b"p2"], OcrGenerationError("exit 1"))

        with pytest.raises(OcrGenerationError):
            service.extract_text(b"%PDF", threading.Event())

        runner.run.assert_called_once()

    def test_stops_between_pages_on_shutdown(self) -> None:
        stop_event = threading.Event()
        service, runner = _make_service([b"p1", b"p2"], ["a", "b"])
        runner.run.side_effect = lambda *_args: stop_event.set() or "a"

        with pytest.raises(OperationCancelledError):
            service.extract_text(b"%PDF", stop_event)

        runner.run.assert_called_once()
