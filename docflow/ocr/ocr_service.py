import threading
from dataclasses import dataclass

from docflow.logging.logger import Log
from docflow.ocr.tesseract_runner import TesseractCliRunner
from docflow.pdf.base import BasePdfRasterizer
from docflow.pdf.exceptions import PdfRasterizationError
from docflow.worker.handler import check_cancelled


@dataclass(frozen=True)
class OcrResult:
    text: str
    page_count: int


class OcrService:
    """Rasterizes a PDF page by page and OCRs each page in order."""

    def __init__(self, rasterizer: BasePdfRasterizer, runner: TesseractCliRunner) -> None:
        self._rasterizer = rasterizer
        self._runner = runner

    def extract_text(self, pdf_bytes: bytes, stop_event: threading.Event) -> OcrResult:
        """Return the text of every page, one page per line.

        Nothing is returned unless every page succeeded.

        Raises:
            PdfRasterizationError: if the PDF is unreadable or has no pages.
            OcrGenerationError: if Tesseract fails on any page.
            OperationCancelledError: if shutdown is requested mid-document.
        """
        pages: list[str] = []
        for number, png_bytes in enumerate(self._rasterizer.iter_pages(pdf_bytes), start=1):
            check_cancelled(stop_event)
            Log.info(f"Running OCR on page {number}")
            page_text = self._runner.run(png_bytes, stop_event)
            pages.append(page_text.rstrip())

        if not pages:
            raise PdfRasterizationError("PDF has no pages")

        text = "\n".join(pages)
        if not text.strip():
            Log.warning(f"OCR produced no text for {len(pages)} pages")
        Log.info(f"OCR complete: {len(pages)} pages, {len(text)} characters")
        return OcrResult(text=text, page_count=len(pages))
