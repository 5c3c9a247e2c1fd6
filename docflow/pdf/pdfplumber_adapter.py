import io
from collections.abc import Iterator

import pdfplumber

from docflow.pdf.base import BasePdfRasterizer
from docflow.pdf.exceptions import PdfRasterizationError


class PdfPlumberRasterizer(BasePdfRasterizer):
    """Renders PDF pages to PNG using pdfplumber."""

    def iter_pages(self, pdf_bytes: bytes) -> Iterator[bytes]:
        try:
            pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
            pages = pdf.pages
        except Exception as exc:
            raise PdfRasterizationError(f"pdfplumber could not open PDF: {exc}") from exc

        with pdf:
            for number, page in enumerate(pages, start=1):
                try:
                    image = page.to_image(resolution=self._dpi).original
                    buffer = io.BytesIO()
                    image.save(buffer, format="PNG")
                except Exception as exc:
                    raise PdfRasterizationError(
                        f"pdfplumber could not render page {number}: {exc}"
                    ) from exc
                yield buffer.getvalue()
