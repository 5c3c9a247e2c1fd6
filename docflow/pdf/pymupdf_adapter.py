from collections.abc import Iterator

import pymupdf

from docflow.pdf.base import BasePdfRasterizer
from docflow.pdf.exceptions import PdfRasterizationError


class PyMuPdfRasterizer(BasePdfRasterizer):
    """Renders PDF pages to PNG using PyMuPDF."""

    def iter_pages(self, pdf_bytes: bytes) -> Iterator[bytes]:
        try:
            doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfRasterizationError(f"pymupdf could not open PDF: {exc}") from exc

        with doc:
            for number, page in enumerate(doc, start=1):
                try:
                    png = page.get_pixmap(dpi=self._dpi).tobytes("png")
                except Exception as exc:
                    raise PdfRasterizationError(
                        f"pymupdf could not render page {number}: {exc}"
                    ) from exc
                yield png
