from abc import ABC, abstractmethod
from collections.abc import Iterator


class BasePdfRasterizer(ABC):
    """Contract for all PDF page rasterizers."""

    def __init__(self, dpi: int = 300) -> None:
        self._dpi = dpi

    @abstractmethod
    def iter_pages(self, pdf_bytes: bytes) -> Iterator[bytes]:
        """Render each page of a PDF to PNG, lazily and in page order.

        Args:
            pdf_bytes: Raw PDF file content.

        Yields:
            PNG-encoded page images.

        Raises:
            PdfRasterizationError: if the PDF cannot be opened or a page
                cannot be rendered.
        """
