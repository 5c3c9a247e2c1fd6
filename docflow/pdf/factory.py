from docflow.config.settings import Settings
from docflow.logging.logger import Log
from docflow.pdf.base import BasePdfRasterizer
from docflow.pdf.pdfplumber_adapter import PdfPlumberRasterizer
from docflow.pdf.pymupdf_adapter import PyMuPdfRasterizer

# Accepted range for ocr_render_dpi.
MIN_RENDER_DPI = 72
MAX_RENDER_DPI = 1200


class PdfRasterizerFactory:
    """Picks the page renderer that feeds OCR, at the configured resolution."""

    RASTERIZERS: dict[str, type[BasePdfRasterizer]] = {
        "pdfplumber": PdfPlumberRasterizer,
        "pymupdf": PyMuPdfRasterizer,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRasterizer:
        """Build the rasterizer named by ``pdf_engine``.

        Raises:
            ValueError: if the engine is unknown or ``ocr_render_dpi`` is out of range.
        """
        engine = settings.pdf_engine.strip().lower()
        rasterizer_cls = cls.RASTERIZERS.get(engine)
        if rasterizer_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {sorted(cls.RASTERIZERS)}"
            )
        dpi = settings.ocr_render_dpi
        if not MIN_RENDER_DPI <= dpi <= MAX_RENDER_DPI:
            raise ValueError(
                f"ocr_render_dpi must be between {MIN_RENDER_DPI} and {MAX_RENDER_DPI}, got {dpi}"
            )
        Log.info(f"Rendering PDF pages with {engine} at {dpi} dpi")
        return rasterizer_cls(dpi=dpi)
