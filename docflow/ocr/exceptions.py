from docflow.errors import FatalError, TransientError


class OcrError(TransientError):
    """Base exception for OCR failures."""


class OcrGenerationError(OcrError):
    """Raised when Tesseract fails or times out on a page."""


class OcrEngineUnavailableError(FatalError):
    """Raised when the Tesseract executable cannot be started."""
