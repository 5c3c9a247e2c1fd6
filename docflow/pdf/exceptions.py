from docflow.errors import ValidationError


class PdfRasterizationError(ValidationError):
    """Raised when a PDF is unreadable or a page cannot be rendered."""
