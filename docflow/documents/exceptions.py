from docflow.errors import PermanentServiceError, TransientError, ValidationError


class DocumentNotFoundError(PermanentServiceError):
    """Raised when a document referenced by a message does not exist."""


class DocumentStoreError(TransientError):
    """Raised when the document database cannot be read or written."""


class TagValidationError(ValidationError):
    """Raised when a tag name or color is malformed."""
