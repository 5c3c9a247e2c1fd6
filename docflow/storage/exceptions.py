from docflow.errors import FatalError, TransientError, ValidationError


class StorageError(TransientError):
    """Base exception for document store read failures."""


class ObjectNotFoundError(StorageError):
    """Raised when no object exists under the requested key.

    Treated as transient: the upload may not be visible yet.
    """


class InvalidObjectKeyError(ValidationError):
    """Raised when a key points outside the store."""


class StorageUnavailableError(FatalError):
    """Raised when the store client cannot be constructed."""
