from docflow.errors import FatalError, TransientError, ValidationError


class MessagingError(TransientError):
    """Base exception for broker-related errors."""


class BrokerUnavailableError(FatalError):
    """Raised when a broker connection cannot be (re)established."""


class PublishError(MessagingError):
    """Raised when a message could not be published after retries."""


class MessageDecodeError(ValidationError):
    """Raised when a delivered body is not a valid DocumentMessage."""
