"""Failure taxonomy shared by every pipeline stage.

Each exception carries an ``ErrorKind`` decided where the failure happens.
The message runner reads the kind to choose ack, requeue or reject; it never
inspects exception messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    TRANSIENT = "transient"
    PERMANENT = "permanent"
    FATAL = "fatal"
    CANCELLED = "cancelled"


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    kind: ErrorKind = ErrorKind.TRANSIENT


class ValidationError(PipelineError):
    """Malformed input. Dropped, never retried."""

    kind = ErrorKind.VALIDATION


class TransientError(PipelineError):
    """Infrastructure hiccup. Retried by redelivery."""

    kind = ErrorKind.TRANSIENT


class PermanentServiceError(PipelineError):
    """Upstream said this will never succeed. Logged and acknowledged."""

    kind = ErrorKind.PERMANENT


class FatalError(PipelineError):
    """A client cannot be constructed or reached at all."""

    kind = ErrorKind.FATAL


class OperationCancelledError(PipelineError):
    """Shutdown was requested while a message was in flight."""

    kind = ErrorKind.CANCELLED


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the kind of an exception. Unclassified errors count as transient."""
    if isinstance(exc, PipelineError):
        return exc.kind
    return ErrorKind.TRANSIENT
