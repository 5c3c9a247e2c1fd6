from docflow.errors import FatalError, PermanentServiceError, PipelineError, TransientError


class GenAIError(PipelineError):
    """Base exception for generation API failures."""


class GenAIServiceError(GenAIError, TransientError):
    """Network failure, timeout, unexpected status or malformed response."""


class GenAIModelNotFoundError(GenAIError, PermanentServiceError):
    """The provider does not know the requested model."""


class GenAIEmptyResponseError(GenAIError, PermanentServiceError):
    """The model answered with no text."""


class GenAIConfigurationError(GenAIError, FatalError):
    """The client cannot be built from the current settings."""


def classify_status(status_code: int, detail: str = "") -> GenAIError:
    """Turn a non-2xx provider status into the matching exception."""
    if status_code == 404:
        return GenAIModelNotFoundError(f"Model not found (HTTP 404): {detail}")
    return GenAIServiceError(f"Generation API returned HTTP {status_code}: {detail}")
