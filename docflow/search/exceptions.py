from docflow.errors import PermanentServiceError, PipelineError, TransientError


class SearchError(PipelineError):
    """Base exception for search index failures."""


class SearchUnavailableError(SearchError, TransientError):
    """Network failure, timeout or server-side error."""


class SearchIndexError(SearchError, PermanentServiceError):
    """The index rejected the request (HTTP 400, e.g. a mapping conflict)."""


def classify_status(status_code: int, detail: str = "") -> SearchError:
    """Turn a non-2xx search status into the matching exception."""
    if status_code == 400:
        return SearchIndexError(f"Search index rejected request (HTTP 400): {detail}")
    return SearchUnavailableError(f"Search index returned HTTP {status_code}: {detail}")
