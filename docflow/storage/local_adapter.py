from pathlib import Path

from docflow.config.settings import Settings
from docflow.storage.base import BaseDocumentStore
from docflow.storage.exceptions import InvalidObjectKeyError, ObjectNotFoundError, StorageError


class LocalDocumentStore(BaseDocumentStore):
    """Reads documents from a directory tree: {root}/{key}."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalDocumentStore":
        return cls(Path(settings.storage_local_root))

    def fetch(self, key: str) -> bytes:
        path = self._resolve_path(key)
        if not path.is_file():
            raise ObjectNotFoundError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        path = (self._root / key.lstrip("/")).resolve()
        if not path.is_relative_to(self._root):
            raise InvalidObjectKeyError(f"Key '{key}' resolves outside {self._root}")
        return path
