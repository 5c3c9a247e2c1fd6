from abc import ABC, abstractmethod

from docflow.config.settings import Settings


class BaseDocumentStore(ABC):
    """Contract for all stores holding original document files."""

    @classmethod
    @abstractmethod
    def from_settings(cls, settings: Settings) -> "BaseDocumentStore":
        """Build the store from application settings."""

    @abstractmethod
    def fetch(self, key: str) -> bytes:
        """Read the full content of a stored document.

        Args:
            key: Object key, as carried in the message's ``file_path``.

        Raises:
            ObjectNotFoundError: if no object exists under ``key``.
            StorageError: if the store cannot be read.
        """
