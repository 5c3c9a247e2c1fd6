from docflow.config.settings import Settings
from docflow.storage.base import BaseDocumentStore
from docflow.storage.local_adapter import LocalDocumentStore
from docflow.storage.s3_adapter import S3DocumentStore


class DocumentStoreFactory:
    """Creates the correct document store based on settings."""

    ADAPTERS: dict[str, type[BaseDocumentStore]] = {
        "local": LocalDocumentStore,
        "s3": S3DocumentStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDocumentStore:
        backend = settings.storage_backend.lower()
        adapter_cls = cls.ADAPTERS.get(backend)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown storage backend '{backend}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls.from_settings(settings)
