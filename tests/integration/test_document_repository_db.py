import pytest

from docflow.database.repositories.document_repository import DocumentRepository
from docflow.documents.exceptions import DocumentNotFoundError
from docflow.documents.models import Document, Tag


@pytest.mark.integration
class TestDocumentRepositoryRoundTrip:
    def test_get_by_id_returns_seeded_document(self, seed_document: int) -> None:
        document = DocumentRepository().get_by_id(seed_document)

        assert document is not None
        assert document.file_name == "invoice.pdf"
        assert document.ocr_text is None
        assert document.tags == []

    def test_get_by_id_returns_none_when_missing(self, integration_pool: None) -> None:
        assert DocumentRepository().get_by_id(987654321) is None

    def test_update_stores_text_tags_and_logs(self, seed_document: int) -> None:
        repo = DocumentRepository()
        document = repo.get_by_id(seed_document)
        assert document is not None
        document.ocr_text = "Invoice 42"
        document.merge_tags([Tag("Invoice", "#112233")])
        document.add_log("OCR Completed", "1 pages, 10 characters")

        repo.update(document)
        stored = repo.get_by_id(seed_document)

        assert stored is not None
        assert stored.ocr_text == "Invoice 42"
        assert [t.name for t in stored.tags] == ["Invoice"]
        assert [log.action for log in stored.logs] == ["OCR Completed"]
        assert stored.logs[0].id is not None

    def test_stale_copy_does_not_erase_text(self, seed_document: int) -> None:
        repo = DocumentRepository()
        stale = repo.get_by_id(seed_document)
        fresh = repo.get_by_id(seed_document)
        assert stale is not None and fresh is not None
        fresh.ocr_text = "Invoice 42"
        repo.update(fresh)

        stale.summary = "An invoice."
        repo.update(stale)

        stored = repo.get_by_id(seed_document)
        assert stored is not None
        assert stored.ocr_text == "Invoice 42"
        assert stored.summary == "An invoice."

    def test_saving_twice_does_not_duplicate(self, seed_document: int) -> None:
        repo = DocumentRepository()
        document = repo.get_by_id(seed_document)
        assert document is not None
        document.merge_tags([Tag("Receipt", "#445566")])
        document.add_log("Tags Added", "Receipt")

        repo.update(document)
        repo.update(document)

        stored = repo.get_by_id(seed_document)
        assert stored is not None
        assert len(stored.tags) == 1
        assert len(stored.logs) == 1

    def test_tags_are_shared_case_insensitively(
        self, seed_document: int, integration_cleanup: list[int], db_conn
    ) -> None:
        with db_conn.cursor() as cur:
            cur.execute(
                "INSERT INTO documents (file_name, file_path) VALUES ('b.pdf', 'b.pdf') RETURNING id"
            )
            other_id = int(cur.fetchone()[0])
        db_conn.commit()
        integration_cleanup.append(other_id)
        repo = DocumentRepository()
        repo.update(Document(id=seed_document, file_name="", file_path="", tags=[Tag("Contract", "#111111")]))
        repo.update(Document(id=other_id, file_name="", file_path="", tags=[Tag("CONTRACT", "#222222")]))

        first = repo.get_by_id(seed_document)
        second = repo.get_by_id(other_id)

        assert first is not None and second is not None
        assert second.tags == first.tags

    def test_update_of_missing_document_raises(self, integration_pool: None) -> None:
        with pytest.raises(DocumentNotFoundError):
            DocumentRepository().update(Document(id=987654321, file_name="x", file_path="x"))


@pytest.mark.integration
class TestApplyAccessCountsDb:
    def test_adds_to_counter(self, seed_document: int) -> None:
        repo = DocumentRepository()

        assert repo.apply_access_counts([(seed_document, 3), (seed_document, 2)]) == []

        stored = repo.get_by_id(seed_document)
        assert stored is not None
        assert stored.access_count == 5

    def test_unknown_document_is_reported(self, seed_document: int) -> None:
        repo = DocumentRepository()

        missing = repo.apply_access_counts([(987654321, 1), (seed_document, 4)])

        assert missing == [987654321]
        stored = repo.get_by_id(seed_document)
        assert stored is not None
        assert stored.access_count == 4
