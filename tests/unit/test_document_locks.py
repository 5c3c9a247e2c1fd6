import threading
import time

from docflow.documents.locks import DocumentLocks


class TestDocumentLocks:
    def test_entry_is_dropped_after_release(self) -> None:
        locks = DocumentLocks()

        with locks.hold(1):
            assert len(locks) == 1

        assert len(locks) == 0

    def test_entry_is_dropped_when_body_raises(self) -> None:
        locks = DocumentLocks()

        try:
            with locks.hold(1):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(locks) == 0

    def test_different_documents_do_not_block(self) -> None:
        locks = DocumentLocks()
        entered = threading.Event()

        def other() -> None:
            with locks.hold(2):
                entered.set()

        with locks.hold(1):
            thread = threading.Thread(target=other)
            thread.start()
            assert entered.wait(timeout=2)
        thread.join()

    def test_same_document_is_serialized(self) -> None:
        locks = DocumentLocks()
        order: list[str] = []
        started = threading.Event()

        def second() -> None:
            started.set()
            with locks.hold(1):
                order.append("second")

        with locks.hold(1):
            thread = threading.Thread(target=second)
            thread.start()
            started.wait(timeout=2)
            time.sleep(0.05)
            order.append("first")
        thread.join(timeout=2)

        assert order == ["first", "second"]
        assert len(locks) == 0
