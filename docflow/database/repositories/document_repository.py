from typing import Any

import psycopg
from psycopg.rows import dict_row

from docflow.database.connection import get_connection
from docflow.documents.exceptions import DocumentNotFoundError, DocumentStoreError
from docflow.documents.models import AccessLog, Document, DocumentLog, Tag


class DocumentRepository:
    """Database operations for documents and their tags, logs and access counters."""

    def get_by_id(self, document_id: int) -> Document | None:
        """Load a document aggregate. Returns None if no such document exists.

        Raises:
            DocumentStoreError: if the database cannot be queried.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT id, file_name, file_path, ocr_text, summary,
                               uploaded_at, access_count
                        FROM documents
                        WHERE id = %s
                        """,
                        (document_id,),
                    )
                    row = cur.fetchone()
                    if row is None:
                        return None

                    cur.execute(
                        """
                        SELECT t.name, t.color
                        FROM tags t
                        JOIN document_tags dt ON dt.tag_id = t.id
                        WHERE dt.document_id = %s
                        ORDER BY t.id
                        """,
                        (document_id,),
                    )
                    tag_rows = cur.fetchall()

                    cur.execute(
                        """
                        SELECT id, action, details, timestamp
                        FROM document_logs
                        WHERE document_id = %s
                        ORDER BY timestamp, id
                        """,
                        (document_id,),
                    )
                    log_rows = cur.fetchall()

                    cur.execute(
                        """
                        SELECT date, count
                        FROM access_logs
                        WHERE document_id = %s
                        ORDER BY date
                        """,
                        (document_id,),
                    )
                    access_rows = cur.fetchall()
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to load document {document_id}: {exc}") from exc

        return self._build_document(row, tag_rows, log_rows, access_rows)

    def update(self, document: Document) -> None:
        """Persist OCR text, summary, tags and new log entries.

        A None ``ocr_text`` or ``summary`` leaves the stored value untouched.
        The document row is locked for the duration of the write. Tag links
        are only ever added, so two writers merging tags into the same
        document cannot drop each other's tags.

        Raises:
            DocumentNotFoundError: if the document no longer exists.
            DocumentStoreError: if the database cannot be written.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT id FROM documents WHERE id = %s FOR UPDATE",
                        (document.id,),
                    )
                    if cur.fetchone() is None:
                        conn.rollback()
                        raise DocumentNotFoundError(f"Document {document.id} not found")

                    cur.execute(
                        """
                        UPDATE documents
                        SET ocr_text = COALESCE(%s, ocr_text),
                            summary = COALESCE(%s, summary)
                        WHERE id = %s
                        """,
                        (document.ocr_text, document.summary, document.id),
                    )
                    for tag in document.tags:
                        self._link_tag(cur, document.id, tag)
                    for log in document.logs:
                        if log.id is None:
                            log.id = self._insert_log(cur, document.id, log)
                conn.commit()
        except psycopg.Error as exc:
            raise DocumentStoreError(f"Failed to update document {document.id}: {exc}") from exc

    def apply_access_counts(self, counts: list[tuple[int, int]]) -> list[int]:
        """Add each ``(document_id, count)`` pair to its document's access counter.

        All pairs are applied in one transaction: if any update fails, none
        of them is kept.

        Returns:
            The ids that matched no document, in input order.

        Raises:
            DocumentStoreError: if the database cannot be written.
        """
        missing: list[int] = []
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    for document_id, count in counts:
                        cur.execute(
                            """
                            UPDATE documents
                            SET access_count = access_count + %s
                            WHERE id = %s
                            """,
                            (count, document_id),
                        )
                        if cur.rowcount == 0:
                            missing.append(document_id)
                conn.commit()
        except psycopg.Error as exc:
            raise DocumentStoreError(
                f"Failed to apply {len(counts)} access counts: {exc}"
            ) from exc
        return missing

    @staticmethod
    def _link_tag(cur: psycopg.Cursor[Any], document_id: int, tag: Tag) -> None:
        cur.execute(
            """
            INSERT INTO tags (name, color)
            VALUES (%s, %s)
            ON CONFLICT ((lower(name))) DO UPDATE SET name = tags.name
            RETURNING id
            """,
            (tag.name, tag.color),
        )
        row = cur.fetchone()
        if row is None:
            raise DocumentStoreError(f"Tag '{tag.name}' was not stored")
        cur.execute(
            """
            INSERT INTO document_tags (document_id, tag_id)
            VALUES (%s, %s)
            ON CONFLICT DO NOTHING
            """,
            (document_id, row[0]),
        )

    @staticmethod
    def _insert_log(cur: psycopg.Cursor[Any], document_id: int, log: DocumentLog) -> int:
        cur.execute(
            """
            INSERT INTO document_logs (document_id, timestamp, action, details)
            VALUES (%s, %s, %s, %s)
            RETURNING id
            """,
            (document_id, log.timestamp, log.action, log.details),
        )
        row = cur.fetchone()
        if row is None:
            raise DocumentStoreError(f"Log entry '{log.action}' was not stored")
        return int(row[0])

    @staticmethod
    def _build_document(
        row: dict[str, Any],
        tag_rows: list[dict[str, Any]],
        log_rows: list[dict[str, Any]],
        access_rows: list[dict[str, Any]],
    ) -> Document:
        return Document(
            id=row["id"],
            file_name=row["file_name"],
            file_path=row["file_path"],
            ocr_text=row["ocr_text"],
            summary=row["summary"],
            uploaded_at=row["uploaded_at"],
            access_count=row["access_count"] or 0,
            tags=[Tag(name=r["name"], color=r["color"]) for r in tag_rows],
            logs=[
                DocumentLog(
                    id=r["id"],
                    action=r["action"],
                    details=r["details"],
                    timestamp=r["timestamp"],
                )
                for r in log_rows
            ],
            access_logs=[AccessLog(date=r["date"], count=r["count"]) for r in access_rows],
        )
