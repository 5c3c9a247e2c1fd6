import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from docflow.config.settings import Settings
from docflow.database.connection import close_pool, get_connection, init_pool

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docflow_test")
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        conn = psycopg.connect(
            host=test_settings.db_host,
            port=test_settings.db_port,
            dbname=test_settings.db_database,
            user=test_settings.db_username,
            password=test_settings.db_password,
            connect_timeout=3,
        )
    except psycopg.Error as e:
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run these tests")
    with conn:
        conn.execute(SCHEMA_PATH.read_text())

    init_pool(test_settings)
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[int], None, None]:
    document_ids: list[int] = []
    yield document_ids
    if not document_ids:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            cur.execute("DELETE FROM documents WHERE id = ANY(%s)", (document_ids,))
            cur.execute(
                "DELETE FROM tags t WHERE NOT EXISTS "
                "(SELECT 1 FROM document_tags dt WHERE dt.tag_id = t.id)"
            )
        conn.commit()


@pytest.fixture
def seed_document(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[int],
) -> int:
    with db_conn.cursor() as cur:
        cur.execute(
            """
            INSERT INTO documents (file_name, file_path, ocr_text)
            VALUES (%s, %s, %s)
            RETURNING id
            """,
            ("invoice.pdf", "2025/invoice.pdf", None),
        )
        row = cur.fetchone()
    db_conn.commit()
    assert row is not None
    document_id = int(row[0])
    integration_cleanup.append(document_id)
    return document_id
