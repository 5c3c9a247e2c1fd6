from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg_pool import ConnectionPool

from docflow.config.settings import Settings
from docflow.logging.logger import Log

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    """Connection string for the document database, with values quoted."""
    return make_conninfo(
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_database,
        user=settings.db_username,
        password=settings.db_password,
        connect_timeout=settings.db_connect_timeout_seconds,
        application_name=f"docflow-{settings.app_env}",
    )


def init_pool(settings: Settings) -> None:
    """Open the global connection pool. An already open pool is replaced."""
    global _pool  # noqa: PLW0603
    if settings.db_pool_min_size > settings.db_pool_max_size:
        raise ValueError(
            f"db_pool_min_size ({settings.db_pool_min_size}) exceeds "
            f"db_pool_max_size ({settings.db_pool_max_size})"
        )
    close_pool()
    _pool = ConnectionPool(
        build_conninfo(settings),
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        name="docflow",
        open=True,
    )
    Log.info(
        f"Database pool opened for {settings.db_host}:{settings.db_port}/{settings.db_database} "
        f"({settings.db_pool_min_size}-{settings.db_pool_max_size} connections)"
    )


def close_pool() -> None:
    """Close the global connection pool."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None
        Log.info("Database pool closed")


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Uncommitted work is rolled back on return."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
