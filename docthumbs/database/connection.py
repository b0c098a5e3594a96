from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from docthumbs.config.settings import Settings


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns the PostgreSQL connection pool.

    The process entry point calls open() and close(); repositories receive the
    Database instance and borrow connections through connection().
    """

    def __init__(self, settings: Settings) -> None:
        self._conninfo = build_conninfo(settings)
        self._max_size = settings.db_pool_max_size
        self._pool: ConnectionPool | None = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        """Create the connection pool. Calling it twice is a no-op."""
        if self._pool is None:
            self._pool = ConnectionPool(
                self._conninfo, min_size=1, max_size=self._max_size, open=True
            )

    def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError("Database is not open. Call open() first.")
        with self._pool.connection() as conn:
            yield conn
