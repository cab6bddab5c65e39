"""Storage handle: a SQLAlchemy connection pool over SQLite with ACID helpers."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import QueuePool

from astrotasks.db.schema import SCHEMA_DDL
from astrotasks.errors import StorageError

logger = logging.getLogger(__name__)


def _on_connect(dbapi_connection: sqlite3.Connection, connection_record: Any) -> None:
    dbapi_connection.row_factory = sqlite3.Row
    dbapi_connection.execute("PRAGMA journal_mode = WAL")


class Database:
    """
    SQLite database wrapper backed by a bounded ``QueuePool``.

    Connections are checked out per query (``connection()``) or per unit of
    work (``transaction()``) and always returned to the pool, on success or
    error. The handle is constructed explicitly and passed to repositories.
    """

    def __init__(
        self,
        path: Path | str,
        pool_size: int = 5,
        pool_timeout: float = 30.0,
    ):
        self.path = Path(path)
        self.pool_size = max(1, pool_size)
        self.pool_timeout = pool_timeout
        self.engine = create_engine(
            f"sqlite:///{self.path}",
            poolclass=QueuePool,
            pool_size=self.pool_size,
            max_overflow=0,
            pool_timeout=self.pool_timeout,
            connect_args={"check_same_thread": False},
        )
        event.listen(self.engine, "connect", _on_connect)
        self._closed = False

    # -- connection lifecycle --------------------------------------------------

    def _ensure_dir(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Check a raw DB-API connection out of the pool for the duration of the block."""
        if self._closed:
            raise StorageError("Database is closed")
        self._ensure_dir()
        try:
            conn = self.engine.raw_connection()
        except PoolTimeoutError:
            raise StorageError(
                "Database busy",
                detail=f"no connection available after {self.pool_timeout}s",
            ) from None
        except SQLAlchemyError as e:
            raise StorageError("Database unavailable", detail=str(e)) from e
        try:
            yield conn
        finally:
            # Returns the connection to the pool.
            conn.close()

    def close(self) -> None:
        self._closed = True
        self.engine.dispose()

    def init(self) -> None:
        """Create all tables and indexes (idempotent)."""
        with self.connection() as conn:
            conn.executescript(SCHEMA_DDL)
            conn.commit()

    # -- transaction helpers ---------------------------------------------------

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """ACID transaction: commits on success, rolls back on exception."""
        with self.connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    # -- low-level query helpers -----------------------------------------------

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[dict[str, Any]]:
        with self.connection() as conn:
            row = conn.execute(sql, params).fetchone()
        return dict(row) if row else None

    def fetchall(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self.connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]


@contextmanager
def storage_errors(public_message: str) -> Generator[None, None, None]:
    """Turn driver failures into ``StorageError`` with a caller-safe message."""
    try:
        yield
    except sqlite3.Error as e:
        logger.exception(f"{public_message}: {e}")
        raise StorageError(public_message, detail=str(e)) from e
