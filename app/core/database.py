"""Embedded SQLite database and the query/update/transaction facade.

The whole application shares ONE in-memory SQLite database. It is created
empty or from a serialized snapshot image, and every feature module talks to
it through three primitives:

    - ``query``: read rows as dictionaries.
    - ``update``: run one write statement, report affected rows and the new id.
    - ``transaction``: run several statements all-or-nothing.

SQLite Configuration Choices:
    - **StaticPool + in-memory URL**: an in-memory database only lives as long
      as its connection, so the pool hands out the very same connection every
      time. A re-entrant lock is held across each primitive, so there is
      never more than one statement or transaction in flight even when
      callers sit on different threads.

    - **Foreign Keys**: disabled by default in SQLite; enabled on connect so
      deleting a party cascades to all of its children.

    - **Explicit BEGIN**: the pysqlite driver normally opens transactions
      lazily and only before DML, which leaves DDL outside of them. Its
      implicit handling is switched off and SQLAlchemy emits BEGIN itself, so
      a migration's ALTER/CREATE/DROP statements roll back with the rest.
"""

import logging
import threading
from collections.abc import Sequence
from typing import Any, NamedTuple

from sqlalchemy import event as sa_event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool

from app.core.config import settings
from app.core.errors import (
    InitializationError,
    QueryError,
    SnapshotError,
    TransactionError,
    UpdateError,
)

logger = logging.getLogger(__name__)


class Statement(NamedTuple):
    """One parameterized statement of a transaction batch."""

    sql: str
    params: Sequence[Any] = ()


class UpdateResult(NamedTuple):
    changes: int
    last_insert_id: int


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure each new DBAPI connection.

    Turns off the driver's implicit transaction management and enables
    foreign key enforcement (must happen outside a transaction).
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def emit_begin(conn):
    """Start every SQLAlchemy transaction with an explicit BEGIN."""
    conn.exec_driver_sql("BEGIN")


def _error_message(error: Exception) -> str:
    orig = getattr(error, "orig", None)
    return str(orig if orig is not None else error)


class Database:
    """Single shared handle on the embedded database.

    Every primitive raises InitializationError when called before ``open()``;
    callers gate on ``is_ready``.
    """

    def __init__(self, url: str = "sqlite://", echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Engine | None = None
        self._lock = threading.RLock()

    @property
    def is_ready(self) -> bool:
        return self.engine is not None

    def open(self, image: bytes | None = None) -> None:
        """Create the database, optionally restoring it from a snapshot image.

        Raises:
            SnapshotError: The image could not be loaded. The handle stays
                closed so the caller can retry with an empty database.
        """
        with self._lock:
            if self.engine is not None:
                self.close()

            engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=self.echo,
            )
            sa_event.listen(engine, "connect", set_sqlite_pragma)
            sa_event.listen(engine, "begin", emit_begin)

            if image is not None:
                try:
                    self._restore(engine, image)
                except Exception as e:
                    engine.dispose()
                    raise SnapshotError(f"Failed to load snapshot: {_error_message(e)}") from e

            self.engine = engine
            logger.info(f"Database opened ({'from snapshot' if image is not None else 'empty'})")

    @staticmethod
    def _restore(engine: Engine, image: bytes) -> None:
        raw = engine.raw_connection()
        try:
            conn = raw.driver_connection
            conn.deserialize(image)
            conn.execute("PRAGMA foreign_keys=ON")
            # A garbage image is only detected on first read
            conn.execute("SELECT COUNT(*) FROM sqlite_master").fetchone()
        finally:
            raw.close()

    def close(self) -> None:
        with self._lock:
            if self.engine is not None:
                self.engine.dispose()
                self.engine = None
                logger.info("Database closed")

    def _require_ready(self) -> Engine:
        if self.engine is None:
            raise InitializationError("Database not initialized")
        return self.engine

    def serialize(self) -> bytes:
        """Return the full database image."""
        with self._lock:
            engine = self._require_ready()
            raw = engine.raw_connection()
            try:
                return raw.driver_connection.serialize()
            finally:
                raw.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a read statement and return its rows as dictionaries."""
        with self._lock:
            engine = self._require_ready()
            try:
                with engine.connect() as conn:
                    result = conn.exec_driver_sql(sql, tuple(params))
                    return [dict(row) for row in result.mappings()]
            except SQLAlchemyError as e:
                raise QueryError(_error_message(e) or "Query execution failed", sql=sql) from e

    def update(self, sql: str, params: Sequence[Any] = ()) -> UpdateResult:
        """Run one write statement in its own transaction."""
        with self._lock:
            engine = self._require_ready()
            try:
                with engine.begin() as conn:
                    result = conn.exec_driver_sql(sql, tuple(params))
                    return UpdateResult(
                        changes=max(result.rowcount, 0),
                        last_insert_id=result.lastrowid or 0,
                    )
            except SQLAlchemyError as e:
                raise UpdateError(_error_message(e) or "Update execution failed", sql=sql) from e

    def transaction(self, statements: Sequence[Statement]) -> None:
        """Run all statements between BEGIN and COMMIT.

        On any failure the whole batch is rolled back and TransactionError is
        raised with the statement that failed.
        """
        with self._lock:
            engine = self._require_ready()
            current = None
            try:
                with engine.begin() as conn:
                    for statement in statements:
                        current = statement.sql
                        conn.exec_driver_sql(statement.sql, tuple(statement.params))
            except SQLAlchemyError as e:
                logger.error(f"Transaction rolled back: {_error_message(e)}")
                raise TransactionError(_error_message(e) or "Transaction failed", sql=current) from e


database = Database(echo=settings.debug)


def get_database() -> Database:
    """Dependency for getting the shared database handle."""
    return database
