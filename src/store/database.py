"""Database engine and transaction management.

This module owns the SQLAlchemy engine and session factory for one
database URL. All pipeline writes go through ``transaction`` so a storage
fault rolls back the whole invocation and surfaces as BenchStoreError.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.config import BenchConfig
from core.errors import BenchStoreError
from core.logging_config import get_logger
from store.schema import Base

_LOGGER = get_logger(__name__)


class DatabaseManager:
    """Engine, session factory, and schema bootstrap for one database."""

    def __init__(self, config: BenchConfig) -> None:
        """Create the engine for a configured database URL.

        Args:
            config: Runtime configuration.

        Raises:
            BenchStoreError: If the engine cannot be created.
        """
        self.database_url = config.database_url
        self._engine = _create_engine(config.database_url, config.echo_sql)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        """Return the SQLAlchemy engine."""
        return self._engine

    def create_tables(self) -> None:
        """Create all pipeline tables that do not exist yet.

        Raises:
            BenchStoreError: If schema creation fails.
        """
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as error:
            _LOGGER.error("database_init_failed", database_url=self.database_url, error=str(error))
            raise BenchStoreError(
                f"Failed to create tables for {self.database_url}: {error}. "
                "Check the database URL and permissions."
            ) from error
        _LOGGER.info("database_initialized", database_url=self.database_url)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session inside one transaction.

        The transaction commits when the block exits normally and rolls
        back on any exception, leaving prior committed state intact.

        Raises:
            BenchStoreError: If the storage engine reports a failure.
        """
        session = self._session_factory()
        try:
            with session.begin():
                yield session
        except SQLAlchemyError as error:
            _LOGGER.error("transaction_failed", database_url=self.database_url, error=str(error))
            raise BenchStoreError(
                f"Storage transaction failed: {error}. No changes were committed."
            ) from error
        finally:
            session.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()


def _create_engine(database_url: str, echo_sql: bool) -> Engine:
    """Create an engine, preparing SQLite files and pragmas.

    Args:
        database_url: SQLAlchemy database URL.
        echo_sql: Whether to log emitted SQL.

    Returns:
        Configured engine.
    """
    try:
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(url, echo=echo_sql)
    except (SQLAlchemyError, ValueError) as error:
        raise BenchStoreError(
            f"Invalid database URL '{database_url}': {error}. "
            "Set BENCHDB_DATABASE_URL to a valid SQLAlchemy URL."
        ) from error
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
