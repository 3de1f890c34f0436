"""
Database engine and session management.

One Database instance is created by the app factory and shared by the
record store services. Every store operation runs in its own short-lived
session: commit on success, rollback on error, always closed.

Usage:
    database = Database("sqlite:///packing_lists.db")
    database.create_schema()

    with database.session() as session:
        session.add(record)
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from core.exceptions import StoreError
from models.records import Base
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class Database:
    """
    Owns the SQLAlchemy engine and session factory for the record store.

    The engine is created lazily on first use so that importing the app
    never touches the filesystem or network.
    """

    def __init__(self, url: str, echo: bool = False):
        """
        Initialize the database wrapper.

        Args:
            url: SQLAlchemy database URL (e.g. "sqlite:///packing_lists.db")
            echo: Log all SQL statements (debug only)
        """
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._ensure_sqlite_directory()
            logger.info(f"Initializing database engine at {self.url}")
            self._engine = create_engine(self.url, **self._engine_options())
            self._session_factory = sessionmaker(
                bind=self._engine, expire_on_commit=False, class_=Session
            )
        return self._engine

    def _engine_options(self) -> dict:
        options = {"echo": self.echo, "future": True}
        if self.url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty database
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        return options

    def _ensure_sqlite_directory(self) -> None:
        """Create the parent directory of a file-based SQLite database."""
        prefix = "sqlite:///"
        if not self.url.startswith(prefix):
            return
        db_path = self.url[len(prefix):]
        if not db_path or db_path == ":memory:":
            return
        parent_dir = os.path.dirname(os.path.abspath(db_path)) or "."
        os.makedirs(parent_dir, exist_ok=True)

    def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create database schema: {e}") from e
        logger.debug("Database schema ready")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Provide a transactional session scope.

        Yields:
            SQLAlchemy session, committed on normal exit

        Raises:
            StoreError: If the driver raises during the transaction
        """
        # Touch the engine so the session factory exists
        self.engine
        sess = self._session_factory()
        try:
            yield sess
            sess.commit()
        except SQLAlchemyError as e:
            sess.rollback()
            logger.error(f"Database transaction failed: {e}")
            raise StoreError(f"Database operation failed: {e}") from e
        except Exception:
            sess.rollback()
            raise
        finally:
            sess.close()

    def dispose(self) -> None:
        """Release all pooled connections (called at shutdown)."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
