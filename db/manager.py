"""Database manager for SQLite connections, transactions and path management."""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Callable, List, Optional

from config import Config, get_migrations_dir
from errors import PersistenceError
from logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """Manages database connections, write serialization and paths.

    Writes go through ``transaction()``, which holds ``write_lock`` for the
    whole unit of work so that only one writer is active at a time. Reads go
    through ``snapshot()`` on their own connection and only ever see committed
    state.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
        """
        self.config = config
        self.write_lock = threading.RLock()
        self._commit_listeners: List[Callable[[Optional[str]], None]] = []

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self, conn: Optional[sqlite3.Connection] = None, reason: Optional[str] = None):
        """Run a unit of work that commits atomically.

        When ``conn`` is given the caller already owns a transaction and this
        simply joins it. Otherwise a new connection is opened, ``BEGIN
        IMMEDIATE`` is issued, and the work is committed on success or rolled
        back on any exception. Commit listeners run after a commit that changed
        at least one row, while the write lock is still held.

        Args:
            conn: Optional connection of an enclosing transaction.
            reason: Short label handed to commit listeners.

        Yields:
            sqlite3.Connection: Connection inside an open transaction.

        Raises:
            PersistenceError: If SQLite rejects any statement or the commit.
        """
        if conn is not None:
            yield conn
            return

        with self.write_lock:
            with self.connect() as conn:
                changes_before = conn.total_changes
                try:
                    conn.execute("BEGIN IMMEDIATE")
                    yield conn
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    logger.error(f"Transaction rolled back ({reason or 'write'}): {e}")
                    raise PersistenceError(str(e)) from e
                except Exception:
                    conn.rollback()
                    raise

                # The work is committed; a failing listener must not report it as failed.
                if conn.total_changes > changes_before:
                    for listener in list(self._commit_listeners):
                        try:
                            listener(reason)
                        except Exception:
                            logger.exception(f"Commit listener {listener!r} failed ({reason or 'write'})")

    @contextmanager
    def snapshot(self, conn: Optional[sqlite3.Connection] = None):
        """Get a connection whose reads all see the same committed state.

        Args:
            conn: Optional connection to reuse (e.g. inside a write transaction).

        Yields:
            sqlite3.Connection: Connection inside a read transaction.
        """
        if conn is not None:
            yield conn
            return

        with self.connect() as conn:
            conn.execute("BEGIN")
            try:
                yield conn
            finally:
                conn.rollback()

    def add_commit_listener(self, listener: Callable[[Optional[str]], None]) -> None:
        """Register a callable invoked with the transaction reason after each commit."""
        self._commit_listeners.append(listener)

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()
