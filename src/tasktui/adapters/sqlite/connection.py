"""Database connection management for the local task database.

A connection is opened once at startup and handed explicitly to the
repository. ``open_database`` guarantees it is closed again when the
interaction loop exits, whether normally or through an exception.
"""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from platformdirs import user_data_dir

from tasktui.adapters.sqlite.migrations import MIGRATIONS
from tasktui.adapters.sqlite.migrations.runner import MigrationRunner
from tasktui.exceptions import StorageError
from tasktui.utils.logger import get_logger

IN_MEMORY = ":memory:"


def default_db_path() -> Path:
    """Default database location inside the user data directory."""
    return Path(user_data_dir("tasktui")) / "tasks.db"


class DatabaseConnection:
    """Owns one SQLite connection configured for tasktui.

    Provides:
    - Automatic directory creation
    - Owner-only file permissions for new databases
    - WAL journaling and foreign key enforcement
    - Schema migrations on open
    """

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            db_path = default_db_path()
        self.db_path = db_path if str(db_path) == IN_MEMORY else Path(db_path)
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StorageError("Database connection is not open")
        return self._connection

    def open(self) -> sqlite3.Connection:
        """Open the database and bring its schema up to date.

        Raises:
            StorageError: If the file cannot be opened or is not a usable
                tasktui database
        """
        if self._connection is not None:
            return self._connection

        logger = get_logger()
        try:
            connection = self._connect()
        except (sqlite3.Error, OSError) as e:
            logger.error("failed to open database %s: %s", self.db_path, e)
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e

        try:
            runner = MigrationRunner(connection)
            applied = runner.run_migrations(MIGRATIONS)
            history = runner.get_migration_history()
        except sqlite3.Error as e:
            connection.close()
            logger.error("failed to prepare database %s: %s", self.db_path, e)
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e
        except StorageError:
            connection.close()
            raise

        logger.info(
            "opened database %s (schema version %s, %d migration(s) applied)",
            self.db_path,
            history[-1]["version"] if history else 0,
            applied,
        )
        self._connection = connection
        return connection

    def _connect(self) -> sqlite3.Connection:
        if self.db_path == IN_MEMORY:
            connection = sqlite3.connect(IN_MEMORY)
        else:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            is_new_database = not self.db_path.exists()

            connection = sqlite3.connect(str(self.db_path), timeout=30.0)
            if is_new_database:
                os.chmod(self.db_path, 0o600)

        connection.row_factory = sqlite3.Row
        try:
            connection.execute("PRAGMA foreign_keys = ON")
            connection.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error:
            connection.close()
            raise
        return connection

    def close(self) -> None:
        """Close database connection gracefully."""
        if self._connection is None:
            return
        try:
            self._connection.commit()
            self._connection.close()
        except sqlite3.Error as e:
            get_logger().warning("error while closing database: %s", e)
        finally:
            self._connection = None

    def __enter__(self) -> sqlite3.Connection:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@contextmanager
def open_database(db_path: str | Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open the task database for the duration of a ``with`` block.

    Args:
        db_path: Path to database file. If None, uses default location.

    Yields:
        sqlite3.Connection with the schema applied
    """
    with DatabaseConnection(db_path) as connection:
        yield connection
