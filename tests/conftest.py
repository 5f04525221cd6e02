"""Shared test fixtures and configuration.

Keeps the log file out of the real user directories and provides
repositories backed by throwaway SQLite databases.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from tasktui.adapters.sqlite import DatabaseConnection, SqliteTaskRepository

# Fixed "now" used by tests that care about overdue/due-soon counts
NOW = datetime(2024, 11, 20, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path_factory):
    """Send log output to a temp dir and start every test with a fresh logger."""
    import tasktui.utils.logger as logger_mod

    log_dir = tmp_path_factory.mktemp("logs")
    logger_mod._logger = None
    logging.getLogger("tasktui").handlers.clear()

    with patch("tasktui.utils.logger.user_log_dir", return_value=str(log_dir)):
        yield log_dir

    for handler in logging.getLogger("tasktui").handlers:
        handler.close()
    logging.getLogger("tasktui").handlers.clear()
    logger_mod._logger = None


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def db_connection():
    """An in-memory task database with the schema applied."""
    database = DatabaseConnection(":memory:")
    connection = database.open()
    yield connection
    database.close()


@pytest.fixture()
def repo(db_connection):
    return SqliteTaskRepository(db_connection)


@pytest.fixture()
def db_file(tmp_path):
    return tmp_path / "data" / "tasks.db"


@pytest.fixture()
def now():
    return NOW
