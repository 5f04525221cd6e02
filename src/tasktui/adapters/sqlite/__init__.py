"""SQLite adapter module - Local database storage implementation."""

from tasktui.adapters.sqlite.connection import (
    DatabaseConnection,
    default_db_path,
    open_database,
)
from tasktui.adapters.sqlite.task_repository import SqliteTaskRepository

__all__ = [
    "DatabaseConnection",
    "SqliteTaskRepository",
    "default_db_path",
    "open_database",
]
