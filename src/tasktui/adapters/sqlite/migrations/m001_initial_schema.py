"""Initial database schema migration: the tasks table and its indexes."""

import sqlite3

from tasktui.adapters.sqlite import schema
from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create initial database schema."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial database schema"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_TASKS_TABLE)
        for index_sql in schema.CREATE_TASK_INDEXES:
            connection.execute(index_sql)


initial_migration = InitialSchemaMigration()
