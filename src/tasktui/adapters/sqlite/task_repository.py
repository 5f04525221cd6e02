"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from typing import Any

from tasktui.adapters.sqlite.utils import now_iso, row_to_dict, to_db_timestamp
from tasktui.exceptions import NotFoundError, StorageError, ValidationError
from tasktui.models import SortKey, Task, TaskCreate, TaskStats, TaskUpdate
from tasktui.repositories import TaskRepository
from tasktui.utils.logger import get_logger

# Sort column and its natural direction for each sort key
_ORDER_COLUMNS: dict[SortKey, tuple[str, str]] = {
    SortKey.CREATED: ("created_at", "ASC"),
    SortKey.DUE_DATE: ("due_date", "ASC"),
    SortKey.PRIORITY: ("priority", "DESC"),
    SortKey.STATUS: ("is_completed", "ASC"),
    SortKey.TITLE: ("title COLLATE NOCASE", "ASC"),
}

# Columns that may be NULL; NULLs always sort last
_NULLABLE_SORT_KEYS = {SortKey.DUE_DATE, SortKey.PRIORITY}


def _order_by_clause(sort_key: SortKey, descending: bool) -> str:
    column, direction = _ORDER_COLUMNS[sort_key]
    if descending:
        direction = "ASC" if direction == "DESC" else "DESC"
    parts = []
    if sort_key in _NULLABLE_SORT_KEYS:
        parts.append(f"{column} IS NULL")
    parts.append(f"{column} {direction}")
    # Tie-break is always ascending so the order is total
    parts.extend(["created_at ASC", "id ASC"])
    return "ORDER BY " + ", ".join(parts)


def _clean_title(title: str) -> str:
    cleaned = title.strip()
    if not cleaned:
        raise ValidationError("Title cannot be empty")
    return cleaned


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository."""

    def __init__(self, connection: sqlite3.Connection):
        """Initialize SQLite task repository.

        Args:
            connection: Open connection with the task schema applied
                (see tasktui.adapters.sqlite.connection.open_database)
        """
        self.connection = connection

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        """Translate sqlite3 failures into StorageError."""
        try:
            yield
        except sqlite3.Error as e:
            get_logger().error("storage failure during %s: %s", action, e)
            raise StorageError(f"Could not {action}: {e}") from e

    def _fetch_row(self, task_id: int) -> dict[str, Any]:
        cursor = self.connection.execute("SELECT * FROM tasks WHERE id = ?", (task_id,))
        row = cursor.fetchone()
        if not row:
            raise NotFoundError(task_id)
        return row_to_dict(row)

    def add(self, task_data: TaskCreate) -> int:
        """Create a new task and return its id."""
        title = _clean_title(task_data.title)
        now = now_iso()

        with self._storage_errors("add task"), self.connection:
            cursor = self.connection.execute(
                """INSERT INTO tasks (
                    title, description, is_completed, due_date, priority,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    title,
                    task_data.description.strip(),
                    False,
                    to_db_timestamp(task_data.due_date) if task_data.due_date else None,
                    int(task_data.priority) if task_data.priority is not None else None,
                    now,
                    now,
                ),
            )
            task_id = cursor.lastrowid

        get_logger().debug("task added: id=%s", task_id)
        return task_id

    def get(self, task_id: int) -> Task:
        """Get a specific task by ID."""
        with self._storage_errors("load task"):
            return Task(**self._fetch_row(task_id))

    def update(self, task_id: int, updates: TaskUpdate) -> Task:
        """Update an existing task; only explicitly set fields change."""
        update_dict = updates.model_dump(exclude_unset=True)

        if "title" in update_dict:
            if update_dict["title"] is None:
                raise ValidationError("Title cannot be empty")
            update_dict["title"] = _clean_title(update_dict["title"])

        with self._storage_errors("update task"), self.connection:
            current = self._fetch_row(task_id)
            now = now_iso()

            values: dict[str, Any] = {}
            for key, value in update_dict.items():
                if key == "due_date":
                    values[key] = to_db_timestamp(value) if value is not None else None
                elif key == "priority":
                    values[key] = int(value) if value is not None else None
                elif key == "description":
                    values[key] = (value or "").strip()
                elif key == "is_completed":
                    completed = bool(value)
                    values[key] = completed
                    if completed and not current["is_completed"]:
                        values["completed_at"] = now
                    elif not completed:
                        values["completed_at"] = None
                else:
                    values[key] = value

            values["updated_at"] = now
            set_clause = ", ".join(f"{key} = ?" for key in values)
            self.connection.execute(
                f"UPDATE tasks SET {set_clause} WHERE id = ?",
                [*values.values(), task_id],
            )
            row = self._fetch_row(task_id)

        get_logger().debug("task updated: id=%s fields=%s", task_id, sorted(update_dict))
        return Task(**row)

    def delete(self, task_id: int) -> None:
        """Delete a task permanently."""
        with self._storage_errors("delete task"), self.connection:
            cursor = self.connection.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            if cursor.rowcount == 0:
                raise NotFoundError(task_id)

        get_logger().debug("task deleted: id=%s", task_id)

    def list_all(
        self, sort_key: SortKey = SortKey.CREATED, descending: bool = False
    ) -> list[Task]:
        """List all tasks in a deterministic total order."""
        query = f"SELECT * FROM tasks {_order_by_clause(sort_key, descending)}"
        with self._storage_errors("list tasks"):
            rows = self.connection.execute(query).fetchall()
        return [Task(**row_to_dict(row)) for row in rows]

    def stats(
        self, now: datetime | None = None, due_soon_days: int = 7
    ) -> TaskStats:
        """Count total, completed, overdue and soon-due tasks."""
        now = now or datetime.now(UTC)
        now_str = to_db_timestamp(now)
        soon_str = to_db_timestamp(now + timedelta(days=due_soon_days))

        with self._storage_errors("compute statistics"):
            row = self.connection.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(is_completed), 0) AS completed,
                    COALESCE(SUM(CASE WHEN is_completed = 0 AND due_date IS NOT NULL
                                      AND due_date < ? THEN 1 ELSE 0 END), 0) AS overdue,
                    COALESCE(SUM(CASE WHEN is_completed = 0 AND due_date IS NOT NULL
                                      AND due_date >= ? AND due_date < ?
                                      THEN 1 ELSE 0 END), 0) AS due_soon
                FROM tasks
                """,
                (now_str, now_str, soon_str),
            ).fetchone()

        return TaskStats(
            total=row["total"],
            completed=row["completed"],
            uncompleted=row["total"] - row["completed"],
            overdue=row["overdue"],
            due_soon=row["due_soon"],
        )
