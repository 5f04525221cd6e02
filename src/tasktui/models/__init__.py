"""Data models for tasktui."""

from tasktui.models.task import (
    Priority,
    SortKey,
    Task,
    TaskCreate,
    TaskStats,
    TaskUpdate,
)

__all__ = [
    "Priority",
    "SortKey",
    "Task",
    "TaskCreate",
    "TaskStats",
    "TaskUpdate",
]
