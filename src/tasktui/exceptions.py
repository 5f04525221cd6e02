"""Custom exceptions for tasktui."""


class TaskTuiError(Exception):
    """Base exception for all tasktui errors."""


class ValidationError(TaskTuiError):
    """Raised when user-supplied task data is invalid (e.g. an empty title)."""


class NotFoundError(TaskTuiError):
    """Raised when a task id does not exist in the store."""

    def __init__(self, task_id: int):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StorageError(TaskTuiError):
    """Raised when the database cannot be opened, read or written."""
