"""Repository abstraction layer for tasktui.

Repositories hide the persistence backend from the interaction loop, so the
controller only ever talks to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from tasktui.models import SortKey, Task, TaskCreate, TaskStats, TaskUpdate


class TaskRepository(ABC):
    """Abstract base class for task persistence operations.

    Every mutating operation must be durable before it returns.
    """

    @abstractmethod
    def add(self, task_data: TaskCreate) -> int:
        """Create a new task.

        Args:
            task_data: TaskCreate object with task details

        Returns:
            Identifier of the new task

        Raises:
            ValidationError: If the title is empty
        """
        raise NotImplementedError("TaskRepository.add() must be implemented by adapter")

    @abstractmethod
    def get(self, task_id: int) -> Task:
        """Get a specific task by ID.

        Raises:
            NotFoundError: If task does not exist
        """
        raise NotImplementedError("TaskRepository.get() must be implemented by adapter")

    @abstractmethod
    def update(self, task_id: int, updates: TaskUpdate) -> Task:
        """Apply a partial update to a task.

        Args:
            task_id: Task identifier
            updates: Fields to change; unset fields are left alone

        Returns:
            The updated Task

        Raises:
            NotFoundError: If task does not exist
            ValidationError: If an updated title is empty
        """
        raise NotImplementedError(
            "TaskRepository.update() must be implemented by adapter"
        )

    @abstractmethod
    def delete(self, task_id: int) -> None:
        """Permanently delete a task.

        Raises:
            NotFoundError: If task does not exist
        """
        raise NotImplementedError(
            "TaskRepository.delete() must be implemented by adapter"
        )

    @abstractmethod
    def list_all(
        self, sort_key: SortKey = SortKey.CREATED, descending: bool = False
    ) -> list[Task]:
        """List every task ordered by ``sort_key``.

        Ties are broken by creation time and then id, both ascending.
        """
        raise NotImplementedError(
            "TaskRepository.list_all() must be implemented by adapter"
        )

    @abstractmethod
    def stats(
        self, now: datetime | None = None, due_soon_days: int = 7
    ) -> TaskStats:
        """Return aggregate counts over all tasks."""
        raise NotImplementedError(
            "TaskRepository.stats() must be implemented by adapter"
        )

    def toggle_completed(self, task_id: int) -> Task:
        """Flip the completion flag of a task."""
        task = self.get(task_id)
        return self.update(task_id, TaskUpdate(is_completed=not task.is_completed))
