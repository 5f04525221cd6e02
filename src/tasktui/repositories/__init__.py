"""Repository interfaces for tasktui.

Abstract base classes defining the contract for task persistence.
The SQLite implementation lives in tasktui.adapters.sqlite.
"""

from .repository import TaskRepository

__all__ = ["TaskRepository"]
