"""Task data models."""

from datetime import datetime
from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class Priority(IntEnum):
    """Task priority. Higher value means more important."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class SortKey(str, Enum):
    """Attribute the task list is ordered by."""

    CREATED = "created"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    STATUS = "status"
    TITLE = "title"

    @property
    def label(self) -> str:
        return {
            SortKey.CREATED: "creation time",
            SortKey.DUE_DATE: "due date",
            SortKey.PRIORITY: "priority",
            SortKey.STATUS: "status",
            SortKey.TITLE: "title",
        }[self]


class Task(BaseModel):
    """Task model representing a stored task.

    Attributes:
        id: Unique identifier, assigned by the database and never reused
        title: Short task title (never empty)
        description: Optional free-form details
        is_completed: Completion status
        created_at: Creation timestamp (UTC)
        updated_at: Last update timestamp (UTC)
        completed_at: When the task was last marked completed
        due_date: Optional due date (UTC)
        priority: Optional priority level
    """

    id: int
    title: str
    description: str = ""
    is_completed: bool = False
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None
    due_date: datetime | None = None
    priority: Priority | None = None

    def is_overdue(self, now: datetime) -> bool:
        """Return True if the task is open and its due date has passed."""
        return (
            not self.is_completed and self.due_date is not None and self.due_date < now
        )


class TaskCreate(BaseModel):
    """Model for creating a new task.

    Attributes:
        title: Task title (required, must not be blank)
        description: Optional details
        due_date: Optional due date
        priority: Optional priority level
    """

    title: str
    description: str = ""
    due_date: datetime | None = None
    priority: Priority | None = None


class TaskUpdate(BaseModel):
    """Model for updating an existing task.

    All fields are optional. Only fields that were explicitly set are
    applied, so passing ``due_date=None`` clears the due date while
    omitting it leaves the stored value untouched.
    """

    title: str | None = None
    description: str | None = None
    is_completed: bool | None = None
    due_date: datetime | None = None
    priority: Priority | None = None


class TaskStats(BaseModel):
    """Aggregate counts over the whole task table."""

    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    uncompleted: int = Field(default=0, ge=0)
    overdue: int = Field(default=0, ge=0)
    due_soon: int = Field(default=0, ge=0)
