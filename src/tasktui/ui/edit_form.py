"""Edit buffer for the add/edit task form.

The form keeps raw text per field plus a cursor, and only turns that text
into a TaskCreate/TaskUpdate when the user confirms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from tasktui.exceptions import ValidationError
from tasktui.models import Priority, Task, TaskCreate, TaskUpdate
from tasktui.utils.dates import format_due_input, parse_due_date


class FormField(str, Enum):
    TITLE = "title"
    DESCRIPTION = "description"
    DUE_DATE = "due_date"
    PRIORITY = "priority"


FIELD_ORDER: list[FormField] = list(FormField)

FIELD_LABELS = {
    FormField.TITLE: "Title:",
    FormField.DESCRIPTION: "Description:",
    FormField.DUE_DATE: "Due date:",
    FormField.PRIORITY: "Priority:",
}

PLACEHOLDERS = {
    FormField.TITLE: "My task name",
    FormField.DESCRIPTION: "Optional details",
    FormField.DUE_DATE: "2024-11-23 or 23.11.2024",
    FormField.PRIORITY: "0 none, 1 low, 2 medium, 3 high",
}

# Keys accepted by the priority field
PRIORITY_KEYS: dict[str, Priority | None] = {
    "0": None,
    "1": Priority.LOW,
    "2": Priority.MEDIUM,
    "3": Priority.HIGH,
    "l": Priority.LOW,
    "m": Priority.MEDIUM,
    "h": Priority.HIGH,
}


def _empty_values() -> dict[FormField, str]:
    return {f: "" for f in FIELD_ORDER}


@dataclass
class EditForm:
    """Text buffer behind the add/edit form."""

    task_id: int | None = None
    values: dict[FormField, str] = field(default_factory=_empty_values)
    priority: Priority | None = None
    focused: FormField = FormField.TITLE
    cursor: int = 0
    error: str | None = None

    @classmethod
    def new(cls) -> EditForm:
        return cls()

    @classmethod
    def from_task(cls, task: Task) -> EditForm:
        values = {
            FormField.TITLE: task.title,
            FormField.DESCRIPTION: task.description,
            FormField.DUE_DATE: format_due_input(task.due_date),
            FormField.PRIORITY: task.priority.label if task.priority else "",
        }
        return cls(
            task_id=task.id,
            values=values,
            priority=task.priority,
            cursor=len(task.title),
        )

    @property
    def is_new(self) -> bool:
        return self.task_id is None

    @property
    def text(self) -> str:
        """Text of the focused field."""
        return self.values[self.focused]

    # -------------------- navigation --------------------

    def _focus(self, index: int) -> None:
        index = max(0, min(index, len(FIELD_ORDER) - 1))
        self.focused = FIELD_ORDER[index]
        self.cursor = min(self.cursor, len(self.text))

    def next_field(self) -> None:
        self._focus(FIELD_ORDER.index(self.focused) + 1)

    def previous_field(self) -> None:
        self._focus(FIELD_ORDER.index(self.focused) - 1)

    def move_left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def move_right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.text)

    # -------------------- editing --------------------

    def _set_priority(self, priority: Priority | None) -> None:
        self.priority = priority
        self.values[FormField.PRIORITY] = priority.label if priority else ""
        self.cursor = len(self.values[FormField.PRIORITY])

    def insert(self, char: str) -> None:
        """Insert a character at the cursor of the focused field."""
        self.error = None
        if self.focused is FormField.PRIORITY:
            if char.lower() in PRIORITY_KEYS:
                self._set_priority(PRIORITY_KEYS[char.lower()])
            return
        text = self.text
        self.values[self.focused] = text[: self.cursor] + char + text[self.cursor :]
        self.cursor += len(char)

    def backspace(self) -> None:
        """Delete the character before the cursor."""
        self.error = None
        if self.focused is FormField.PRIORITY:
            self._set_priority(None)
            return
        if self.cursor == 0:
            return
        text = self.text
        self.values[self.focused] = text[: self.cursor - 1] + text[self.cursor :]
        self.cursor -= 1

    def delete_forward(self) -> None:
        """Delete the character under the cursor."""
        self.error = None
        if self.focused is FormField.PRIORITY:
            self._set_priority(None)
            return
        text = self.text
        if self.cursor < len(text):
            self.values[self.focused] = text[: self.cursor] + text[self.cursor + 1 :]

    # -------------------- conversion --------------------

    def _parsed(self) -> dict:
        title = self.values[FormField.TITLE].strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        return {
            "title": title,
            "description": self.values[FormField.DESCRIPTION].strip(),
            "due_date": parse_due_date(self.values[FormField.DUE_DATE]),
            "priority": self.priority,
        }

    def to_create(self) -> TaskCreate:
        """Build a TaskCreate from the buffer.

        Raises:
            ValidationError: If the title is empty or the due date is invalid
        """
        return TaskCreate(**self._parsed())

    def to_update(self) -> TaskUpdate:
        """Build a TaskUpdate that sets every editable field.

        Raises:
            ValidationError: If the title is empty or the due date is invalid
        """
        return TaskUpdate(**self._parsed())
