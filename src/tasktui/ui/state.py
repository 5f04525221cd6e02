"""View state of the interaction loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from tasktui.models import SortKey, Task, TaskStats
from tasktui.ui.edit_form import EditForm


class Mode(str, Enum):
    """States of the interaction loop. EXITING is terminal."""

    LISTING = "listing"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"
    EXITING = "exiting"


class MessageLevel(str, Enum):
    INFO = "info"
    ERROR = "error"


@dataclass
class StatusMessage:
    """Transient one-line message, cleared by the next key press."""

    text: str
    level: MessageLevel = MessageLevel.INFO


@dataclass
class ViewState:
    """Everything the renderer needs for one frame.

    ``tasks`` is a read-only snapshot of the store in the current sort order;
    ``selected`` indexes into it.
    """

    mode: Mode = Mode.LISTING
    tasks: list[Task] = field(default_factory=list)
    stats: TaskStats = field(default_factory=TaskStats)
    now: datetime = field(default_factory=lambda: datetime.now(UTC))
    selected: int | None = None
    sort_key: SortKey = SortKey.CREATED
    descending: bool = False
    form: EditForm | None = None
    pending_delete: Task | None = None
    status: StatusMessage | None = None

    @property
    def selected_task(self) -> Task | None:
        if self.selected is None or not 0 <= self.selected < len(self.tasks):
            return None
        return self.tasks[self.selected]
