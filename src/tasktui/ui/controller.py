"""Key dispatch for the interaction loop.

``TaskListController.handle_key`` is one step of the read-render-dispatch
cycle: it maps a single key event to a store call or a view-state change
and returns the state to render next. It knows nothing about Textual, so it
can be driven directly with key names.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import TypeVar

from tasktui.config import UIConfig
from tasktui.exceptions import TaskTuiError, ValidationError
from tasktui.models import SortKey
from tasktui.repositories import TaskRepository
from tasktui.ui.edit_form import EditForm
from tasktui.ui.state import MessageLevel, Mode, StatusMessage, ViewState
from tasktui.utils.logger import get_logger

T = TypeVar("T")

SORT_KEYS: dict[str, SortKey] = {
    "c": SortKey.CREATED,
    "d": SortKey.DUE_DATE,
    "g": SortKey.PRIORITY,
    "s": SortKey.STATUS,
    "f": SortKey.TITLE,
}


class TaskListController:
    """State machine behind the terminal UI."""

    def __init__(
        self,
        repository: TaskRepository,
        settings: UIConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repository = repository
        self.settings = settings or UIConfig()
        self._clock = clock or (lambda: datetime.now(UTC))
        self.state = ViewState(sort_key=self.settings.default_sort)

        self._listing_keys: dict[str, Callable[[], None]] = {
            "up": self.select_previous,
            "k": self.select_previous,
            "down": self.select_next,
            "j": self.select_next,
            "home": self.select_first,
            "end": self.select_last,
            "left": self.unselect,
            "escape": self.unselect,
            "a": self.start_add,
            "e": self.start_edit,
            "x": self.request_delete,
            "delete": self.request_delete,
            "enter": self.toggle_selected,
            "space": self.toggle_selected,
            "q": self.quit,
        }
        for key, sort_key in SORT_KEYS.items():
            self._listing_keys[key] = lambda sort_key=sort_key: self.set_sort(sort_key)

    # -------------------- snapshot --------------------

    def refresh(self, select_id: int | None = None) -> None:
        """Reload the task snapshot and statistics from the store.

        The selection follows ``select_id`` (or the previously selected task)
        and is clamped to the new list when that task is gone.
        """
        state = self.state
        if select_id is None and state.selected_task is not None:
            select_id = state.selected_task.id

        now = self._clock()
        tasks = self.repository.list_all(state.sort_key, state.descending)
        stats = self.repository.stats(now=now, due_soon_days=self.settings.due_soon_days)

        state.tasks = tasks
        state.stats = stats
        state.now = now

        if not tasks:
            state.selected = None
            return
        if select_id is not None:
            for index, task in enumerate(tasks):
                if task.id == select_id:
                    state.selected = index
                    return
        if state.selected is not None:
            state.selected = min(state.selected, len(tasks) - 1)

    def _store_call(self, action: str, call: Callable[[], T]) -> T | None:
        """Run a store operation, turning failures into a status message."""
        try:
            return call()
        except TaskTuiError as e:
            get_logger().warning("%s failed: %s", action, e)
            self._error(str(e))
            return None

    def reload(self, select_id: int | None = None) -> None:
        """Refresh the snapshot, reporting store failures in the status line."""
        self._store_call("refresh", lambda: self.refresh(select_id))

    def _info(self, text: str) -> None:
        self.state.status = StatusMessage(text, MessageLevel.INFO)

    def _error(self, text: str) -> None:
        self.state.status = StatusMessage(text, MessageLevel.ERROR)

    # -------------------- dispatch --------------------

    def handle_key(self, key: str, character: str | None = None) -> ViewState:
        """Process one key event and return the state to render."""
        mode = self.state.mode
        if mode is Mode.EXITING:
            return self.state

        self.state.status = None
        if mode is Mode.LISTING:
            action = self._listing_keys.get(key)
            if action is not None:
                action()
        elif mode is Mode.EDITING:
            self._handle_editing_key(key, character)
        elif mode is Mode.CONFIRMING_DELETE:
            self._handle_confirm_key(key)
        return self.state

    # -------------------- listing --------------------

    def select_next(self) -> None:
        count = len(self.state.tasks)
        if not count:
            return
        current = self.state.selected
        self.state.selected = 0 if current is None or current >= count - 1 else current + 1

    def select_previous(self) -> None:
        count = len(self.state.tasks)
        if not count:
            return
        current = self.state.selected
        self.state.selected = count - 1 if current is None or current == 0 else current - 1

    def select_first(self) -> None:
        if self.state.tasks:
            self.state.selected = 0

    def select_last(self) -> None:
        if self.state.tasks:
            self.state.selected = len(self.state.tasks) - 1

    def unselect(self) -> None:
        self.state.selected = None

    def set_sort(self, sort_key: SortKey) -> None:
        """Sort by ``sort_key``; choosing the active key again reverses it."""
        state = self.state
        if state.sort_key is sort_key:
            state.descending = not state.descending
        else:
            state.sort_key = sort_key
            state.descending = False
        self.reload()
        direction = "descending" if state.descending else "ascending"
        if state.status is None:
            self._info(f"Sorted by {sort_key.label} ({direction})")

    def start_add(self) -> None:
        self.state.form = EditForm.new()
        self.state.mode = Mode.EDITING

    def start_edit(self) -> None:
        task = self.state.selected_task
        if task is None:
            self._info("Select a task to edit")
            return
        self.state.form = EditForm.from_task(task)
        self.state.mode = Mode.EDITING

    def request_delete(self) -> None:
        task = self.state.selected_task
        if task is None:
            self._info("Select a task to delete")
            return
        self.state.pending_delete = task
        self.state.mode = Mode.CONFIRMING_DELETE

    def toggle_selected(self) -> None:
        task = self.state.selected_task
        if task is None:
            self._info("Select a task first")
            return
        updated = self._store_call(
            "toggle task", lambda: self.repository.toggle_completed(task.id)
        )
        self.reload(task.id)
        if updated is not None and self.state.status is None:
            verb = "completed" if updated.is_completed else "reopened"
            self._info(f"Task {verb}: {updated.title}")

    def quit(self) -> None:
        self.state.mode = Mode.EXITING

    # -------------------- editing --------------------

    def _handle_editing_key(self, key: str, character: str | None) -> None:
        form = self.state.form
        if form is None:
            self.state.mode = Mode.LISTING
            return

        actions: dict[str, Callable[[], None]] = {
            "up": form.previous_field,
            "shift+tab": form.previous_field,
            "down": form.next_field,
            "tab": form.next_field,
            "left": form.move_left,
            "right": form.move_right,
            "home": form.move_home,
            "end": form.move_end,
            "backspace": form.backspace,
            "delete": form.delete_forward,
            "enter": self.save_form,
            "escape": self.cancel_form,
        }
        action = actions.get(key)
        if action is not None:
            action()
        elif character and len(character) == 1 and character.isprintable():
            form.insert(character)

    def cancel_form(self) -> None:
        self.state.form = None
        self.state.mode = Mode.LISTING

    def save_form(self) -> None:
        """Validate the form and write it to the store.

        Invalid input keeps the form open with an inline error; a store
        failure closes it and is reported in the status line.
        """
        form = self.state.form
        if form is None:
            return
        try:
            payload = form.to_create() if form.is_new else form.to_update()
        except ValidationError as e:
            form.error = str(e)
            return

        self.state.form = None
        self.state.mode = Mode.LISTING

        if form.is_new:
            task_id = self._store_call("add task", lambda: self.repository.add(payload))
            message = "Task added"
        else:
            task_id = form.task_id
            updated = self._store_call(
                "update task", lambda: self.repository.update(form.task_id, payload)
            )
            if updated is None:
                task_id = None
            message = "Task updated"

        failed = task_id is None
        self.reload(task_id)
        if not failed and self.state.status is None:
            self._info(message)

    # -------------------- delete confirmation --------------------

    def _handle_confirm_key(self, key: str) -> None:
        if key in ("y", "enter"):
            self.confirm_delete()
        elif key in ("n", "escape"):
            self.cancel_delete()

    def cancel_delete(self) -> None:
        self.state.pending_delete = None
        self.state.mode = Mode.LISTING

    def confirm_delete(self) -> None:
        task = self.state.pending_delete
        self.state.pending_delete = None
        self.state.mode = Mode.LISTING
        if task is None:
            return

        def delete() -> bool:
            self.repository.delete(task.id)
            return True

        deleted = self._store_call("delete task", delete)
        self.reload()
        if deleted and self.state.status is None:
            self._info(f"Deleted: {task.title}")
