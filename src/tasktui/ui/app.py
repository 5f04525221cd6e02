"""Textual application hosting the task list interaction loop."""

from __future__ import annotations

from textual import events
from textual.app import App, ComposeResult
from textual.widgets import Static

from tasktui.config import UIConfig
from tasktui.ui.controller import TaskListController
from tasktui.ui.state import Mode
from tasktui.ui.views import render
from tasktui.utils import exit_codes


class TaskManagerApp(App[int]):
    """Full-screen task manager.

    Textual delivers key events one at a time; each is handed to the
    controller, which may call the store, and the screen is redrawn from
    the resulting view state before the next key is read.
    """

    TITLE = "tasktui"

    CSS = """
    Screen {
        background: $background;
        padding: 0 1;
    }

    #body {
        width: 100%;
        height: 1fr;
    }
    """

    def __init__(self, controller: TaskListController, settings: UIConfig | None = None):
        super().__init__()
        self.controller = controller
        self.settings = settings or controller.settings

    def compose(self) -> ComposeResult:
        yield Static("", id="body")

    def on_mount(self) -> None:
        """Load the initial snapshot and draw the first frame."""
        self.controller.reload()
        self.redraw()

    def on_key(self, event: events.Key) -> None:
        """Dispatch a key to the controller and redraw."""
        event.stop()
        event.prevent_default()
        state = self.controller.handle_key(event.key, event.character)
        if state.mode is Mode.EXITING:
            self.exit(exit_codes.SUCCESS)
            return
        self.redraw()

    def redraw(self) -> None:
        self.query_one("#body", Static).update(
            render(self.controller.state, self.settings)
        )
