"""Terminal user interface: state machine, rendering and the Textual shell."""

from tasktui.ui.controller import TaskListController
from tasktui.ui.state import Mode, ViewState

__all__ = ["Mode", "TaskListController", "ViewState"]
