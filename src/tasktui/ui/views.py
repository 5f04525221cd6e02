"""Rendering of the interaction loop's view state.

``render`` is a pure function of (ViewState, UIConfig). The current mode
selects one of a closed set of views: the task list with its side panels,
the edit form, or the delete confirmation dialog.
"""

from __future__ import annotations

from collections.abc import Callable

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tasktui.config import UIConfig
from tasktui.models import Task, TaskStats
from tasktui.ui.edit_form import FIELD_LABELS, FIELD_ORDER, PLACEHOLDERS, EditForm
from tasktui.ui.state import MessageLevel, Mode, ViewState
from tasktui.utils.ui.formatters import (
    format_due_date,
    format_relative_time,
    get_progress_bar,
    priority_style,
)

COMMANDS = [
    ("↑/↓ j/k", "move selection"),
    ("Enter/Space", "toggle done"),
    ("a", "add a task"),
    ("e", "edit a task"),
    ("x", "delete a task"),
    ("c", "sort by creation time"),
    ("d", "sort by due date"),
    ("g", "sort by priority"),
    ("s", "sort by status"),
    ("f", "sort by title"),
    ("q", "quit"),
]

CURSOR_STYLE = "black on white"
PLACEHOLDER_STYLE = "grey37"


def render_task_table(state: ViewState, settings: UIConfig) -> RenderableType:
    """Task list with the current selection highlighted."""
    if not state.tasks:
        return Panel(
            Text("No tasks yet. Press 'a' to add one.", style="dim"),
            title="List",
            border_style="blue",
        )

    arrow = "↓" if state.descending else "↑"
    table = Table(
        title=f"Tasks · sorted by {state.sort_key.label} {arrow}",
        box=box.SIMPLE_HEAD,
        expand=True,
    )
    table.add_column("", width=3, no_wrap=True)
    table.add_column("#", justify="right", style="cyan", no_wrap=True)
    table.add_column("Title", ratio=3)
    table.add_column("Priority", no_wrap=True)
    table.add_column("Due", no_wrap=True)
    table.add_column("Created", style="dim", no_wrap=True)

    for index, task in enumerate(state.tasks):
        table.add_row(
            Text("[✓]" if task.is_completed else "[ ]"),
            str(task.id),
            _task_title(task),
            task.priority.label if task.priority else "",
            _due_text(task, state, settings),
            format_relative_time(task.created_at, now=state.now),
            style="bold on dark_green" if index == state.selected else None,
        )
    return Panel(table, title="List", border_style="blue")


def _task_title(task: Task) -> Text:
    style = "dim strike" if task.is_completed else priority_style(task.priority)
    title = Text(task.title, style=style)
    if task.description:
        title.append("\n" + task.description, style="dim")
    return title


def _due_text(task: Task, state: ViewState, settings: UIConfig) -> Text:
    text = format_due_date(task.due_date, settings.date_format)
    if task.is_overdue(state.now):
        return Text(text, style="bold red")
    return Text(text)


def render_commands() -> RenderableType:
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold cyan", no_wrap=True)
    grid.add_column()
    for key, description in COMMANDS:
        grid.add_row(key, description)
    return Panel(grid, title="Commands", border_style="blue")


def render_statistics(stats: TaskStats, settings: UIConfig) -> RenderableType:
    grid = Table.grid(padding=(0, 1))
    grid.add_column()
    grid.add_column(justify="right", style="bold")
    grid.add_row("Total tasks:", str(stats.total))
    grid.add_row("Completed:", str(stats.completed))
    grid.add_row("Uncompleted:", str(stats.uncompleted))
    grid.add_row(f"Due next {settings.due_soon_days} days:", str(stats.due_soon))
    grid.add_row(
        "Overdue:",
        Text(str(stats.overdue), style="bold red" if stats.overdue else ""),
    )
    grid.add_row("Progress:", get_progress_bar(stats.completed, stats.total))
    return Panel(grid, title="Statistics", border_style="blue")


def _form_line(form: EditForm, index: int) -> Text:
    field = FIELD_ORDER[index]
    value = form.values[field]
    focused = form.focused is field
    line = Text(f"{FIELD_LABELS[field]:<13}", style="bold" if focused else "")

    if not value:
        placeholder = PLACEHOLDERS[field]
        if focused:
            line.append(placeholder[:1], style=CURSOR_STYLE)
            line.append(placeholder[1:], style=PLACEHOLDER_STYLE)
        else:
            line.append(placeholder, style=PLACEHOLDER_STYLE)
        return line

    if not focused:
        line.append(value)
        return line

    cursor = min(form.cursor, len(value))
    line.append(value[:cursor])
    line.append(value[cursor : cursor + 1] or " ", style=CURSOR_STYLE)
    line.append(value[cursor + 1 :])
    return line


def render_edit_form(form: EditForm) -> RenderableType:
    lines = [_form_line(form, index) for index in range(len(FIELD_ORDER))]
    lines.append(Text(""))
    if form.error:
        lines.append(Text(form.error, style="bold red"))
        lines.append(Text(""))
    lines.append(Text("Enter - save, Esc - cancel, ↑/↓ - change field", style="dim"))
    title = "Add Task" if form.is_new else f"Edit Task #{form.task_id}"
    return Panel(Group(*lines), title=title, border_style="green")


def render_confirm_delete(task: Task) -> RenderableType:
    body = Text.assemble(
        "Delete task ",
        (f"#{task.id} {task.title}", "bold"),
        "?\n\n",
        ("y", "bold cyan"),
        "/Enter - delete, ",
        ("n", "bold cyan"),
        "/Esc - keep",
    )
    return Panel(body, title="Confirm delete", border_style="red")


def _side_listing(state: ViewState, settings: UIConfig) -> RenderableType:
    return Group(render_commands(), render_statistics(state.stats, settings))


def _side_editing(state: ViewState, settings: UIConfig) -> RenderableType:
    if state.form is None:
        return _side_listing(state, settings)
    return render_edit_form(state.form)


def _side_confirm(state: ViewState, settings: UIConfig) -> RenderableType:
    if state.pending_delete is None:
        return _side_listing(state, settings)
    return render_confirm_delete(state.pending_delete)


SIDE_VIEWS: dict[Mode, Callable[[ViewState, UIConfig], RenderableType]] = {
    Mode.LISTING: _side_listing,
    Mode.EDITING: _side_editing,
    Mode.CONFIRMING_DELETE: _side_confirm,
    Mode.EXITING: _side_listing,
}


def render_status(state: ViewState) -> Text:
    if state.status is None:
        return Text("")
    style = "bold red" if state.status.level is MessageLevel.ERROR else "green"
    return Text(state.status.text, style=style)


def render(state: ViewState, settings: UIConfig | None = None) -> RenderableType:
    """Render one frame for the given view state."""
    settings = settings or UIConfig()
    layout = Table.grid(expand=True)
    layout.add_column(ratio=3)
    layout.add_column(ratio=2)
    layout.add_row(
        render_task_table(state, settings),
        SIDE_VIEWS[state.mode](state, settings),
    )
    return Group(layout, render_status(state))
