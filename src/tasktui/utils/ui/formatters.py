"""Output formatters shared by the CLI and the TUI."""

from datetime import UTC, datetime

from tasktui.models import Priority
from tasktui.utils.dates import END_OF_DAY
from tasktui.utils.ui.console import get_console

PRIORITY_STYLES = {
    Priority.HIGH: "bold red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "white",
}


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console(stderr=True).print(f"[bold red]Error:[/bold red] {message}")


def format_due_date(value: datetime | None, date_format: str = "%Y-%m-%d") -> str:
    """Format a due date in local time, adding HH:MM unless it is END_OF_DAY."""
    if value is None:
        return ""
    local = value.astimezone()
    text = local.strftime(date_format)
    if local.time().replace(microsecond=0) != END_OF_DAY:
        text += local.strftime(" %H:%M")
    return text


def format_relative_time(value: datetime | None, now: datetime | None = None) -> str:
    """Format a past timestamp as relative time."""
    if value is None:
        return ""

    now = now or datetime.now(UTC)
    seconds = (now - value).total_seconds()

    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes}m ago"
    if seconds < 86400:
        hours = int(seconds / 3600)
        return f"{hours}h ago"
    days = int(seconds / 86400)
    return f"{days}d ago"


def priority_style(priority: Priority | None) -> str:
    """Rich style for a task title of the given priority."""
    if priority is None:
        return "white"
    return PRIORITY_STYLES[priority]


def get_progress_bar(completed: int, total: int, width: int = 10) -> str:
    """Render a completion bar using block characters."""
    ratio = completed / total if total else 0
    filled = int(ratio * width)
    return "▓" * filled + "░" * (width - filled)
