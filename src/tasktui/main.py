"""Main entry point for tasktui."""

from typing import Optional

import typer

from tasktui.adapters.sqlite import SqliteTaskRepository, open_database
from tasktui.commands.decorators import command_wrapper
from tasktui.config import get_config_manager
from tasktui.ui.app import TaskManagerApp
from tasktui.ui.controller import TaskListController
from tasktui.utils import exit_codes

app = typer.Typer(
    name="tasktui",
    help="A terminal task manager backed by a local SQLite database",
    add_completion=False,
)


@app.command()
@command_wrapper
def run(
    db_path: Optional[str] = typer.Argument(
        None, help="Path to the task database (created if missing)"
    ),
) -> None:
    """Open the task list in a full-screen terminal UI."""
    config_manager = get_config_manager()
    settings = config_manager.config.ui
    database = config_manager.resolve_db_path(db_path)

    with open_database(database) as connection:
        controller = TaskListController(SqliteTaskRepository(connection), settings)
        tui = TaskManagerApp(controller, settings)
        tui.run()

    code = tui.return_code or exit_codes.SUCCESS
    if code != exit_codes.SUCCESS:
        raise typer.Exit(code=code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
