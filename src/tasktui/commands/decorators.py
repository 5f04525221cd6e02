"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from tasktui.exceptions import NotFoundError, StorageError, ValidationError
from tasktui.utils import exit_codes
from tasktui.utils.logger import get_logger
from tasktui.utils.ui.formatters import format_error

# Exit code for each known failure, checked in order
ERROR_EXIT_CODES: list[tuple[type[Exception], int]] = [
    (StorageError, exit_codes.ERROR_STORAGE),
    (ValidationError, exit_codes.ERROR_INVALID_ARGS),
    (NotFoundError, exit_codes.ERROR_NOT_FOUND),
]


def exit_code_for(error: Exception) -> int:
    """Map an exception to the process exit code."""
    for error_type, code in ERROR_EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return exit_codes.ERROR_GENERAL


def command_wrapper(func: Callable) -> Callable:
    """Log a command's lifetime and turn failures into diagnostics and exit codes."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except typer.Exit:
            raise

        except (StorageError, ValidationError, NotFoundError) as e:
            elapsed = time.monotonic() - start
            logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
            format_error(str(e))
            raise typer.Exit(code=exit_code_for(e)) from e

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=exit_codes.ERROR_GENERAL) from e

    return wrapper
