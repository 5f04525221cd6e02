"""Console utilities for tasktui."""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(stderr: bool = False) -> Console:
    """Get a Rich Console instance for consistent output formatting."""
    return Console(stderr=stderr)
