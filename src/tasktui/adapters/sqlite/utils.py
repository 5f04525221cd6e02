"""Utility functions for SQLite adapter."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any


def to_db_timestamp(value: datetime) -> str:
    """Serialize a datetime for storage.

    Naive values are taken as local time. Everything is stored as UTC with a
    fixed microsecond precision so that stored strings sort chronologically.

    Returns:
        ISO format datetime string, e.g. "2024-01-01T09:30:00.000000+00:00"
    """
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def now_iso() -> str:
    """Get current timestamp in storage format."""
    return to_db_timestamp(datetime.now(UTC))


def row_to_dict(row: Any) -> dict[str, Any]:
    """Convert sqlite3.Row to dictionary.

    Args:
        row: sqlite3.Row object

    Returns:
        Dictionary with column names as keys
    """
    if row is None:
        return {}
    return dict(row)
