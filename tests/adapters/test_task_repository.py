"""Unit tests for SqliteTaskRepository (task_repository.py)."""

from __future__ import annotations

import sqlite3
from datetime import timedelta

import pytest

from tasktui.adapters.sqlite import DatabaseConnection, SqliteTaskRepository
from tasktui.exceptions import NotFoundError, StorageError, ValidationError
from tasktui.models import Priority, SortKey, TaskCreate, TaskUpdate


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _add(repo, title, **kwargs) -> int:
    return repo.add(TaskCreate(title=title, **kwargs))


def _titles(tasks) -> list[str]:
    return [t.title for t in tasks]


# ---------------------------------------------------------------------------
# add / get
# ---------------------------------------------------------------------------


class TestAdd:
    def test_returns_new_id(self, repo):
        task_id = _add(repo, "Buy milk")
        assert isinstance(task_id, int)
        assert task_id > 0

    def test_new_task_is_open(self, repo):
        task = repo.get(_add(repo, "Buy milk"))
        assert task.title == "Buy milk"
        assert task.is_completed is False
        assert task.completed_at is None
        assert task.description == ""

    def test_timestamps_are_set_and_equal(self, repo):
        task = repo.get(_add(repo, "Buy milk"))
        assert task.created_at is not None
        assert task.created_at.tzinfo is not None
        assert task.updated_at == task.created_at

    def test_title_is_trimmed(self, repo):
        task = repo.get(_add(repo, "  Buy milk  "))
        assert task.title == "Buy milk"

    def test_optional_fields_round_trip(self, repo, now):
        due = now + timedelta(days=2)
        task = repo.get(
            _add(repo, "Report", description="Q4", due_date=due, priority=Priority.HIGH)
        )
        assert task.description == "Q4"
        assert task.due_date == due
        assert task.priority is Priority.HIGH

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_title_rejected(self, repo, title):
        with pytest.raises(ValidationError, match="Title cannot be empty"):
            _add(repo, title)
        assert repo.list_all() == []

    def test_ids_are_never_reused(self, repo):
        first = _add(repo, "A")
        second = _add(repo, "B")
        repo.delete(second)
        third = _add(repo, "C")
        assert first < second < third


class TestGet:
    def test_unknown_id_raises_not_found(self, repo):
        with pytest.raises(NotFoundError) as exc_info:
            repo.get(999)
        assert exc_info.value.task_id == 999
        assert "999" in str(exc_info.value)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_only_set_fields_change(self, repo, now):
        due = now + timedelta(days=1)
        task_id = _add(repo, "Report", description="draft", due_date=due)

        updated = repo.update(task_id, TaskUpdate(title="Final report"))

        assert updated.title == "Final report"
        assert updated.description == "draft"
        assert updated.due_date == due

    def test_explicit_none_clears_due_date(self, repo, now):
        task_id = _add(repo, "Report", due_date=now)
        updated = repo.update(task_id, TaskUpdate(due_date=None))
        assert updated.due_date is None

    def test_explicit_none_clears_priority(self, repo):
        task_id = _add(repo, "Report", priority=Priority.LOW)
        updated = repo.update(task_id, TaskUpdate(priority=None))
        assert updated.priority is None

    def test_updated_at_advances(self, repo):
        task_id = _add(repo, "Report")
        before = repo.get(task_id)
        updated = repo.update(task_id, TaskUpdate(description="more"))
        assert updated.updated_at >= before.updated_at
        assert updated.created_at == before.created_at

    def test_completing_sets_completed_at(self, repo):
        task_id = _add(repo, "Report")
        updated = repo.update(task_id, TaskUpdate(is_completed=True))
        assert updated.is_completed is True
        assert updated.completed_at is not None

    def test_reopening_clears_completed_at(self, repo):
        task_id = _add(repo, "Report")
        repo.update(task_id, TaskUpdate(is_completed=True))
        updated = repo.update(task_id, TaskUpdate(is_completed=False))
        assert updated.is_completed is False
        assert updated.completed_at is None

    def test_blank_title_rejected_and_task_unchanged(self, repo):
        task_id = _add(repo, "Report")
        with pytest.raises(ValidationError):
            repo.update(task_id, TaskUpdate(title="  "))
        assert repo.get(task_id).title == "Report"

    def test_none_title_rejected(self, repo):
        task_id = _add(repo, "Report")
        with pytest.raises(ValidationError):
            repo.update(task_id, TaskUpdate(title=None))

    def test_unknown_id_raises_not_found(self, repo):
        with pytest.raises(NotFoundError):
            repo.update(42, TaskUpdate(title="x"))


class TestToggleCompleted:
    def test_toggle_twice_restores_state(self, repo):
        task_id = _add(repo, "Report")
        assert repo.toggle_completed(task_id).is_completed is True
        assert repo.toggle_completed(task_id).is_completed is False

    def test_unknown_id_raises_not_found(self, repo):
        with pytest.raises(NotFoundError):
            repo.toggle_completed(7)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDelete:
    def test_removes_task(self, repo):
        task_id = _add(repo, "Report")
        repo.delete(task_id)
        with pytest.raises(NotFoundError):
            repo.get(task_id)

    def test_leaves_other_tasks(self, repo):
        keep = _add(repo, "Keep")
        drop = _add(repo, "Drop")
        repo.delete(drop)
        assert [t.id for t in repo.list_all()] == [keep]

    def test_unknown_id_raises_not_found(self, repo):
        with pytest.raises(NotFoundError):
            repo.delete(1)


# ---------------------------------------------------------------------------
# list_all ordering
# ---------------------------------------------------------------------------


class TestListAll:
    def test_empty_store(self, repo):
        assert repo.list_all() == []

    def test_default_is_creation_order(self, repo):
        for title in ["one", "two", "three"]:
            _add(repo, title)
        assert _titles(repo.list_all()) == ["one", "two", "three"]

    def test_creation_order_descending(self, repo):
        for title in ["one", "two", "three"]:
            _add(repo, title)
        assert _titles(repo.list_all(SortKey.CREATED, descending=True)) == [
            "three",
            "two",
            "one",
        ]

    def test_due_date_puts_missing_dates_last(self, repo, now):
        _add(repo, "none")
        _add(repo, "late", due_date=now + timedelta(days=3))
        _add(repo, "soon", due_date=now + timedelta(days=1))

        assert _titles(repo.list_all(SortKey.DUE_DATE)) == ["soon", "late", "none"]
        assert _titles(repo.list_all(SortKey.DUE_DATE, descending=True)) == [
            "late",
            "soon",
            "none",
        ]

    def test_priority_high_first_missing_last(self, repo):
        _add(repo, "none")
        _add(repo, "low", priority=Priority.LOW)
        _add(repo, "high", priority=Priority.HIGH)
        _add(repo, "medium", priority=Priority.MEDIUM)

        assert _titles(repo.list_all(SortKey.PRIORITY)) == [
            "high",
            "medium",
            "low",
            "none",
        ]
        assert _titles(repo.list_all(SortKey.PRIORITY, descending=True)) == [
            "low",
            "medium",
            "high",
            "none",
        ]

    def test_status_open_first(self, repo):
        done = _add(repo, "done")
        _add(repo, "open")
        repo.toggle_completed(done)
        assert _titles(repo.list_all(SortKey.STATUS)) == ["open", "done"]

    def test_title_is_case_insensitive(self, repo):
        _add(repo, "banana")
        _add(repo, "Apple")
        _add(repo, "cherry")
        assert _titles(repo.list_all(SortKey.TITLE)) == ["Apple", "banana", "cherry"]

    def test_ties_broken_by_creation_then_id(self, repo):
        ids = [_add(repo, "same") for _ in range(3)]
        assert [t.id for t in repo.list_all(SortKey.TITLE)] == ids
        # Reversing the primary key keeps the tie-break ascending
        assert [t.id for t in repo.list_all(SortKey.TITLE, descending=True)] == ids

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_order_is_stable_across_calls(self, repo, now, sort_key):
        for i in range(5):
            _add(
                repo,
                f"task {i % 2}",
                due_date=now + timedelta(days=i % 3) if i % 2 else None,
                priority=Priority.MEDIUM if i % 2 else None,
            )
        first = [t.id for t in repo.list_all(sort_key)]
        second = [t.id for t in repo.list_all(sort_key)]
        assert first == second
        assert sorted(first) == sorted(t.id for t in repo.list_all())


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------


class TestStats:
    def test_empty_store(self, repo, now):
        stats = repo.stats(now=now)
        assert stats.total == 0
        assert stats.completed == 0
        assert stats.uncompleted == 0
        assert stats.overdue == 0
        assert stats.due_soon == 0

    def test_completed_plus_uncompleted_is_total(self, repo, now):
        ids = [_add(repo, f"t{i}") for i in range(4)]
        repo.toggle_completed(ids[0])
        stats = repo.stats(now=now)
        assert stats.total == 4
        assert stats.completed + stats.uncompleted == stats.total

    def test_completed_tasks_are_never_overdue(self, repo, now):
        task_id = _add(repo, "late", due_date=now - timedelta(days=3))
        assert repo.stats(now=now).overdue == 1
        repo.toggle_completed(task_id)
        assert repo.stats(now=now).overdue == 0

    def test_task_without_due_date_is_not_overdue(self, repo, now):
        _add(repo, "whenever")
        assert repo.stats(now=now).overdue == 0

    def test_due_soon_window(self, repo, now):
        _add(repo, "inside", due_date=now + timedelta(days=2))
        _add(repo, "outside", due_date=now + timedelta(days=10))
        _add(repo, "past", due_date=now - timedelta(hours=1))

        assert repo.stats(now=now).due_soon == 1
        assert repo.stats(now=now, due_soon_days=14).due_soon == 2


# ---------------------------------------------------------------------------
# Scenario: a short session against the store
# ---------------------------------------------------------------------------


def test_session_scenario(repo, now):
    buy_milk = _add(repo, "Buy milk", due_date=now - timedelta(days=1))
    report = _add(repo, "Write report", due_date=now + timedelta(days=1))

    stats = repo.stats(now=now)
    assert (stats.total, stats.completed, stats.overdue) == (2, 0, 1)

    repo.toggle_completed(buy_milk)
    stats = repo.stats(now=now)
    assert (stats.completed, stats.overdue) == (1, 0)

    repo.delete(report)
    tasks = repo.list_all(SortKey.CREATED)
    assert [t.id for t in tasks] == [buy_milk]


# ---------------------------------------------------------------------------
# Storage failures
# ---------------------------------------------------------------------------


class TestStorageErrors:
    def test_closed_connection_raises_storage_error(self):
        connection = sqlite3.connect(":memory:")
        connection.close()
        repo = SqliteTaskRepository(connection)
        with pytest.raises(StorageError, match="Could not list tasks"):
            repo.list_all()

    def test_missing_table_raises_storage_error(self):
        connection = sqlite3.connect(":memory:")
        connection.row_factory = sqlite3.Row
        repo = SqliteTaskRepository(connection)
        with pytest.raises(StorageError):
            repo.add(TaskCreate(title="x"))
        connection.close()


# ---------------------------------------------------------------------------
# Durability
# ---------------------------------------------------------------------------


class TestWritesAreCommitted:
    """Each mutating call is visible to another connection before returning."""

    @pytest.fixture
    def file_repo(self, db_file):
        database = DatabaseConnection(db_file)
        yield SqliteTaskRepository(database.open())
        database.close()

    @staticmethod
    def _rows_seen_elsewhere(db_file):
        other = sqlite3.connect(db_file)
        try:
            return other.execute(
                "SELECT id, title, is_completed FROM tasks ORDER BY id"
            ).fetchall()
        finally:
            other.close()

    def test_add_update_delete_are_committed(self, file_repo, db_file):
        first = _add(file_repo, "A")
        second = _add(file_repo, "B")
        assert self._rows_seen_elsewhere(db_file) == [(first, "A", 0), (second, "B", 0)]

        file_repo.update(first, TaskUpdate(is_completed=True))
        assert self._rows_seen_elsewhere(db_file)[0] == (first, "A", 1)

        file_repo.delete(second)
        assert self._rows_seen_elsewhere(db_file) == [(first, "A", 1)]

    def test_rejected_update_leaves_no_partial_write(self, file_repo, db_file):
        task_id = _add(file_repo, "A")
        with pytest.raises(ValidationError):
            file_repo.update(task_id, TaskUpdate(title=" ", is_completed=True))
        assert self._rows_seen_elsewhere(db_file) == [(task_id, "A", 0)]
