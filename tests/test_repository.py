"""
Tests for the SQLite repository: CRUD, cascade deletes, transactions.
"""

import sqlite3

import pytest

from scratchpad.core import repository
from scratchpad.core.exceptions import (
    ScratchpadNotFoundError,
    TaskNotFoundError,
    SubtaskNotFoundError,
)
from scratchpad.core.models import Scratchpad, Task, Subtask, TaskNode, ScratchpadNode


@pytest.fixture
def pad():
    return repository.create_scratchpad("Work", "#41B3A3", 0)


def test_database_created_on_first_use(temp_db):
    assert not temp_db.exists()
    repository.list_scratchpads()
    assert temp_db.exists()


def test_create_and_get_scratchpad(pad):
    fetched = repository.get_scratchpad(pad.id)

    assert fetched == pad
    assert fetched.created_at.endswith("Z")


def test_get_missing_returns_none():
    assert repository.get_scratchpad("missing") is None
    assert repository.get_task("missing") is None
    assert repository.get_subtask("missing") is None


def test_list_scratchpads_by_sort_order():
    b = repository.create_scratchpad("B", "#000000", 1)
    a = repository.create_scratchpad("A", "#000000", 0)

    assert [p.id for p in repository.list_scratchpads()] == [a.id, b.id]
    assert repository.count_scratchpads() == 2


def test_task_defaults(pad):
    task = repository.create_task(pad.id, "Write report", "#E27D60", -1, notes="due friday")
    fetched = repository.get_task(task.id)

    assert fetched.title == "Write report"
    assert fetched.notes == "due friday"
    assert fetched.focus_notes == ""
    assert fetched.is_completed is False
    assert fetched.is_expanded is True
    assert fetched.sort_order == -1


def test_task_requires_existing_scratchpad():
    with pytest.raises(sqlite3.IntegrityError):
        repository.create_task("no-such-pad", "Orphan", "#000000")


def test_subtask_requires_existing_task():
    with pytest.raises(sqlite3.IntegrityError):
        repository.create_subtask("no-such-task", "Orphan")


def test_update_task_persists_every_field(pad):
    task = repository.create_task(pad.id, "Draft", "#000000")
    task.title = "Final"
    task.notes = "n"
    task.focus_notes = "# Plan"
    task.is_completed = True
    task.is_expanded = False
    task.color_hex = "#FFFFFF"
    task.sort_order = 7

    repository.update_task(task)

    assert repository.get_task(task.id) == task


def test_update_missing_raises(pad):
    with pytest.raises(ScratchpadNotFoundError):
        repository.update_scratchpad(Scratchpad(id="missing", name="x", color_hex="#000000"))
    with pytest.raises(TaskNotFoundError):
        repository.update_task(Task(id="missing", scratchpad_id=pad.id, title="x"))
    with pytest.raises(SubtaskNotFoundError):
        repository.update_subtask(Subtask(id="missing", task_id="t", title="x"))


def test_delete_scratchpad_cascades(pad):
    other = repository.create_scratchpad("Home", "#000000", 1)
    task = repository.create_task(pad.id, "Task", "#000000")
    subtask = repository.create_subtask(task.id, "Step")
    kept = repository.create_task(other.id, "Keep me", "#000000")

    repository.delete_scratchpad(pad.id)

    assert repository.get_scratchpad(pad.id) is None
    assert repository.get_task(task.id) is None
    assert repository.get_subtask(subtask.id) is None
    assert repository.get_task(kept.id) is not None


def test_delete_missing_scratchpad_raises():
    with pytest.raises(ScratchpadNotFoundError):
        repository.delete_scratchpad("missing")


def test_delete_tasks_cascades_to_subtasks(pad):
    task = repository.create_task(pad.id, "Task", "#000000")
    subtask = repository.create_subtask(task.id, "Step")

    repository.delete_tasks([task.id])

    assert repository.get_task(task.id) is None
    assert repository.get_subtask(subtask.id) is None


def test_delete_tasks_is_all_or_nothing(pad):
    task = repository.create_task(pad.id, "Task", "#000000")

    with pytest.raises(TaskNotFoundError):
        repository.delete_tasks([task.id, "missing"])

    assert repository.get_task(task.id) is not None


def test_delete_missing_subtask_raises():
    with pytest.raises(SubtaskNotFoundError):
        repository.delete_subtask("missing")


def test_update_sort_orders(pad):
    a = repository.create_task(pad.id, "A", "#000000", 0)
    b = repository.create_task(pad.id, "B", "#000000", 1)
    a.sort_order, b.sort_order = 1, 0

    repository.update_sort_orders("tasks", [a, b])

    assert [t.id for t in repository.list_tasks(pad.id)] == [b.id, a.id]


def test_update_sort_orders_rejects_unknown_table():
    with pytest.raises(ValueError):
        repository.update_sort_orders("users", [])


def test_resolve_id_by_prefix():
    repository.insert_graph([
        ScratchpadNode(Scratchpad(id="abc-1", name="One", color_hex="#000000")),
        ScratchpadNode(Scratchpad(id="abc-2", name="Two", color_hex="#000000", sort_order=1)),
        ScratchpadNode(Scratchpad(id="abc", name="Three", color_hex="#000000", sort_order=2)),
    ])

    assert repository.resolve_id("scratchpads", "abc-1") == ["abc-1"]
    assert repository.resolve_id("scratchpads", "ABC-") == ["abc-1", "abc-2"]
    assert repository.resolve_id("scratchpads", "abc") == ["abc"]
    assert repository.resolve_id("scratchpads", "zzz") == []


def test_resolve_id_escapes_wildcards():
    repository.insert_graph([
        ScratchpadNode(Scratchpad(id="a1", name="One", color_hex="#000000")),
    ])

    assert repository.resolve_id("scratchpads", "%") == []
    assert repository.resolve_id("scratchpads", "_1") == []


def test_insert_and_load_graph():
    pad = Scratchpad(id="p1", name="Pad", color_hex="#000000", created_at="2025-01-01T00:00:00Z")
    task = Task(id="t1", scratchpad_id="p1", title="Task", sort_order=0)
    later = Task(id="t2", scratchpad_id="p1", title="Later", sort_order=1, is_completed=True)
    subtasks = [
        Subtask(id="s2", task_id="t1", title="Second", sort_order=1),
        Subtask(id="s1", task_id="t1", title="First", sort_order=0),
    ]
    repository.insert_graph([
        ScratchpadNode(pad, [TaskNode(task, subtasks), TaskNode(later)]),
    ])

    graph = repository.load_graph()

    assert len(graph) == 1
    assert graph[0].scratchpad == pad
    assert [n.task.id for n in graph[0].tasks] == ["t1", "t2"]
    assert [s.id for s in graph[0].tasks[0].subtasks] == ["s1", "s2"]
    assert graph[0].tasks[1].subtasks == []


def test_insert_graph_is_one_transaction():
    pad = Scratchpad(id="p1", name="Pad", color_hex="#000000")
    orphan = Task(id="t1", scratchpad_id="not-inserted", title="Orphan")

    with pytest.raises(sqlite3.IntegrityError):
        repository.insert_graph([ScratchpadNode(pad, [TaskNode(orphan)])])

    assert repository.get_scratchpad("p1") is None
