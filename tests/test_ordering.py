"""
Tests for the ordering rules:
- display order (incomplete band, then completed band)
- prepend for tasks, append for subtasks
- drag-and-drop reorder with full renumbering
- normalize-on-load
"""

import random

import pytest

from scratchpad.core import ordering
from scratchpad.core.exceptions import InvalidInputError
from scratchpad.core.models import Task, Subtask


def make_tasks(*orders, completed=()):
    return [
        Task(
            id=f"t{i}",
            scratchpad_id="pad",
            title=f"Task {i}",
            sort_order=order,
            is_completed=i in completed,
        )
        for i, order in enumerate(orders)
    ]


def ids(items):
    return [item.id for item in items]


# --- Display order ---

def test_display_order_puts_completed_after_incomplete():
    tasks = make_tasks(3, -1, 0, 2, completed={1, 3})

    assert ids(ordering.display_order(tasks)) == ["t2", "t0", "t1", "t3"]


def test_display_order_differs_from_raw_sort_once_something_is_completed():
    tasks = make_tasks(0, 1, 2, completed={0})

    assert ids(ordering.ascending(tasks)) == ["t0", "t1", "t2"]
    assert ids(ordering.display_order(tasks)) == ["t1", "t2", "t0"]


def test_display_order_breaks_ties_deterministically():
    tasks = make_tasks(0, 0, 0)

    assert ids(ordering.display_order(list(reversed(tasks)))) == ["t0", "t1", "t2"]


def test_display_order_works_for_subtasks():
    subtasks = [
        Subtask(id="s0", task_id="t", title="a", sort_order=0, is_completed=True),
        Subtask(id="s1", task_id="t", title="b", sort_order=1),
    ]

    assert ids(ordering.display_order(subtasks)) == ["s1", "s0"]


def test_completion_counts():
    assert ordering.completion_counts(make_tasks(0, 1, 2, completed={0, 2})) == (2, 3)
    assert ordering.completion_counts([]) == (0, 0)


# --- New item placement ---

def test_next_task_order_empty_is_zero():
    assert ordering.next_task_order([]) == 0


def test_next_task_order_prepends_below_minimum():
    assert ordering.next_task_order(make_tasks(3, -2, 5)) == -3


def test_next_task_order_considers_completed_siblings():
    assert ordering.next_task_order(make_tasks(0, -7, completed={1})) == -8


def test_next_subtask_order_empty_is_zero():
    assert ordering.next_subtask_order([]) == 0


def test_next_subtask_order_appends_above_maximum():
    assert ordering.next_subtask_order(make_tasks(0, 4, 2)) == 5


def test_next_scratchpad_order_appends():
    assert ordering.next_scratchpad_order(make_tasks(0, 1)) == 2


# --- Reorder ---

def test_reorder_moves_and_renumbers():
    tasks = make_tasks(-3, -2, -1, 0)

    result = ordering.reorder(tasks, 0, 2)

    assert ids(result) == ["t1", "t2", "t0", "t3"]
    assert [t.sort_order for t in result] == [0, 1, 2, 3]


def test_reorder_move_up():
    tasks = make_tasks(0, 1, 2, 3)

    result = ordering.reorder(tasks, 3, 0)

    assert ids(result) == ["t3", "t0", "t1", "t2"]


def test_reorder_single_element_is_noop():
    tasks = make_tasks(0)

    result = ordering.reorder(tasks, 0, 0)

    assert ids(result) == ["t0"]
    assert result[0].sort_order == 0


def test_reorder_fills_gaps_even_without_movement():
    tasks = make_tasks(-10, 4, 99)

    result = ordering.reorder(tasks, 1, 1)

    assert ids(result) == ["t0", "t1", "t2"]
    assert [t.sort_order for t in result] == [0, 1, 2]


def test_reorder_clamps_destination():
    tasks = make_tasks(0, 1, 2)

    result = ordering.reorder(tasks, 0, 99)

    assert ids(result) == ["t1", "t2", "t0"]


@pytest.mark.parametrize("source", [-1, 3, 10])
def test_reorder_rejects_out_of_range_source(source):
    with pytest.raises(InvalidInputError):
        ordering.reorder(make_tasks(0, 1, 2), source, 0)


def test_reorder_rejects_empty_list():
    with pytest.raises(InvalidInputError):
        ordering.reorder([], 0, 0)


# --- Normalize ---

def test_needs_normalization():
    assert not ordering.needs_normalization(make_tasks(0, 1, 2))
    assert not ordering.needs_normalization([])
    assert ordering.needs_normalization(make_tasks(-1, 0, 1))
    assert ordering.needs_normalization(make_tasks(0, 2, 3))


def test_normalize_rewrites_to_plain_ascending_position():
    tasks = make_tasks(5, -1, 10, completed={0})

    changed = ordering.normalize(tasks)

    assert {t.id: t.sort_order for t in tasks} == {"t1": 0, "t0": 1, "t2": 2}
    assert set(ids(changed)) == {"t0", "t1", "t2"}


def test_normalize_keeps_display_order():
    tasks = make_tasks(-4, 7, -1, 3, completed={1, 2})
    before = ids(ordering.display_order(tasks))

    ordering.normalize(tasks)

    assert ids(ordering.display_order(tasks)) == before


def test_normalize_already_normalized_changes_nothing():
    tasks = make_tasks(0, 1, 2)

    assert ordering.normalize(tasks) == []


# --- Randomized operation sequences ---

def _is_partitioned(displayed):
    flags = [t.is_completed for t in displayed]
    if flags != sorted(flags):
        return False
    for band in (False, True):
        orders = [t.sort_order for t in displayed if t.is_completed == band]
        if orders != sorted(orders):
            return False
    return True


@pytest.mark.parametrize("seed", range(5))
def test_random_operations_keep_display_order_partitioned(seed):
    rng = random.Random(seed)
    tasks = []
    counter = 0

    for _ in range(200):
        op = rng.choice(["add", "add", "toggle", "move", "delete"])
        if op == "add" or not tasks:
            tasks.append(
                Task(
                    id=f"t{counter:04d}",
                    scratchpad_id="pad",
                    title="x",
                    sort_order=ordering.next_task_order(tasks),
                )
            )
            counter += 1
        elif op == "toggle":
            task = rng.choice(tasks)
            task.is_completed = not task.is_completed
        elif op == "move":
            displayed = ordering.display_order(tasks)
            result = ordering.reorder(
                displayed, rng.randrange(len(displayed)), rng.randrange(len(displayed))
            )
            assert sorted(t.sort_order for t in result) == list(range(len(result)))
        else:
            tasks.remove(rng.choice(tasks))

        assert _is_partitioned(ordering.display_order(tasks))
