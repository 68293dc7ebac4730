"""
Tests for the export document codec: shape, determinism, validation,
and fresh identities on import.
"""

import json
import uuid
from datetime import datetime, timezone

import pytest

from scratchpad.core import codec
from scratchpad.core.exceptions import MalformedDocumentError
from scratchpad.core.models import Scratchpad, Task, Subtask, TaskNode, ScratchpadNode

EXPORTED_AT = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)

PAD_ID = "11111111-1111-4111-8111-111111111111"
TASK_ID = "22222222-2222-4222-8222-222222222222"
SUB_ID = "33333333-3333-4333-8333-333333333333"


def sample_graph():
    pad = Scratchpad(
        id=PAD_ID, name="Café ✓", color_hex="#E8A87C", sort_order=0,
        created_at="2025-01-10T09:00:00Z",
    )
    open_task = Task(
        id=TASK_ID, scratchpad_id=PAD_ID, title="Open", notes="first\nsecond",
        focus_notes="# secret", color_hex="#41B3A3",
        created_at="2025-01-11T09:00:00Z", sort_order=1,
    )
    done_task = Task(
        id=str(uuid.uuid4()), scratchpad_id=PAD_ID, title="Done", is_completed=True,
        color_hex="#E27D60", created_at="2025-01-12T09:00:00Z", sort_order=0,
    )
    subtasks = [
        Subtask(id=SUB_ID, task_id=TASK_ID, title="b", sort_order=1),
        Subtask(id=str(uuid.uuid4()), task_id=TASK_ID, title="a", sort_order=0, is_completed=True),
    ]
    return [ScratchpadNode(pad, [TaskNode(done_task), TaskNode(open_task, subtasks)])]


def valid_document():
    return {
        "version": "1.0",
        "exportedAt": "2025-01-15T10:30:00Z",
        "scratchpads": [
            {
                "id": PAD_ID,
                "name": "Imported",
                "colorHex": "#C38D9E",
                "sortOrder": 0,
                "createdAt": "2025-01-10T11:00:00+02:00",
                "tasks": [
                    {
                        "id": TASK_ID,
                        "title": "Task",
                        "notes": "",
                        "isCompleted": False,
                        "colorHex": "#41B3A3",
                        "createdAt": "2025-01-11T09:00:00Z",
                        "sortOrder": 0,
                        "subtasks": [
                            {"id": SUB_ID, "title": "Step", "isCompleted": True, "sortOrder": 0},
                        ],
                    }
                ],
            }
        ],
    }


def encode(document):
    return json.dumps(document).encode("utf-8")


# --- Export ---

def test_build_document_shape():
    doc = codec.build_document(sample_graph(), EXPORTED_AT)

    assert doc["version"] == "1.0"
    assert doc["exportedAt"] == "2025-01-15T10:30:00Z"
    pad = doc["scratchpads"][0]
    assert set(pad) == {"id", "name", "colorHex", "sortOrder", "createdAt", "tasks"}
    task = pad["tasks"][0]
    assert set(task) == {
        "id", "title", "notes", "isCompleted", "colorHex", "createdAt", "sortOrder", "subtasks",
    }
    assert set(task["subtasks"][0]) == {"id", "title", "isCompleted", "sortOrder"}


def test_build_document_uses_display_order():
    doc = codec.build_document(sample_graph(), EXPORTED_AT)
    tasks = doc["scratchpads"][0]["tasks"]

    assert [t["title"] for t in tasks] == ["Open", "Done"]
    assert [s["title"] for s in tasks[0]["subtasks"]] == ["b", "a"]


def test_focus_notes_not_exported():
    text = codec.export_bytes(sample_graph(), EXPORTED_AT).decode("utf-8")
    assert "secret" not in text
    assert "focus" not in text.lower()


def test_export_bytes_is_deterministic():
    first = codec.export_bytes(sample_graph(), EXPORTED_AT)
    second = codec.export_bytes(sample_graph(), EXPORTED_AT)

    assert first == second


def test_export_bytes_format():
    data = codec.export_bytes(sample_graph(), EXPORTED_AT)
    text = data.decode("utf-8")

    assert text.endswith("}\n")
    assert "Café ✓" in text
    assert text == json.dumps(json.loads(text), indent=2, sort_keys=True, ensure_ascii=False) + "\n"
    assert '\n  "exportedAt"' in text


def test_empty_graph_exports():
    doc = codec.build_document([], EXPORTED_AT)
    assert doc["scratchpads"] == []


# --- Import ---

def test_decode_valid_document():
    graph = codec.decode_document(encode(valid_document()))

    assert len(graph) == 1
    pad = graph[0].scratchpad
    assert pad.name == "Imported"
    assert pad.created_at == "2025-01-10T09:00:00Z"
    task_node = graph[0].tasks[0]
    assert task_node.task.scratchpad_id == pad.id
    assert task_node.subtasks[0].task_id == task_node.task.id
    assert task_node.subtasks[0].is_completed is True


def test_decode_assigns_fresh_ids():
    graph = codec.decode_document(encode(valid_document()))
    node = graph[0]

    ids = {node.scratchpad.id, node.tasks[0].task.id, node.tasks[0].subtasks[0].id}
    assert ids.isdisjoint({PAD_ID, TASK_ID, SUB_ID})
    for value in ids:
        uuid.UUID(value)


def test_decode_sets_defaults_for_fields_not_in_document():
    task = codec.decode_document(encode(valid_document()))[0].tasks[0].task

    assert task.focus_notes == ""
    assert task.is_expanded is True


def test_decode_ignores_unknown_keys():
    document = valid_document()
    document["generator"] = "something else"
    document["scratchpads"][0]["icon"] = "star"
    document["scratchpads"][0]["tasks"][0]["priority"] = 3

    graph = codec.decode_document(encode(document))

    assert graph[0].tasks[0].task.title == "Task"


def test_decode_accepts_text():
    graph = codec.decode_document(json.dumps(valid_document()))
    assert len(graph) == 1


def test_decode_round_trip_of_export():
    data = codec.export_bytes(sample_graph(), EXPORTED_AT)

    graph = codec.decode_document(data)

    assert codec.build_document(graph, EXPORTED_AT)["scratchpads"][0]["name"] == "Café ✓"
    titles = [n.task.title for n in graph[0].tasks]
    assert titles == ["Open", "Done"]


def _break(path, value):
    document = valid_document()
    target = document
    for key in path[:-1]:
        target = target[key]
    if value is KeyError:
        del target[path[-1]]
    else:
        target[path[-1]] = value
    return encode(document)


TASK = ("scratchpads", 0, "tasks", 0)
SUBTASK = TASK + ("subtasks", 0)


@pytest.mark.parametrize(
    "data",
    [
        b'{"foo": 1}',
        b"[]",
        b"not json",
        b"\xff\xfe\x00",
        b"",
        _break(("version",), KeyError),
        _break(("version",), "2.0"),
        _break(("version",), 1.0),
        _break(("exportedAt",), "2025-01-15T10:30:00"),
        _break(("scratchpads",), {}),
        _break(("scratchpads",), [1]),
        _break(("scratchpads", 0, "id"), "not-a-uuid"),
        _break(("scratchpads", 0, "name"), None),
        _break(("scratchpads", 0, "sortOrder"), "0"),
        _break(("scratchpads", 0, "tasks"), KeyError),
        _break(TASK + ("isCompleted",), 1),
        _break(TASK + ("sortOrder",), True),
        _break(TASK + ("sortOrder",), 1.5),
        _break(TASK + ("createdAt",), "last tuesday"),
        _break(TASK + ("notes",), KeyError),
        _break(SUBTASK + ("title",), KeyError),
        _break(SUBTASK + ("isCompleted",), "yes"),
        _break(TASK + ("sortOrder",), 2 ** 63),
        _break(SUBTASK + ("sortOrder",), -(2 ** 63) - 1),
        _break(("scratchpads", 0, "createdAt"), "0001-01-01T00:00:00+01:00"),
        pytest.param(b"[" * 100000 + b"]" * 100000, id="deeply-nested"),
    ],
)
def test_decode_rejects_malformed(data):
    with pytest.raises(MalformedDocumentError):
        codec.decode_document(data)


def test_decode_reports_every_problem():
    document = valid_document()
    del document["scratchpads"][0]["name"]
    document["scratchpads"][0]["tasks"][0]["sortOrder"] = "top"

    with pytest.raises(MalformedDocumentError) as exc_info:
        codec.decode_document(encode(document))

    problems = exc_info.value.problems
    assert "$.scratchpads[0].name is missing" in problems
    assert "$.scratchpads[0].tasks[0].sortOrder must be an integer" in problems


def test_decode_accepts_sort_order_limits():
    document = valid_document()
    document["scratchpads"][0]["sortOrder"] = 2 ** 63 - 1
    document["scratchpads"][0]["tasks"][0]["sortOrder"] = -(2 ** 63)

    graph = codec.decode_document(encode(document))

    assert graph[0].scratchpad.sort_order == 2 ** 63 - 1
    assert graph[0].tasks[0].task.sort_order == -(2 ** 63)


def test_decode_reports_out_of_range_sort_order():
    document = valid_document()
    document["scratchpads"][0]["tasks"][0]["sortOrder"] = 2 ** 63

    with pytest.raises(MalformedDocumentError) as exc_info:
        codec.decode_document(encode(document))

    assert "$.scratchpads[0].tasks[0].sortOrder is out of range" in exc_info.value.problems


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-11T09:00:00.5Z", "2025-01-11T09:00:00.500000Z"),
        ("2025-01-11T09:00:00.123Z", "2025-01-11T09:00:00.123000Z"),
        ("2025-01-11T09:00:00.1234+00:00", "2025-01-11T09:00:00.123400Z"),
    ],
)
def test_decode_accepts_short_fractional_seconds(value, expected):
    document = valid_document()
    document["scratchpads"][0]["createdAt"] = value

    graph = codec.decode_document(encode(document))

    assert graph[0].scratchpad.created_at == expected
