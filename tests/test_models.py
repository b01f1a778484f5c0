from vaultquery.link import Link
from vaultquery.models import TaskNode


def test_task_status_properties():
    plain = TaskNode(path="a.md", line=0, line_count=1, text="note", symbol="-")
    open_task = TaskNode(path="a.md", line=1, line_count=1, text="todo", symbol="-", status=" ")
    done = TaskNode(path="a.md", line=2, line_count=1, text="done", symbol="-", status="x")

    assert not plain.task and not plain.completed
    assert open_task.task and not open_task.completed
    assert done.task and done.completed
    assert done.id == "a.md:2"


def test_fully_completed_considers_nested_tasks():
    child = TaskNode(path="a.md", line=1, line_count=1, text="sub", symbol="-", status=" ")
    note = TaskNode(path="a.md", line=2, line_count=1, text="aside", symbol="-")
    root = TaskNode(path="a.md", line=0, line_count=1, text="top", symbol="-", status="x", children=[child, note])

    assert not root.fully_completed
    child.status = "x"
    assert root.fully_completed
    assert [n.line for n in root.walk()] == [1, 2]


def test_dict_round_trip():
    raw = {
        "path": "a.md",
        "line": 3,
        "lineCount": 2,
        "text": "two\nlines",
        "symbol": "*",
        "task": True,
        "section": Link.header("a.md", "Plan").to_object(),
        "blockId": "abc",
        "children": [{"path": "a.md", "line": 5, "text": "child", "task": False}],
    }

    node = TaskNode.from_dict(raw)

    assert node.status == " "
    assert node.line_count == 2
    assert node.section == Link.header("a.md", "Plan")
    assert node.children[0].status is None
    assert TaskNode.from_dict(node.to_dict()) == node
