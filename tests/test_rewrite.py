"""Tests for rewriting tasks in place."""

from __future__ import annotations

from pathlib import Path

import pytest

from vaultquery.models import TaskNode
from vaultquery.rewrite import FileDocumentStore, MemoryDocumentStore, rewrite_task


@pytest.mark.asyncio
async def test_check_simple_task(shopping_store: MemoryDocumentStore, shopping_task: TaskNode) -> None:
    await rewrite_task(shopping_store, shopping_task, "X")

    assert shopping_store.documents["shopping.md"] == "- [X] buy milk\n"
    assert len(shopping_store.writes) == 1


@pytest.mark.asyncio
async def test_unchanged_status_does_no_io(shopping_store: MemoryDocumentStore, shopping_task: TaskNode) -> None:
    await rewrite_task(shopping_store, shopping_task, " ")
    await rewrite_task(shopping_store, shopping_task, " ", "buy milk")

    assert shopping_store.reads == []
    assert shopping_store.writes == []


@pytest.mark.asyncio
async def test_empty_status_means_unchecked() -> None:
    store = MemoryDocumentStore({"a.md": "- [X] done thing\n"})
    task = TaskNode(path="a.md", line=0, line_count=1, text="done thing", symbol="-", status="X")

    await rewrite_task(store, task, "")

    assert store.documents["a.md"] == "- [ ] done thing\n"


@pytest.mark.asyncio
async def test_stale_text_aborts_without_writing(shopping_task: TaskNode) -> None:
    store = MemoryDocumentStore({"shopping.md": "- [ ] buy bread\n"})

    await rewrite_task(store, shopping_task, "X")

    assert store.reads == ["shopping.md"]
    assert store.writes == []
    assert store.documents["shopping.md"] == "- [ ] buy bread\n"


@pytest.mark.asyncio
async def test_line_beyond_end_aborts() -> None:
    store = MemoryDocumentStore({"a.md": "- [ ] one"})
    task = TaskNode(path="a.md", line=5, line_count=1, text="one", symbol="-", status=" ")

    await rewrite_task(store, task, "X")

    assert store.writes == []


@pytest.mark.asyncio
async def test_line_no_longer_a_list_item_aborts() -> None:
    store = MemoryDocumentStore({"a.md": "# Heading\nbuy milk\n"})
    task = TaskNode(path="a.md", line=1, line_count=1, text="buy milk", symbol="-", status=" ")

    await rewrite_task(store, task, "X")

    assert store.writes == []


@pytest.mark.asyncio
async def test_empty_body_aborts() -> None:
    store = MemoryDocumentStore({"a.md": "- [ ]\n"})
    task = TaskNode(path="a.md", line=0, line_count=1, text="", symbol="-", status=" ")

    await rewrite_task(store, task, "X")

    assert store.writes == []


@pytest.mark.asyncio
async def test_status_only_rewrites_first_line_and_keeps_the_rest() -> None:
    text = "# Plan\n\n  * [ ] draft   \n    more detail\n- [ ] other\n"
    store = MemoryDocumentStore({"plan.md": text})
    task = TaskNode(
        path="plan.md", line=2, line_count=2, text="draft\nmore detail", symbol="*", status=" "
    )

    await rewrite_task(store, task, "x")

    assert store.documents["plan.md"] == "# Plan\n\n  * [x] draft\n    more detail\n- [ ] other\n"


@pytest.mark.asyncio
async def test_empty_replacement_text_rewrites_status_only() -> None:
    text = "- [ ] draft\n\tmore detail\n- [ ] other\n"
    store = MemoryDocumentStore({"plan.md": text})
    task = TaskNode(
        path="plan.md", line=0, line_count=2, text="draft\nmore detail", symbol="-", status=" "
    )

    await rewrite_task(store, task, "X", "")

    assert store.documents["plan.md"] == "- [X] draft\n\tmore detail\n- [ ] other\n"


@pytest.mark.asyncio
async def test_replacement_text_splices_line_count_lines() -> None:
    text = "# Tasks\n\t- [ ] first part\n\tsecond part\n- [ ] other\n"
    store = MemoryDocumentStore({"t.md": text})
    task = TaskNode(
        path="t.md", line=1, line_count=2, text="first part\nsecond part", symbol="-", status=" "
    )

    await rewrite_task(store, task, "X", "a\nb\nc")

    assert store.documents["t.md"] == "# Tasks\n\t- [X] a\n\t\tb\n\t\tc\n- [ ] other\n"


@pytest.mark.asyncio
async def test_shorter_replacement_text_shrinks_the_note() -> None:
    text = "- [ ] one\n\ttwo\n\tthree\n- [ ] next\n"
    store = MemoryDocumentStore({"t.md": text})
    task = TaskNode(path="t.md", line=0, line_count=3, text="one\ntwo\nthree", symbol="-", status=" ")

    await rewrite_task(store, task, " ", "single")

    assert store.documents["t.md"] == "- [ ] single\n- [ ] next\n"


@pytest.mark.asyncio
async def test_replacement_text_with_same_status_still_writes(shopping_store, shopping_task) -> None:
    await rewrite_task(shopping_store, shopping_task, " ", "buy oat milk")

    assert shopping_store.documents["shopping.md"] == "- [ ] buy oat milk\n"


@pytest.mark.asyncio
async def test_numbered_items_and_plain_list_items() -> None:
    store = MemoryDocumentStore({"n.md": "1. [ ] step one\n2) plain step\n"})
    numbered = TaskNode(path="n.md", line=0, line_count=1, text="step one", symbol="1.", status=" ")
    plain = TaskNode(path="n.md", line=1, line_count=1, text="plain step", symbol="2)", status=None)

    await rewrite_task(store, numbered, "X")
    await rewrite_task(store, plain, "X")

    assert store.documents["n.md"] == "1. [X] step one\n2) [X] plain step\n"


@pytest.mark.asyncio
async def test_crlf_line_endings_are_preserved() -> None:
    store = MemoryDocumentStore({"w.md": "- [ ] a\r\n- [ ] b\r\n"})
    task = TaskNode(path="w.md", line=1, line_count=1, text="b", symbol="-", status=" ")

    await rewrite_task(store, task, "X")

    assert store.documents["w.md"] == "- [ ] a\r\n- [X] b\r\n"


@pytest.mark.asyncio
async def test_missing_document_propagates(shopping_task: TaskNode) -> None:
    with pytest.raises(FileNotFoundError):
        await rewrite_task(MemoryDocumentStore(), shopping_task, "X")


@pytest.mark.asyncio
async def test_file_store_round_trip_keeps_crlf(tmp_path: Path) -> None:
    note = tmp_path / "todo.md"
    note.write_bytes(b"intro\r\n- [ ] call bob\r\n")
    task = TaskNode(path="todo.md", line=1, line_count=1, text="call bob", symbol="-", status=" ")

    await rewrite_task(FileDocumentStore(tmp_path), task, "X")

    assert note.read_bytes() == b"intro\r\n- [X] call bob\r\n"
    assert not (tmp_path / "todo.md.tmp").exists()


@pytest.mark.asyncio
async def test_file_store_rejects_paths_outside_vault(tmp_path: Path) -> None:
    store = FileDocumentStore(tmp_path / "vault")
    with pytest.raises(ValueError):
        await store.read("../secret.md")


@pytest.mark.asyncio
async def test_failed_write_removes_temp_file(tmp_path: Path, monkeypatch) -> None:
    note = tmp_path / "todo.md"
    note.write_text("- [ ] call bob\n", encoding="utf-8")

    def fail_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)

    with pytest.raises(OSError, match="disk full"):
        await FileDocumentStore(tmp_path).write("todo.md", "- [X] call bob\n")

    assert not (tmp_path / "todo.md.tmp").exists()
    assert note.read_text(encoding="utf-8") == "- [ ] call bob\n"
