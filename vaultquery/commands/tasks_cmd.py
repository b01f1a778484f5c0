"""Task commands - list a note's tasks and check/uncheck one in place."""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console

from ..models import TaskNode
from ..rewrite import LINE_SPLIT, FileDocumentStore, rewrite_task, set_task_completion
from ..settings import find_settings
from ..taskview import task_list
from ..vault.parser import task_from_line


def collect_tasks(rel_path: str, text: str) -> list[TaskNode]:
    """Single-line checkbox items of a note, top to bottom."""
    tasks: list[TaskNode] = []
    for line_no, line in enumerate(LINE_SPLIT.split(text)):
        node = task_from_line(rel_path, line_no, line)
        if node is not None and node.task:
            tasks.append(node)
    return tasks


def run_tasks(vault_path: Path, rel_path: str) -> int:
    err = Console(stderr=True)
    settings = find_settings(vault_path)
    store = FileDocumentStore(vault_path)

    try:
        text = asyncio.run(store.read(rel_path))
    except (OSError, ValueError) as e:
        err.print(f"Cannot read {rel_path}: {e}", style="bold red")
        return 1

    print(task_list(collect_tasks(rel_path, text), settings=settings))
    return 0


def run_check(
    vault_path: Path,
    rel_path: str,
    line: int,
    *,
    status: str | None = None,
    text: str | None = None,
) -> int:
    """
    Toggle (or set) the status of the task on `line` (1-based) of a note.

    Without `status`, an incomplete task becomes "X" and a completed one " ".
    """
    err = Console(stderr=True)
    console = Console()
    settings = find_settings(vault_path)
    store = FileDocumentStore(vault_path)

    try:
        before = asyncio.run(store.read(rel_path))
    except (OSError, ValueError) as e:
        err.print(f"Cannot read {rel_path}: {e}", style="bold red")
        return 1

    lines = LINE_SPLIT.split(before)
    if line < 1 or line > len(lines):
        err.print(f"Line {line} is outside {rel_path} ({len(lines)} lines)", style="bold red")
        return 1

    node = task_from_line(rel_path, line - 1, lines[line - 1])
    if node is None:
        err.print(f"Line {line} of {rel_path} is not a list item", style="bold red")
        return 1

    desired_status = status if status is not None else (" " if node.completed else "X")
    completing = desired_status.strip() != ""

    desired_text = text
    if desired_text is None and settings.task_completion_tracking and completing != node.completed:
        desired_text = set_task_completion(node.text, settings.task_completion_text, completing)

    try:
        asyncio.run(rewrite_task(store, node, desired_status, desired_text))
    except OSError as e:
        err.print(f"Failed to write {rel_path}: {e}", style="bold red")
        return 1

    after = asyncio.run(store.read(rel_path))
    if after == before:
        console.print("No change.", style="dim")
    else:
        console.print(f"{rel_path}:{line} -> [{desired_status}]", markup=False)
    return 0
