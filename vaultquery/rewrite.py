"""
In-place task rewriting.

A rendered task can be checked, unchecked, or edited. The change is applied by
patching the owning note's text directly: read the whole note, re-validate that
the cached task still sits where the index said it was, splice the new line(s)
in, and write the whole note back once. Every other byte of the note, including
its line-ending style, is preserved.

If the note changed underneath the cached task, nothing is written. That is a
silent no-op for the caller (logged at DEBUG), never an error. Storage errors
are not caught here.

There is no locking: the read-modify-write assumes no concurrent writer to the
same note.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from .models import TaskNode
from .vault.parser import leading_whitespace, parse_list_item, set_inline_field

logger = logging.getLogger(__name__)

LINE_SPLIT = re.compile(r"\r?\n")


class DocumentStore(Protocol):
    """Whole-document storage addressed by vault-relative path."""

    async def read(self, path: str) -> str: ...

    async def write(self, path: str, text: str) -> None: ...


class FileDocumentStore:
    """Documents stored as files under a vault root."""

    def __init__(self, root: Path):
        self.root = root

    def _resolve(self, path: str) -> Path:
        root = self.root.resolve()
        full = (root / path).resolve()
        if full != root and root not in full.parents:
            raise ValueError(f"Path escapes the vault: {path}")
        return full

    def _read_sync(self, path: str) -> str:
        # newline="" keeps \r\n intact so the caller can detect it.
        with open(self._resolve(path), encoding="utf-8", newline="") as f:
            return f.read()

    def _write_sync(self, path: str, text: str) -> None:
        target = self._resolve(path)
        # Write atomically (write to temp, then replace)
        temp_path = target.with_name(target.name + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            temp_path.replace(target)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(self._read_sync, path)

    async def write(self, path: str, text: str) -> None:
        await asyncio.to_thread(self._write_sync, path, text)


class MemoryDocumentStore:
    """In-memory documents; records every write."""

    def __init__(self, documents: dict[str, str] | None = None):
        self.documents: dict[str, str] = dict(documents or {})
        self.reads: list[str] = []
        self.writes: list[tuple[str, str]] = []

    async def read(self, path: str) -> str:
        self.reads.append(path)
        try:
            return self.documents[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    async def write(self, path: str, text: str) -> None:
        self.writes.append((path, text))
        self.documents[path] = text


async def rewrite_task(
    store: DocumentStore,
    task: TaskNode,
    desired_status: str,
    desired_text: str | None = None,
) -> None:
    """
    Rewrite a task in its note with a new status and, optionally, new text.

    Args:
        store: Where the note is read from and written back to
        task: The cached node, as indexed
        desired_status: Checkbox character to set ("" means unchecked)
        desired_text: Replacement body; may span several lines
    """
    if desired_status == task.status and (desired_text is None or desired_text == task.text):
        return
    desired_status = " " if desired_status == "" else desired_status

    raw_text = await store.read(task.path)
    has_rn = "\r" in raw_text
    lines = LINE_SPLIT.split(raw_text)

    if task.line >= len(lines):
        logger.debug("Skipping rewrite of %s: line %d beyond end of note", task.id, task.line)
        return

    item = parse_list_item(lines[task.line])
    if item is None or not item.body:
        logger.debug("Skipping rewrite of %s: line is no longer a list item", task.id)
        return

    first_line = task.text.split("\n")[0]
    if first_line.strip() != item.body.strip():
        logger.debug("Skipping rewrite of %s: cached text no longer matches the note", task.id)
        return

    indent = leading_whitespace(lines[task.line])
    if desired_text:
        desired_parts = desired_text.split("\n")
        new_lines = [f"{indent}{task.symbol} [{desired_status}] {desired_parts[0]}"]
        new_lines.extend(f"{indent}\t{part}" for part in desired_parts[1:])
        lines[task.line : task.line + task.line_count] = new_lines
    else:
        lines[task.line] = f"{indent}{task.symbol} [{desired_status}] {first_line.strip()}"

    await store.write(task.path, ("\r\n" if has_rn else "\n").join(lines))
    logger.debug("Rewrote %s with status %r", task.id, desired_status)


def trim_ending_lines(text: str) -> str:
    """Drop trailing blank lines."""
    parts = LINE_SPLIT.split(text)
    trim = len(parts) - 1
    while trim > 0 and parts[trim].strip() == "":
        trim -= 1
    return "\n".join(parts[: trim + 1])


def set_task_completion(
    original_text: str,
    completion_key: str,
    complete: bool,
    *,
    today: Callable[[], date] = date.today,
) -> str:
    """
    Add or remove the completion-date inline field of a task's text.

    Completing stamps `[<completion_key>:: YYYY-MM-DD]` onto the last line only;
    un-completing removes the field and trailing blank lines.
    """
    if not complete:
        return trim_ending_lines(set_inline_field(original_text, completion_key, None))

    parts = LINE_SPLIT.split(original_text)
    parts[-1] = set_inline_field(parts[-1], completion_key, today().strftime("%Y-%m-%d"))
    return "\n".join(parts)
