"""Data models for list items and tasks produced by the vault index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .link import Link


@dataclass
class TaskNode:
    """One list item in a note, optionally a checkbox task, with its nested children.

    Nodes are produced and owned by the index; consumers only read them. A node
    is identified by `(path, line)`, unique within one index snapshot.
    """

    path: str
    line: int  # 0-based line of the item's marker
    line_count: int  # source lines the item's own text spans
    text: str  # item body without the marker/checkbox; may span lines
    symbol: str  # list marker: -, *, + or "1." / "1)"
    status: str | None = None  # checkbox character, None for a plain list item
    children: list[TaskNode] = field(default_factory=list)
    section: Link | None = None  # header (or file) the item lives under
    parent: int | None = None  # line of the parent item, if nested
    block_id: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.path}:{self.line}"

    @property
    def task(self) -> bool:
        return self.status is not None

    @property
    def completed(self) -> bool:
        """Any status other than a blank checkbox counts as complete."""
        return self.status is not None and self.status != " "

    @property
    def fully_completed(self) -> bool:
        """Completed, and so is every task nested below it."""
        if not self.completed:
            return False
        return all(child.fully_completed for child in self.children if child.task)

    def walk(self) -> Iterator[TaskNode]:
        """Yield every strict descendant, depth first."""
        for child in self.children:
            yield child
            yield from child.walk()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TaskNode:
        section = d.get("section")
        status = d.get("status")
        if status is None and d.get("task"):
            status = " "
        return cls(
            path=d["path"],
            line=int(d["line"]),
            line_count=int(d.get("lineCount", d.get("line_count", 1))),
            text=d.get("text", ""),
            symbol=d.get("symbol", "-"),
            status=status,
            children=[cls.from_dict(c) for c in d.get("children", [])],
            section=Link.from_object(section) if isinstance(section, dict) else section,
            parent=d.get("parent"),
            block_id=d.get("blockId", d.get("block_id")),
            tags=list(d.get("tags", [])),
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "path": self.path,
            "line": self.line,
            "lineCount": self.line_count,
            "text": self.text,
            "symbol": self.symbol,
            "task": self.task,
            "children": [c.to_dict() for c in self.children],
        }
        if self.status is not None:
            d["status"] = self.status
            d["completed"] = self.completed
        if self.section is not None:
            d["section"] = self.section.to_object()
        if self.parent is not None:
            d["parent"] = self.parent
        if self.block_id:
            d["blockId"] = self.block_id
        if self.tags:
            d["tags"] = list(self.tags)
        return d
