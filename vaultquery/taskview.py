"""Task de-duplication and markdown rendering of (possibly grouped) task results."""

from __future__ import annotations

from typing import Any, Iterable

from .groupings import Flat, Grouped, Grouping, as_grouping, group_by
from .link import Link
from .models import TaskNode
from .settings import DEFAULT_QUERY_SETTINGS, QuerySettings
from .values import to_string

EMPTY_RESULT_MESSAGE = "No results to show."


# ============================================================================
# DE-DUPLICATION
# ============================================================================


def list_id(item: TaskNode) -> str:
    return f"{item.path}:{item.line}"


def list_children(item: TaskNode, output: set[str] | None = None) -> set[str]:
    """Collect the ids of every strict descendant of `item`."""
    if output is None:
        output = set()

    output.update(list_id(node) for node in item.walk())
    return output


def nest_items(raw: Iterable[TaskNode]) -> tuple[list[TaskNode], set[str]]:
    """Drop roots that already appear nested under another root.

    A filtered result can contain both a task and one of its ancestors; the
    ancestor renders its children anyway, so the standalone copy is removed.

    Returns:
        (surviving roots in input order, ids of the surviving roots)
    """
    items = list(raw)
    seen: set[str] = set()
    for item in items:
        list_children(item, seen)

    filtered = [t for t in items if list_id(t) not in seen]
    return filtered, {list_id(t) for t in filtered}


# ============================================================================
# RENDERING
# ============================================================================


def _render_item(item: TaskNode, depth: int) -> list[str]:
    indent = "\t" * depth
    text_lines = item.text.split("\n")
    marker = f"- [{item.status}] " if item.task else "- "

    lines = [f"{indent}{marker}{text_lines[0]}"]
    lines.extend(f"{indent}\t{line}" for line in text_lines[1:])
    if item.children:
        lines.extend(_render_list(item.children, depth + 1))
    return lines


def _render_list(items: list[TaskNode], depth: int) -> list[str]:
    nest, _mask = nest_items(items)
    lines: list[str] = []
    for item in nest:
        lines.extend(_render_item(item, depth))
    return lines


def _render_grouping(grouping: Grouping[TaskNode], settings: QuerySettings) -> list[str]:
    if isinstance(grouping, Grouped):
        lines: list[str] = []
        for group in grouping.groups:
            heading = settings.render_null_as if group.key is None else to_string(group.key, settings)
            lines.append(f"#### {heading}")
            lines.append("")
            lines.extend(_render_grouping(group.rows, settings))
            lines.append("")
        return lines

    if not grouping.items:
        return [EMPTY_RESULT_MESSAGE] if settings.warn_on_empty_result else []
    return _render_list(grouping.items, 0)


def render_task_grouping(items: Any, settings: QuerySettings = DEFAULT_QUERY_SETTINGS) -> str:
    """Render tasks as a markdown list, with a `####` heading per group key.

    `items` may be an explicit grouping or raw collaborator output.
    """
    lines = _render_grouping(as_grouping(items), settings)
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def task_list(
    tasks: Any,
    group_by_file: bool = True,
    settings: QuerySettings = DEFAULT_QUERY_SETTINGS,
) -> str:
    """Render tasks, grouping an ungrouped result by the file each task lives in."""
    grouping = as_grouping(tasks)
    if group_by_file and isinstance(grouping, Flat) and grouping.items:
        grouping = group_by(grouping.items, lambda t: Link.file(t.path))
    return render_task_grouping(grouping, settings)
