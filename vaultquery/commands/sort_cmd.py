"""Sort command - order (and optionally group) notes by a frontmatter field."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console

from ..groupings import Flat, Grouped, Grouping, group_by
from ..settings import QuerySettings, find_settings
from ..values import literal_sort_key, map_leaves, to_string
from ..vault.loader import Page, load_pages


def sort_pages(pages: list[Page], field: str, *, descending: bool = False) -> list[Page]:
    """Order pages by a field under the literal total order (missing fields last)."""
    ordered = sorted(pages, key=lambda p: literal_sort_key(p.get(field)))
    if descending:
        ordered.reverse()
    return ordered


def _json_literal(value: Any, settings: QuerySettings) -> Any:
    def leaf(v: Any) -> Any:
        if v is None or isinstance(v, (bool, int, float, str)):
            return v
        return to_string(v, settings)

    return map_leaves(value, leaf)


def _grouping_to_json(grouping: Grouping[Page], field: str, settings: QuerySettings) -> Any:
    if isinstance(grouping, Grouped):
        return [
            {"key": _json_literal(g.key, settings), "rows": _grouping_to_json(g.rows, field, settings)}
            for g in grouping.groups
        ]
    return [{"path": p.rel_path, field: _json_literal(p.get(field), settings)} for p in grouping.items]


def _print_table(pages: list[Page], field: str, settings: QuerySettings) -> None:
    print(f"| File | {field} |")
    print("| --- | --- |")
    for page in pages:
        value = page.get(field)
        rendered = settings.render_null_as if value is None else to_string(value, settings)
        print(f"| {page.link.markdown()} | {rendered} |")


def run_sort(
    vault_path: Path,
    field: str,
    *,
    group_field: str | None = None,
    descending: bool = False,
    output_json: bool = False,
) -> int:
    """Print notes sorted by `field`, grouped by `group_field` when given."""
    err = Console(stderr=True)
    settings = find_settings(vault_path)

    pages = load_pages(vault_path)
    if not pages:
        err.print("No notes found.", style="yellow")
        return 0

    ordered = sort_pages(pages, field, descending=descending)
    grouping: Grouping[Page] = Flat(ordered)
    if group_field:
        grouping = group_by(ordered, lambda p: p.get(group_field))

    if output_json:
        print(json.dumps(_grouping_to_json(grouping, field, settings), indent=2))
        return 0

    # Markdown (stdout) so it can be pasted into notes.
    if isinstance(grouping, Grouped):
        for group in grouping.groups:
            heading = settings.render_null_as if group.key is None else to_string(group.key, settings)
            print(f"## {heading}\n")
            _print_table(group.rows.items, field, settings)
            print()
    else:
        _print_table(grouping.items, field, settings)
    return 0
