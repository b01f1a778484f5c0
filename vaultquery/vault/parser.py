"""Markdown line grammar: list items, wiki-links, and inline fields."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..link import Link, normalize_header_for_link
from ..models import TaskNode

# Optional indentation/quote markers, a list marker, an optional [c] checkbox, then the body.
LIST_ITEM_PATTERN = re.compile(r"^[\s>]*(\d+\.|\d+\)|\*|-|\+)\s*(\[.?\])?\s*(.*)$")

# Match [[target]], [[target|display]], [[target#section]], [[target#^block|display]], with optional ! embed
WIKILINK_PATTERN = re.compile(r"(!?)\[\[([^\]|#]+)(?:#(\^?)([^\]|]+))?(?:\|([^\]]+))?\]\]")

# [key:: value] or (key:: value)
INLINE_FIELD_PATTERN = re.compile(
    r"\[(?P<bkey>[^\[\]():]+?)::\s*(?P<bvalue>[^\]]*?)\s*\]"
    r"|\((?P<pkey>[^\[\]():]+?)::\s*(?P<pvalue>[^)]*?)\s*\)"
)

LEADING_WHITESPACE = re.compile(r"^\s*")


@dataclass(frozen=True)
class ListItemMatch:
    """A single line matched against the list-item grammar."""

    symbol: str
    status: str | None  # None when the line has no checkbox
    body: str


@dataclass(frozen=True)
class InlineField:
    key: str
    value: str
    start: int
    end: int
    wrapping: str  # "[" or "("


def parse_list_item(line: str) -> ListItemMatch | None:
    """Match one line against the list-item grammar."""
    match = LIST_ITEM_PATTERN.match(line)
    if not match:
        return None

    checkbox = match.group(2)
    status = checkbox[1:-1] if checkbox else None
    return ListItemMatch(symbol=match.group(1), status=status, body=match.group(3))


def leading_whitespace(line: str) -> str:
    return LEADING_WHITESPACE.match(line).group(0)  # type: ignore[union-attr]


def task_from_line(path: str, line_no: int, line: str) -> TaskNode | None:
    """Build a single-line node from live document text.

    Continuation lines and children are not collected; that is the index's job.
    """
    item = parse_list_item(line)
    if item is None:
        return None

    status = item.status
    if status == "":
        status = " "

    return TaskNode(
        path=path,
        line=line_no,
        line_count=1,
        text=item.body,
        symbol=item.symbol,
        status=status,
    )


def extract_links(content: str) -> list[Link]:
    """Extract all wiki-links from content, deduplicated in order of appearance."""
    seen: set[Link] = set()
    result: list[Link] = []
    for embed, target, caret, subpath, display in WIKILINK_PATTERN.findall(content):
        path = target.strip()
        is_embed = embed == "!"
        display = display.strip() or None
        if subpath and caret:
            link = Link.block(path, subpath.strip(), is_embed, display)
        elif subpath and normalize_header_for_link(subpath):
            link = Link.header(path, subpath, is_embed, display)
        else:
            link = Link.file(path, is_embed, display)

        if link not in seen:
            seen.add(link)
            result.append(link)
    return result


def extract_inline_fields(text: str) -> list[InlineField]:
    """Extract all bracketed `[key:: value]` and `(key:: value)` fields."""
    fields: list[InlineField] = []
    for match in INLINE_FIELD_PATTERN.finditer(text):
        if match.group("bkey") is not None:
            key, value, wrapping = match.group("bkey"), match.group("bvalue"), "["
        else:
            key, value, wrapping = match.group("pkey"), match.group("pvalue"), "("
        fields.append(
            InlineField(
                key=key.strip(),
                value=value,
                start=match.start(),
                end=match.end(),
                wrapping=wrapping,
            )
        )
    return fields


def set_inline_field(source: str, key: str, value: str | None = None) -> str:
    """Set, replace, or (with value=None) remove the inline field `key`.

    Text with the key present more than once is returned unchanged, as is
    removing a key that does not exist.
    """
    existing = [f for f in extract_inline_fields(source) if f.key == key]
    if len(existing) > 1 or (not existing and not value):
        return source

    annotation = f"[{key}:: {value}]" if value else ""
    if not existing:
        return f"{source.rstrip()} {annotation}"

    field = existing[0]
    prefix, suffix = source[: field.start], source[field.end :]
    if annotation:
        return f"{prefix}{annotation}{suffix}"

    suffix = suffix.lstrip(" \t")
    if not suffix or suffix.startswith(("\n", "\r")):
        prefix = prefix.rstrip(" \t")
    return prefix + suffix
