"""Recursively nested groupings of query results.

Query results arrive either as a flat list of rows or as a list of
`{"key": ..., "rows": ...}` records whose rows are themselves groupings. The raw
form can only be told apart by the shape of its elements, so new code should
build the explicit `Flat` / `Grouped` types and convert raw collaborator output
with `as_grouping`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, TypeVar, Union

from .values import compare_value, is_object, literal_sort_key

T = TypeVar("T")


def is_element_group(entry: Any) -> bool:
    """True if `entry` is an object with exactly the keys `key` and `rows`."""
    return is_object(entry) and len(entry) == 2 and "key" in entry and "rows" in entry


def is_grouping(entries: Iterable[Any]) -> bool:
    """True if every element is a group record.

    An empty sequence is a grouping: there is no element to disprove it.
    """
    return all(is_element_group(entry) for entry in entries)


@dataclass(frozen=True)
class Flat(Generic[T]):
    """Ungrouped rows."""

    items: list[T] = field(default_factory=list)

    def to_raw(self) -> list[T]:
        return list(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class GroupElement(Generic[T]):
    """One group: its key and the (possibly grouped) rows under it."""

    key: Any
    rows: "Grouping[T]"

    def to_raw(self) -> dict[str, Any]:
        return {"key": self.key, "rows": self.rows.to_raw()}


@dataclass(frozen=True)
class Grouped(Generic[T]):
    """Rows partitioned by key, in key order."""

    groups: list[GroupElement[T]] = field(default_factory=list)

    def to_raw(self) -> list[dict[str, Any]]:
        return [g.to_raw() for g in self.groups]

    def __len__(self) -> int:
        return len(self.groups)


Grouping = Union[Flat[T], Grouped[T]]


def as_grouping(raw: Any) -> Grouping[Any]:
    """Convert structural collaborator output into an explicit grouping.

    Already-explicit groupings are returned unchanged. An empty list becomes an
    empty `Flat`, since it carries no groups to render.
    """
    if isinstance(raw, (Flat, Grouped)):
        return raw

    entries = list(raw)
    if entries and is_grouping(entries):
        return Grouped([GroupElement(key=e["key"], rows=as_grouping(e["rows"])) for e in entries])
    return Flat(entries)


def group_by(items: Iterable[T], key: Callable[[T], Any]) -> Grouped[T]:
    """Group rows by a computed key.

    Rows are sorted by key with `compare_value` (stable, so rows keep their
    relative order within a group) and runs of equal keys become one group.
    """
    keyed = [(key(item), item) for item in items]
    keyed.sort(key=lambda pair: literal_sort_key(pair[0]))

    groups: list[GroupElement[T]] = []
    current_key: Any = None
    current_rows: list[T] = []
    for k, item in keyed:
        if current_rows and compare_value(current_key, k) == 0:
            current_rows.append(item)
            continue
        if current_rows:
            groups.append(GroupElement(key=current_key, rows=Flat(current_rows)))
        current_key, current_rows = k, [item]

    if current_rows:
        groups.append(GroupElement(key=current_key, rows=Flat(current_rows)))

    return Grouped(groups)
