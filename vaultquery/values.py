"""
Dynamic literal values evaluated by the query language.

A literal is a plain Python value carrying exactly one of these tags:

    null      None
    number    int / float (bool is excluded even though it subclasses int)
    string    str
    boolean   bool
    duration  datetime.timedelta
    date      datetime.datetime / datetime.date
    html      HtmlFragment
    array     list / tuple
    link      Link
    function  any other callable
    object    any other Mapping

`wrap_value` recovers the tag by trying the predicates in exactly that order.
The order is part of the contract: moving a predicate earlier or later
reclassifies values (for example a callable Mapping is a function, never an
object). `compare_value` defines one total order over every literal and is the
only comparison used for sorting, grouping and equality.
"""

from __future__ import annotations

import datetime as dt
import functools
import locale
import math
import numbers
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, Union

from .link import Link
from .settings import DEFAULT_QUERY_SETTINGS, QuerySettings

LiteralType = Literal[
    "boolean",
    "number",
    "string",
    "date",
    "duration",
    "link",
    "array",
    "object",
    "html",
    "function",
    "null",
]


@dataclass(frozen=True)
class HtmlFragment:
    """Opaque, already-rendered markup. Never inspected, never ordered."""

    markup: str

    def __str__(self) -> str:
        return self.markup


LiteralValue = Union[
    None,
    bool,
    int,
    float,
    str,
    dt.datetime,
    dt.date,
    dt.timedelta,
    Link,
    HtmlFragment,
    list,
    tuple,
    Mapping,
    Callable,
]
DataObject = dict[str, LiteralValue]

_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


@dataclass(frozen=True)
class WrappedLiteral:
    """A literal paired with its tag so callers can switch on it."""

    type: LiteralType
    value: LiteralValue


# ============================================================================
# CLASSIFICATION
# ============================================================================


def is_null(val: Any) -> bool:
    return val is None


def is_number(val: Any) -> bool:
    return isinstance(val, numbers.Real) and not isinstance(val, bool)


def is_string(val: Any) -> bool:
    return isinstance(val, str)


def is_boolean(val: Any) -> bool:
    return isinstance(val, bool)


def is_duration(val: Any) -> bool:
    return isinstance(val, dt.timedelta)


def is_date(val: Any) -> bool:
    # datetime.datetime subclasses datetime.date.
    return isinstance(val, dt.date)


def is_html(val: Any) -> bool:
    return isinstance(val, HtmlFragment)


def is_array(val: Any) -> bool:
    return isinstance(val, (list, tuple))


def is_link(val: Any) -> bool:
    return isinstance(val, Link)


def is_function(val: Any) -> bool:
    return callable(val)


def is_object(val: Any) -> bool:
    return (
        isinstance(val, Mapping)
        and not is_html(val)
        and not is_array(val)
        and not is_duration(val)
        and not is_date(val)
        and not is_link(val)
        and not is_function(val)
    )


def wrap_value(val: Any) -> WrappedLiteral | None:
    """Wrap a value with its tag, or return None if it has no tag."""
    if is_null(val):
        return WrappedLiteral("null", val)
    elif is_number(val):
        return WrappedLiteral("number", val)
    elif is_string(val):
        return WrappedLiteral("string", val)
    elif is_boolean(val):
        return WrappedLiteral("boolean", val)
    elif is_duration(val):
        return WrappedLiteral("duration", val)
    elif is_date(val):
        return WrappedLiteral("date", val)
    elif is_html(val):
        return WrappedLiteral("html", val)
    elif is_array(val):
        return WrappedLiteral("array", val)
    elif is_link(val):
        return WrappedLiteral("link", val)
    elif is_function(val):
        return WrappedLiteral("function", val)
    elif is_object(val):
        return WrappedLiteral("object", val)
    return None


def type_of(val: Any) -> LiteralType | None:
    """The tag of an arbitrary value, if it has one."""
    wrapped = wrap_value(val)
    return wrapped.type if wrapped else None


# ============================================================================
# COMPARISON
# ============================================================================


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _compare_strings(a: str, b: str) -> int:
    return _sign(locale.strcoll(a, b))


def _compare_numbers(a: float, b: float) -> int:
    # NaN sorts after every number and equals itself.
    a_nan, b_nan = math.isnan(a), math.isnan(b)
    if a_nan or b_nan:
        return int(a_nan) - int(b_nan)
    if a < b:
        return -1
    elif a == b:
        return 0
    return 1


def _date_key(value: dt.date) -> tuple[dt.datetime, dt.timedelta | None]:
    """(UTC instant, UTC offset) for a date; naive values are read as UTC."""
    if not isinstance(value, dt.datetime):
        value = dt.datetime(value.year, value.month, value.day)
    offset = value.utcoffset()
    if offset is None:
        return value.replace(tzinfo=dt.timezone.utc), None
    return value.astimezone(dt.timezone.utc), offset


def _compare_dates(a: dt.date, b: dt.date) -> int:
    instant_a, offset_a = _date_key(a)
    instant_b, offset_b = _date_key(b)
    if instant_a < instant_b:
        return -1
    if instant_a > instant_b:
        return 1
    if offset_a == offset_b:
        return 0
    # Same instant seen from different zones is not equal; naive first.
    if offset_a is None:
        return -1
    if offset_b is None:
        return 1
    return -1 if offset_a < offset_b else 1


def _compare_links(a: Link, b: Link, normalize: Callable[[str], str]) -> int:
    # Never compare by display: that would break link equality.
    path_compare = _compare_strings(normalize(a.path), normalize(b.path))
    if path_compare != 0:
        return path_compare

    type_compare = _compare_strings(a.type, b.type)
    if type_compare != 0:
        return type_compare

    if a.subpath and not b.subpath:
        return 1
    if not a.subpath and b.subpath:
        return -1
    if not a.subpath and not b.subpath:
        return 0

    return _compare_strings(a.subpath or "", b.subpath or "")


def compare_value(
    val1: Any,
    val2: Any,
    link_normalizer: Callable[[str], str] | None = None,
) -> int:
    """
    Compare two literals under the total order used by sort, group and equality.

    Returns -1, 0 or 1. Null is the maximum element. Values with different tags
    compare by tag name. Values without a tag sort after every tagged value
    except null. Strings collate with `locale.strcoll`, so their order follows
    the process LC_COLLATE locale; library callers own that setting (the CLI
    adopts the user's locale at startup).

    Args:
        val1: Left value
        val2: Right value
        link_normalizer: Applied to link paths before comparing them

    Returns:
        -1 if val1 < val2, 0 if equal, 1 if val1 > val2
    """
    if val1 is None and val2 is None:
        return 0
    elif val1 is None:
        return 1
    elif val2 is None:
        return -1

    wrap1 = wrap_value(val1)
    wrap2 = wrap_value(val2)

    if wrap1 is None and wrap2 is None:
        return 0
    elif wrap1 is None:
        return 1
    elif wrap2 is None:
        return -1

    if wrap1.type != wrap2.type:
        return -1 if wrap1.type < wrap2.type else 1

    v1, v2 = wrap1.value, wrap2.value
    kind = wrap1.type

    if kind == "string":
        return _compare_strings(v1, v2)
    elif kind == "number":
        return _compare_numbers(v1, v2)
    elif kind == "boolean":
        return int(v1) - int(v2)
    elif kind == "link":
        return _compare_links(v1, v2, link_normalizer or (lambda x: x))
    elif kind == "date":
        return _compare_dates(v1, v2)
    elif kind == "duration":
        if v1 < v2:
            return -1
        return 0 if v1 == v2 else 1
    elif kind == "array":
        for left, right in zip(v1, v2):
            comp = compare_value(left, right, link_normalizer)
            if comp != 0:
                return comp
        return _sign(len(v1) - len(v2))
    elif kind == "object":
        o1 = {str(k): v for k, v in v1.items()}
        o2 = {str(k): v for k, v in v2.items()}
        k1 = sorted(o1)
        k2 = sorted(o2)

        key_compare = compare_value(k1, k2, link_normalizer)
        if key_compare != 0:
            return key_compare

        for key in k1:
            comp = compare_value(o1[key], o2[key], link_normalizer)
            if comp != 0:
                return comp
        return 0

    # html, function: unorderable, always equal.
    return 0


def equals(val1: Any, val2: Any) -> bool:
    """True if two values are equal under `compare_value`."""
    return compare_value(val1, val2) == 0


literal_sort_key = functools.cmp_to_key(compare_value)


# ============================================================================
# TRUTHINESS, COPYING, MAPPING
# ============================================================================


def is_truthy(field: Any) -> bool:
    """Determine if a value is non-null and has data in it."""
    wrapped = wrap_value(field)
    if wrapped is None:
        return False

    kind, value = wrapped.type, wrapped.value
    if kind == "number":
        return value != 0
    elif kind == "string":
        return len(value) > 0
    elif kind == "boolean":
        return value
    elif kind == "link":
        return bool(value.path)
    elif kind == "date":
        return _date_key(value)[0] != _EPOCH
    elif kind == "duration":
        return value.total_seconds() != 0
    elif kind in ("object", "array"):
        return len(value) > 0
    elif kind == "null":
        return False
    # html, function
    return True


def deep_copy(field: LiteralValue) -> LiteralValue:
    """Copy arrays and objects recursively; every other value is shared."""
    if field is None:
        return field
    if is_array(field):
        copied = [deep_copy(v) for v in field]
        return tuple(copied) if isinstance(field, tuple) else copied
    if is_object(field):
        return {key: deep_copy(value) for key, value in field.items()}
    return field


def map_leaves(val: LiteralValue, func: Callable[[Any], Any]) -> Any:
    """Rebuild arrays and objects, applying `func` to every non-container leaf."""
    if is_object(val):
        return {key: map_leaves(value, func) for key, value in val.items()}
    elif is_array(val):
        return [map_leaves(value, func) for value in val]
    return func(val)


# ============================================================================
# RENDERING
# ============================================================================

_DURATION_UNITS = (
    ("day", 86400 * 1000),
    ("hour", 3600 * 1000),
    ("minute", 60 * 1000),
    ("second", 1000),
    ("millisecond", 1),
)


def render_minimal_duration(duration: dt.timedelta) -> str:
    """Render only the non-zero components, e.g. `1 day, 2 hours`."""
    if duration < dt.timedelta(0):
        return "-" + render_minimal_duration(-duration)

    remaining = duration // dt.timedelta(milliseconds=1)
    parts: list[str] = []
    for name, size in _DURATION_UNITS:
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount} {name}{'' if amount == 1 else 's'}")

    return ", ".join(parts) if parts else "0 seconds"


def _render_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_string(
    field: Any,
    settings: QuerySettings = DEFAULT_QUERY_SETTINGS,
    recursive: bool = False,
) -> str:
    """Convert a value into a reasonable, markdown-friendly string."""
    wrapped = wrap_value(field)
    if wrapped is None:
        return "null"

    kind, value = wrapped.type, wrapped.value
    if kind == "string":
        return value
    elif kind == "number":
        return _render_number(value)
    elif kind == "boolean":
        return "true" if value else "false"
    elif kind in ("html", "null"):
        return str(value) if value is not None else "null"
    elif kind == "link":
        return value.markdown()
    elif kind == "function":
        return "<function>"
    elif kind == "array":
        result = ", ".join(to_string(f, settings, True) for f in value)
        return f"[{result}]" if recursive else result
    elif kind == "object":
        entries = ", ".join(f"{key}: {to_string(val, settings, True)}" for key, val in value.items())
        return "{ " + entries + " }"
    elif kind == "date":
        if not isinstance(value, dt.datetime) or (value.hour == 0 and value.minute == 0 and value.second == 0):
            return value.strftime(settings.default_date_format)
        return value.strftime(settings.default_date_time_format)

    return render_minimal_duration(value)
