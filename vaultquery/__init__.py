"""vaultquery - literal values, ordering, and task rewriting for markdown vaults."""

__version__ = "0.1.0"

from .groupings import Flat, GroupElement, Grouped, as_grouping, group_by, is_element_group, is_grouping
from .link import Link
from .models import TaskNode
from .rewrite import FileDocumentStore, MemoryDocumentStore, rewrite_task, set_task_completion
from .settings import DEFAULT_QUERY_SETTINGS, QuerySettings, load_settings
from .taskview import nest_items, render_task_grouping, task_list
from .values import (
    HtmlFragment,
    compare_value,
    deep_copy,
    equals,
    is_truthy,
    to_string,
    type_of,
    wrap_value,
)

__all__ = [
    "__version__",
    "Flat",
    "GroupElement",
    "Grouped",
    "as_grouping",
    "group_by",
    "is_element_group",
    "is_grouping",
    "Link",
    "TaskNode",
    "FileDocumentStore",
    "MemoryDocumentStore",
    "rewrite_task",
    "set_task_completion",
    "DEFAULT_QUERY_SETTINGS",
    "QuerySettings",
    "load_settings",
    "nest_items",
    "render_task_grouping",
    "task_list",
    "HtmlFragment",
    "compare_value",
    "deep_copy",
    "equals",
    "is_truthy",
    "to_string",
    "type_of",
    "wrap_value",
]
