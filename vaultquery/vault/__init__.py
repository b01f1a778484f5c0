"""Vault loading and line-grammar utilities."""

from .loader import Page, load_page, load_pages, parse_frontmatter
from .parser import extract_inline_fields, extract_links, parse_list_item, set_inline_field, task_from_line

__all__ = [
    "Page",
    "load_page",
    "load_pages",
    "parse_frontmatter",
    "extract_inline_fields",
    "extract_links",
    "parse_list_item",
    "set_inline_field",
    "task_from_line",
]
