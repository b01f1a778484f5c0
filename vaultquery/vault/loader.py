"""Page loading and frontmatter conversion into query literals."""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter

from ..link import Link
from ..values import DataObject, is_array, is_object
from .parser import WIKILINK_PATTERN, extract_links

logger = logging.getLogger(__name__)

_DURATION_UNITS: dict[str, str] = {
    "ms": "milliseconds",
    "millisecond": "milliseconds",
    "milliseconds": "milliseconds",
    "s": "seconds",
    "sec": "seconds",
    "secs": "seconds",
    "second": "seconds",
    "seconds": "seconds",
    "m": "minutes",
    "min": "minutes",
    "mins": "minutes",
    "minute": "minutes",
    "minutes": "minutes",
    "h": "hours",
    "hr": "hours",
    "hrs": "hours",
    "hour": "hours",
    "hours": "hours",
    "d": "days",
    "day": "days",
    "days": "days",
    "w": "weeks",
    "wk": "weeks",
    "wks": "weeks",
    "week": "weeks",
    "weeks": "weeks",
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)\s*([a-z]+)", flags=re.IGNORECASE)
_DURATION_FULL = re.compile(r"^\s*(?:\d+(?:\.\d+)?\s*[a-z]+\s*,?\s*)+$", flags=re.IGNORECASE)
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$")


def parse_duration(text: str) -> dt.timedelta | None:
    """Parse durations like `3 days`, `1h 30m`, or `2 weeks, 1 day`."""
    if not _DURATION_FULL.match(text):
        return None

    parts: dict[str, float] = {}
    for amount, unit in _DURATION_PART.findall(text):
        name = _DURATION_UNITS.get(unit.lower())
        if name is None:
            return None
        parts[name] = parts.get(name, 0.0) + float(amount)
    return dt.timedelta(**parts)


def parse_date(text: str) -> dt.datetime | None:
    if not _ISO_DATE.match(text):
        return None
    try:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_frontmatter(value: Any) -> Any:
    """Convert raw YAML frontmatter into query literals.

    Mappings and sequences are converted recursively. A string that is exactly
    one wiki-link becomes a Link, ISO dates become datetimes, and durations
    like `3 days` become timedeltas. Everything else is returned unchanged.
    """
    if is_object(value):
        return {str(k): parse_frontmatter(v) for k, v in value.items()}
    if is_array(value):
        return [parse_frontmatter(v) for v in value]
    if not isinstance(value, str):
        return value

    stripped = value.strip()
    if WIKILINK_PATTERN.fullmatch(stripped):
        return extract_links(stripped)[0]

    date = parse_date(stripped)
    if date is not None:
        return date

    duration = parse_duration(stripped)
    if duration is not None:
        return duration

    return value


@dataclass
class Page:
    """A markdown note with its frontmatter converted to literals."""

    path: Path
    rel_path: str  # vault-relative, forward slashes
    content: str
    frontmatter: DataObject
    links: list[Link] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.path.stem

    @property
    def link(self) -> Link:
        return Link.file(self.rel_path)

    def file_fields(self) -> dict[str, Any]:
        stat = self.path.stat()
        return {
            "name": self.name,
            "path": self.rel_path,
            "folder": self.rel_path.rpartition("/")[0],
            "link": self.link,
            "outlinks": list(self.links),
            "size": stat.st_size,
            "mtime": dt.datetime.fromtimestamp(stat.st_mtime),
        }

    def get(self, key: str) -> Any:
        """Look up a frontmatter field, or an implicit `file.<field>`."""
        if key.startswith("file."):
            return self.file_fields().get(key[len("file.") :])
        if key in self.frontmatter:
            return self.frontmatter[key]
        lowered = key.lower()
        for k, v in self.frontmatter.items():
            if k.lower() == lowered:
                return v
        return None


def load_page(path: Path, vault_path: Path) -> Page:
    """Load a single markdown file and parse its frontmatter."""
    post = frontmatter.load(path)

    return Page(
        path=path,
        rel_path=path.relative_to(vault_path).as_posix(),
        content=post.content,
        frontmatter=parse_frontmatter(dict(post.metadata)),
        links=extract_links(post.content),
    )


def load_pages(vault_path: Path) -> list[Page]:
    """Load all markdown files from the vault, in path order."""
    pages: list[Page] = []

    for md_file in sorted(vault_path.rglob("*.md")):
        # Skip hidden files and directories
        if any(part.startswith(".") for part in md_file.relative_to(vault_path).parts):
            continue

        try:
            pages.append(load_page(md_file, vault_path))
        except Exception as e:
            # Log error but continue loading
            logger.warning("Failed to load %s: %s", md_file, e)

    return pages
