"""Typed, immutable references to a file, header, or block in the vault."""

from __future__ import annotations

import dataclasses
import posixpath
import re
from dataclasses import dataclass
from typing import Any, Literal

LinkType = Literal["file", "header", "block"]

# Characters Obsidian refuses inside a header link target.
_HEADER_DISALLOWED = re.compile(r"[^\w\s]", flags=re.UNICODE)
_WHITESPACE_RUN = re.compile(r"\s+")


def get_file_title(path: str) -> str:
    """Final path component with its extension stripped."""
    name = posixpath.basename(path.replace("\\", "/"))
    stem, _ext = posixpath.splitext(name)
    return stem or name


def normalize_header_for_link(header: str) -> str:
    """Normalize a header to the form used in `[[file#header]]` links."""
    cleaned = _HEADER_DISALLOWED.sub(" ", header)
    return _WHITESPACE_RUN.sub(" ", cleaned).strip()


@dataclass(frozen=True, eq=False)
class Link:
    """A link to a file, a header inside a file, or a block inside a file.

    Equality and hashing only consider `path`, `type` and `subpath`; `display`
    and `embed` affect rendering, not identity.
    """

    path: str
    type: LinkType = "file"
    subpath: str | None = None
    display: str | None = None
    embed: bool = False

    def __post_init__(self) -> None:
        if self.type not in ("file", "header", "block"):
            raise ValueError(f"Invalid link type: {self.type!r}")
        if self.type == "file" and self.subpath is not None:
            raise ValueError("File links cannot carry a subpath")
        if self.type != "file" and self.subpath is None:
            raise ValueError(f"{self.type} links require a subpath")

    @classmethod
    def file(cls, path: str, embed: bool = False, display: str | None = None) -> Link:
        """Create a link to a specific file."""
        return cls(path=path, type="file", subpath=None, display=display, embed=embed)

    @classmethod
    def header(cls, path: str, header: str, embed: bool = False, display: str | None = None) -> Link:
        """Create a link to a header in a file; the header text is normalized."""
        return cls(
            path=path,
            type="header",
            subpath=normalize_header_for_link(header),
            display=display,
            embed=embed,
        )

    @classmethod
    def block(cls, path: str, block_id: str, embed: bool = False, display: str | None = None) -> Link:
        """Create a link to a block (`^id`) in a file."""
        return cls(path=path, type="block", subpath=block_id, display=display, embed=embed)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> Link:
        """Rebuild a link from its `to_object()` form."""
        return cls(
            path=str(obj["path"]),
            type=obj.get("type", "file"),
            subpath=obj.get("subpath"),
            display=obj.get("display"),
            embed=bool(obj.get("embed", False)),
        )

    def to_object(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "type": self.type,
            "subpath": self.subpath,
            "display": self.display,
            "embed": self.embed,
        }

    def equals(self, other: object) -> bool:
        """True when both links point at exactly the same location."""
        if not isinstance(other, Link):
            return False
        return self.path == other.path and self.type == other.type and self.subpath == other.subpath

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self.path, self.type, self.subpath))

    def with_path(self, path: str) -> Link:
        return dataclasses.replace(self, path=path)

    def with_display(self, display: str | None = None) -> Link:
        """Same location, new display text."""
        return dataclasses.replace(self, display=display)

    def with_header(self, header: str) -> Link:
        """Convert this link into a link to a header of the same file."""
        return Link.header(self.path, header, self.embed, self.display)

    def to_file(self) -> Link:
        """Convert any link into a link to its file."""
        return Link.file(self.path, self.embed, self.display)

    def to_embed(self) -> Link:
        if self.embed:
            return self
        return dataclasses.replace(self, embed=True)

    def markdown(self) -> str:
        """Render as an Obsidian wiki-link, e.g. `![[notes/a.md#^b1|a > b1]]`."""
        result = ("!" if self.embed else "") + "[[" + self.path

        if self.type == "header":
            result += "#" + (self.subpath or "")
        elif self.type == "block":
            result += "#^" + (self.subpath or "")

        if self.display:
            result += "|" + self.display
        else:
            result += "|" + get_file_title(self.path)
            if self.type in ("header", "block"):
                result += " > " + (self.subpath or "")

        return result + "]]"

    def file_name(self) -> str:
        """The stripped name of the file this link points to."""
        return get_file_title(self.path)

    def __str__(self) -> str:
        return self.markdown()
