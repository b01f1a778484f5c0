"""Query and task-tracking settings, loaded from the vault's `.vaultquery.toml`."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

SETTINGS_FILENAME = ".vaultquery.toml"


@dataclass(frozen=True)
class QuerySettings:
    """Rendering and task-tracking options shared by queries and task views."""

    render_null_as: str = "\\-"
    warn_on_empty_result: bool = True
    default_date_format: str = "%B %d, %Y"
    default_date_time_format: str = "%I:%M %p - %B %d, %Y"
    task_completion_tracking: bool = False
    task_completion_text: str = "completion"


DEFAULT_QUERY_SETTINGS = QuerySettings()


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def load_settings(path: Path) -> QuerySettings:
    """
    Load query settings from TOML.

    Keys live either at the top level or under a `[query]` table; unknown keys
    are ignored. A value of the wrong type raises ValueError.
    """
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    raw = {**{k: v for k, v in data.items() if not isinstance(v, dict)}, **_coerce_dict(data.get("query"))}

    values: dict[str, Any] = {}
    for f in fields(QuerySettings):
        if f.name not in raw:
            continue
        value = raw[f.name]
        expected = type(getattr(DEFAULT_QUERY_SETTINGS, f.name))
        if not isinstance(value, expected):
            raise ValueError(f"{f.name} must be a {expected.__name__}, got {type(value).__name__}")
        values[f.name] = value

    return QuerySettings(**values)


def find_settings(vault_path: Path) -> QuerySettings:
    """Load the vault-owned settings file, if present."""
    settings_path = vault_path / SETTINGS_FILENAME
    if not settings_path.exists():
        return DEFAULT_QUERY_SETTINGS
    return load_settings(settings_path)
