"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from vaultquery.models import TaskNode
from vaultquery.rewrite import MemoryDocumentStore


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """An empty vault root."""
    vault = tmp_path / "vault"
    (vault / ".obsidian").mkdir(parents=True)
    return vault


@pytest.fixture
def shopping_store() -> MemoryDocumentStore:
    """One note with a single unchecked task."""
    return MemoryDocumentStore({"shopping.md": "- [ ] buy milk\n"})


@pytest.fixture
def shopping_task() -> TaskNode:
    """The indexed node for the task in `shopping_store`."""
    return TaskNode(path="shopping.md", line=0, line_count=1, text="buy milk", symbol="-", status=" ")
