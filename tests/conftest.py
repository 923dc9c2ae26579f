"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fakes import InMemoryFilesystem


@pytest.fixture
def memory_fs() -> InMemoryFilesystem:
    """Empty in-memory filesystem."""
    return InMemoryFilesystem()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Build a directory tree on disk under tmp_path.

    Entries ending in "/" are created as directories, everything else
    as files whose content is their own relative path.
    """

    def _make(*entries: str, root: str = "tree") -> Path:
        base = tmp_path / root
        base.mkdir(parents=True, exist_ok=True)
        for entry in entries:
            target = base / entry
            if entry.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(entry)
        return base

    return _make


def snapshot_tree(root: Path) -> dict[str, str | None]:
    """Map every path under root to its file content (None for directories)."""
    return {
        str(p.relative_to(root)): (None if p.is_dir() else p.read_text())
        for p in sorted(root.rglob("*"))
    }


@pytest.fixture
def tree_snapshot() -> Callable[[Path], dict[str, str | None]]:
    """Return a function capturing the state of a tree on disk."""
    return snapshot_tree


@pytest.fixture(autouse=True)
def _reset_nestfix_logger() -> Iterator[None]:
    """Undo CLI logging setup so tests do not leak handlers or levels."""
    yield
    logger = logging.getLogger("nestfix")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
