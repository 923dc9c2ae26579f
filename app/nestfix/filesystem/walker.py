"""Depth-first directory enumeration.

Walks a tree with an explicit stack instead of recursion so deeply
nested trees cannot exhaust the interpreter's recursion limit.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from nestfix.filesystem.backend import FilesystemBackend, LocalFilesystem

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """Yields every directory under a root, the root included.

    The children of a directory are read only after the consumer has
    finished with it, so changes made to a yielded directory (such as a
    merge) are reflected in what is visited next. Directories that cannot
    be read contribute no children; the walk carries on with whatever is
    still queued.

    A walker is one-shot. Iterating it again after it is exhausted yields
    nothing.

    Example:
        >>> for directory in DirectoryWalker(Path("photos")):
        ...     print(directory)

    Args:
        root: Directory to start from. If it is not a directory, nothing
            is yielded.
        backend: Filesystem access. Defaults to the local filesystem.
    """

    def __init__(self, root: Path, backend: FilesystemBackend | None = None) -> None:
        self._backend = backend or LocalFilesystem()
        self._stack: list[Path] = []

        if self._backend.is_dir(root):
            self._stack.append(root)

    def __iter__(self) -> Iterator[Path]:
        while self._stack:
            directory = self._stack.pop()
            yield directory
            self._stack.extend(self._subdirectories(directory))

    def _subdirectories(self, directory: Path) -> list[Path]:
        try:
            entries = self._backend.list_dir(directory)
        except OSError as e:
            logger.debug("Cannot read %s, not descending: %s", directory, e)
            return []
        return [entry for entry in entries if self._backend.is_dir(entry)]
