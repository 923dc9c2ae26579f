"""Filesystem access primitives used by the walker and resolver.

The traversal and merge logic never touches ``os`` or ``pathlib`` I/O
directly. Everything goes through a FilesystemBackend so the decision
logic can be exercised against an in-memory fake.
"""

import errno
import os
from abc import ABC, abstractmethod
from pathlib import Path


class FilesystemBackend(ABC):
    """Abstract base class for filesystem access.

    Implementations must raise OSError (or a subclass) from the
    mutating and listing operations when the underlying call fails.
    """

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Return True if path currently references a directory.

        Never raises; inaccessible paths are reported as not a directory.
        """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Return True if anything (including a dangling symlink) exists at path."""

    @abstractmethod
    def list_dir(self, path: Path) -> list[Path]:
        """List the immediate entries of a directory.

        Returns:
            Full paths of the entries, sorted by name.

        Raises:
            OSError: If the directory cannot be read.
        """

    @abstractmethod
    def rename(self, source: Path, destination: Path) -> None:
        """Rename source to destination on the same filesystem.

        Raises:
            OSError: If the rename fails.
        """

    @abstractmethod
    def remove_dir(self, path: Path) -> None:
        """Remove an empty directory.

        Raises:
            OSError: If the directory is not empty or cannot be removed.
        """


class LocalFilesystem(FilesystemBackend):
    """FilesystemBackend backed by the local operating system."""

    def is_dir(self, path: Path) -> bool:
        try:
            return path.is_dir()
        except OSError:
            return False

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def list_dir(self, path: Path) -> list[Path]:
        return sorted(path.iterdir())

    def rename(self, source: Path, destination: Path) -> None:
        os.rename(source, destination)

    def remove_dir(self, path: Path) -> None:
        path.rmdir()


def _is_within(path: Path, other: Path) -> bool:
    return path == other or other in path.parents


class PreviewFilesystem(FilesystemBackend):
    """View of another backend in which changes are recorded, not made.

    Renames and removals are kept as an ordered list of events and replayed
    on every lookup, so a dry-run walks and merges the tree a real run would
    leave behind while the wrapped backend is never modified.

    Args:
        base: Backend providing the unchanged tree.
    """

    def __init__(self, base: FilesystemBackend) -> None:
        self._base = base
        # (source, destination); a destination of None records a removal
        self._events: list[tuple[Path, Path | None]] = []

    def _to_base(self, path: Path) -> Path | None:
        """Map a previewed path to its location in the base tree, or None if it is gone."""
        for source, destination in reversed(self._events):
            if destination is not None and _is_within(path, destination):
                path = source / path.relative_to(destination)
            elif _is_within(path, source):
                return None
        return path

    def _from_base(self, path: Path) -> Path | None:
        """Map a base path to its previewed location, or None if it was removed."""
        for source, destination in self._events:
            if _is_within(path, source):
                if destination is None:
                    return None
                path = destination / path.relative_to(source)
        return path

    def is_dir(self, path: Path) -> bool:
        base_path = self._to_base(path)
        return base_path is not None and self._base.is_dir(base_path)

    def exists(self, path: Path) -> bool:
        base_path = self._to_base(path)
        return base_path is not None and self._base.exists(base_path)

    def list_dir(self, path: Path) -> list[Path]:
        base_path = self._to_base(path)
        if base_path is None:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))

        candidates = {self._from_base(entry) for entry in self._base.list_dir(base_path)}
        candidates.update(dst for _, dst in self._events if dst is not None and dst.parent == path)
        return sorted(
            entry
            for entry in candidates
            if entry is not None and entry.parent == path and self.exists(entry)
        )

    def rename(self, source: Path, destination: Path) -> None:
        if not self.exists(source):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(source))
        if self.exists(destination):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(destination))
        if not self.is_dir(destination.parent):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(destination))
        self._events.append((source, destination))

    def remove_dir(self, path: Path) -> None:
        if self.list_dir(path):
            raise OSError(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), str(path))
        self._events.append((path, None))
