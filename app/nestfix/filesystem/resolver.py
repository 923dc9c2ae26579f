"""Detection of redundant directory nesting.

A directory is redundantly nested when exactly one of its immediate
subdirectories qualifies: by default a subdirectory carrying the same
name as its parent, or any subdirectory when name matching is skipped.
Files and non-qualifying subdirectories next to it do not matter.
"""

import logging
from pathlib import Path

from nestfix.filesystem.backend import FilesystemBackend, LocalFilesystem
from nestfix.filesystem.models import UnnestResult
from nestfix.filesystem.operator import UnnestOperator

logger = logging.getLogger(__name__)


def list_qualifying_dirs(
    directory: Path,
    skip_name_match: bool,
    backend: FilesystemBackend,
) -> list[Path]:
    """List the immediate subdirectories that qualify for a merge.

    Read-only. If the directory's own name cannot be determined (for
    example ``/``), name matching fails for every entry.

    Args:
        directory: Directory to inspect.
        skip_name_match: If True, every subdirectory qualifies.
        backend: Filesystem access.

    Returns:
        Qualifying subdirectories, in listing order.

    Raises:
        OSError: If the directory cannot be read.
    """
    parent_name = directory.name
    if not parent_name and not skip_name_match:
        logger.error("Failed to get file name for %s", directory)

    qualifying: list[Path] = []
    for entry in backend.list_dir(directory):
        # is_dir() reports inaccessible entries as non-directories
        if not backend.is_dir(entry):
            continue
        if skip_name_match:
            qualifying.append(entry)
            continue
        name_matches = bool(parent_name) and entry.name == parent_name
        logger.debug("Directory: %s, name matches: %s", entry, name_matches)
        if name_matches:
            qualifying.append(entry)

    return qualifying


def _counted_qualifying_dirs(
    directory: Path,
    skip_name_match: bool,
    backend: FilesystemBackend | None,
) -> list[Path]:
    qualifying = list_qualifying_dirs(directory, skip_name_match, backend or LocalFilesystem())
    logger.debug("Counted %d nested directories in %s", len(qualifying), directory)
    return qualifying


def count_nested_dirs(
    directory: Path,
    skip_name_match: bool = False,
    backend: FilesystemBackend | None = None,
) -> int:
    """Count the qualifying nested directories of a directory.

    Raises:
        OSError: If the directory cannot be read.
    """
    return len(_counted_qualifying_dirs(directory, skip_name_match, backend))


def find_nested_dir(
    directory: Path,
    skip_name_match: bool = False,
    backend: FilesystemBackend | None = None,
) -> Path | None:
    """Return the single qualifying nested directory, if there is exactly one.

    Zero candidates means nothing to do and two or more is ambiguous;
    both return None.

    Raises:
        OSError: If the directory cannot be read.
    """
    qualifying = _counted_qualifying_dirs(directory, skip_name_match, backend)
    if len(qualifying) != 1:
        return None
    return qualifying[0]


class NestingResolver:
    """Decides, per directory, whether to collapse a nested directory.

    Args:
        skip_name_match: If True, any single subdirectory qualifies
            regardless of its name.
        dry_run: If True, report merges without modifying the filesystem.
        backend: Filesystem access. Defaults to the local filesystem.
    """

    def __init__(
        self,
        *,
        skip_name_match: bool = False,
        dry_run: bool = False,
        backend: FilesystemBackend | None = None,
    ) -> None:
        self._skip_name_match = skip_name_match
        self._backend = backend or LocalFilesystem()
        self._operator = UnnestOperator(dry_run=dry_run, backend=self._backend)

    def resolve(self, directory: Path) -> UnnestResult | None:
        """Collapse the directory's nested directory if exactly one qualifies.

        A directory that can no longer be read (typically a path queued
        before a merge elsewhere moved it) is skipped.

        Args:
            directory: Directory to inspect.

        Returns:
            The merge result, or None if nothing was merged.

        Raises:
            UnnestError: If the merge itself fails.
        """
        try:
            nested = find_nested_dir(directory, self._skip_name_match, self._backend)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            return None

        if nested is None:
            return None

        return self._operator.unnest(directory, nested)
