"""Run orchestration for fixing redundant nested directories.

Feeds every directory produced by the walker to the resolver and stops
at the first merge that fails. Unreadable or vanished directories found
during the walk are skipped.
"""

import logging
from pathlib import Path

from nestfix.filesystem.backend import FilesystemBackend, LocalFilesystem, PreviewFilesystem
from nestfix.filesystem.models import FixReport, PlannedMove, UnnestResult
from nestfix.filesystem.operator import UnnestError
from nestfix.filesystem.resolver import NestingResolver
from nestfix.filesystem.walker import DirectoryWalker

logger = logging.getLogger(__name__)


class FixError(Exception):
    """Raised when a run is aborted by a failed merge.

    Attributes:
        path: The path the failing operation was working on.
        completed: Merges finished before the failure. When the run was
            not a dry-run, these have already changed the filesystem.
        applied: Steps of the failing merge carried out before it failed,
            such as entries already moved or a staging rename.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        completed: tuple[UnnestResult, ...] = (),
        applied: tuple[PlannedMove, ...] = (),
    ) -> None:
        super().__init__(message)
        self.path = path
        self.completed = completed
        self.applied = applied

    @property
    def mutated(self) -> bool:
        """True if anything was changed before the failure."""
        return bool(self.completed or self.applied)


def fix_nested_directories(
    root: Path,
    skip_name_match: bool = False,
    dry_run: bool = False,
    *,
    backend: FilesystemBackend | None = None,
) -> FixReport:
    """Collapse every redundantly nested directory under root.

    Each directory is inspected once, in depth-first order, based on its
    contents at the moment it is visited. Nesting that only appears after
    a merge higher up may need another run to collapse. A dry-run sees the
    tree as the merges planned so far would leave it, so it reports the same
    merges a real run would make.

    Args:
        root: Directory to start from. A path that is not a directory
            results in an empty report.
        skip_name_match: If True, any single nested directory is merged
            regardless of its name.
        dry_run: If True, report merges without modifying the filesystem.
        backend: Filesystem access. Defaults to the local filesystem.

    Returns:
        FixReport listing every merge performed (or planned).

    Raises:
        FixError: If a merge fails. No further directories are processed.
    """
    logger.info("Starting to fix redundant nested directories")

    fs = backend or LocalFilesystem()
    if dry_run:
        # Walker and merges share one preview so later decisions see earlier merges
        fs = PreviewFilesystem(fs)
    resolver = NestingResolver(skip_name_match=skip_name_match, dry_run=dry_run, backend=fs)

    merges: list[UnnestResult] = []
    visited = 0
    for directory in DirectoryWalker(root, backend=fs):
        visited += 1
        try:
            result = resolver.resolve(directory)
        except UnnestError as e:
            raise FixError(
                str(e), path=e.path, completed=tuple(merges), applied=e.applied
            ) from e
        if result is not None:
            merges.append(result)

    logger.debug("Visited %d directories, %d merges", visited, len(merges))
    return FixReport(
        root=root,
        dry_run=dry_run,
        skip_name_match=skip_name_match,
        visited=visited,
        merges=tuple(merges),
    )
