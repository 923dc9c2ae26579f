"""Merge operator that lifts a nested directory's entries into its parent.

Handles planning and executing a merge with dry-run support. Both modes
run the same steps; in dry-run they land on a preview of the tree
instead of the disk.
"""

import logging
from pathlib import Path

from nestfix.filesystem.backend import FilesystemBackend, LocalFilesystem, PreviewFilesystem
from nestfix.filesystem.models import MoveKind, PlannedMove, UnnestResult

logger = logging.getLogger(__name__)

_STAGING_SUFFIX = "nestfix"


class UnnestError(Exception):
    """Raised when a nested directory cannot be merged into its parent.

    Attributes:
        path: The path the failing operation was working on.
        applied: Steps of the failing merge that had already been carried
            out when it failed.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        applied: tuple[PlannedMove, ...] = (),
    ) -> None:
        super().__init__(message)
        self.path = path
        self.applied = applied


class UnnestCollisionError(UnnestError):
    """Raised when an entry would overwrite an existing path in the parent."""


class UnnestOperator:
    """Merges a single nested directory into its parent.

    Every entry of the nested directory is renamed to ``parent / entry.name``
    and the emptied nested directory is removed. Existing destinations are
    never overwritten: all destinations are checked before the first rename
    and a collision aborts the merge with nothing moved.

    When the nested directory contains an entry with its own name
    (``a/a/a``), that entry's destination is the nested directory itself.
    The nested directory is then first renamed to a hidden staging name
    inside the parent and emptied from there.

    In dry-run every step is applied to a PreviewFilesystem instead of the
    real backend, so later merges are planned against the tree this merge
    would leave behind.

    Attributes:
        _dry_run: If True, report the merge without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False, backend: FilesystemBackend | None = None) -> None:
        """Initialize the UnnestOperator.

        Args:
            dry_run: If True, report what would be moved without moving.
            backend: Filesystem access. Defaults to the local filesystem.
        """
        self._dry_run = dry_run
        backend = backend or LocalFilesystem()
        if dry_run and not isinstance(backend, PreviewFilesystem):
            backend = PreviewFilesystem(backend)
        self._backend = backend

    def plan(self, parent: Path, nested: Path) -> list[PlannedMove]:
        """Compute the renames needed to merge nested into parent.

        Read-only. The removal of the nested directory is not part of the
        returned plan.

        Args:
            parent: Directory receiving the entries.
            nested: Directory being emptied.

        Returns:
            Planned STAGE and MOVE steps in execution order. Steps whose
            destination is already taken are flagged with ``conflict``.

        Raises:
            UnnestError: If nested is not a readable directory or an entry
                has no usable name.
        """
        if not self._backend.is_dir(nested):
            raise UnnestError(f"Not a directory: {nested}", path=nested)

        try:
            entries = self._backend.list_dir(nested)
        except OSError as e:
            raise UnnestError(f"Failed to list {nested}: {e}", path=nested) from e

        names: list[str] = []
        for entry in entries:
            if not entry.name:
                raise UnnestError(f"Failed to get file name for {entry}", path=entry)
            names.append(entry.name)

        moves: list[PlannedMove] = []
        source_dir = nested
        if nested.name in names:
            source_dir = self._staging_path(parent, nested.name, set(names))
            moves.append(PlannedMove(source=nested, destination=source_dir, kind=MoveKind.STAGE))

        for name in names:
            destination = parent / name
            # The nested directory's own slot is freed by staging
            conflict = destination != nested and self._backend.exists(destination)
            moves.append(
                PlannedMove(source=source_dir / name, destination=destination, conflict=conflict)
            )

        return moves

    def unnest(self, parent: Path, nested: Path) -> UnnestResult:
        """Merge nested into parent.

        Args:
            parent: Directory receiving the entries.
            nested: Its single qualifying nested directory.

        Returns:
            UnnestResult describing what was done (or would be done).

        Raises:
            UnnestCollisionError: If a destination already exists (not in dry-run).
            UnnestError: If listing, renaming or removing fails. Steps
                completed before the failure are set on ``applied``.
        """
        moves = self.plan(parent, nested)
        conflicts = [m for m in moves if m.conflict]

        if conflicts and not self._dry_run:
            taken = conflicts[0].destination
            raise UnnestCollisionError(
                f"Cannot merge {nested} into {parent}: {taken} already exists",
                path=taken,
            )

        logger.info("Moving contents from %s to %s", nested, parent)

        applied: list[PlannedMove] = []
        try:
            for move in moves:
                if move.conflict:
                    logger.warning("Dry-run: %s already exists, merge would fail", move.destination)
                    continue
                self._rename(move)
                applied.append(move)

            emptied = moves[0].destination if moves and moves[0].kind == MoveKind.STAGE else nested
            removed = self._remove_if_empty(emptied, blocked=bool(conflicts))
        except UnnestError as e:
            e.applied = tuple(applied)
            raise
        if removed:
            moves.append(PlannedMove(source=emptied, destination=emptied, kind=MoveKind.REMOVE))

        return UnnestResult(
            parent=parent,
            nested=nested,
            moves=tuple(moves),
            removed_nested=removed,
            dry_run=self._dry_run,
        )

    def _rename(self, move: PlannedMove) -> None:
        """Perform (or preview) a single STAGE or MOVE step."""
        if self._dry_run:
            logger.info("Dry-run: would move %s to %s", move.source, move.destination)
        else:
            logger.info("Moving %s to %s", move.source, move.destination)
        try:
            self._backend.rename(move.source, move.destination)
        except OSError as e:
            raise UnnestError(
                f"Failed to move {move.source} to {move.destination}: {e}",
                path=move.source,
            ) from e

    def _remove_if_empty(self, directory: Path, *, blocked: bool) -> bool:
        """Remove the emptied nested directory.

        In dry-run a merge blocked by a conflicting move keeps its nested
        directory without a warning; the conflict has already been reported.

        Returns:
            True if the directory was (or would be) removed.
        """
        if self._dry_run and blocked:
            return False

        try:
            remaining = self._backend.list_dir(directory)
        except OSError as e:
            raise UnnestError(f"Failed to list {directory}: {e}", path=directory) from e

        if remaining:
            logger.warning(
                "Nested directory %s is not empty after merge, leaving it in place", directory
            )
            return False

        if self._dry_run:
            logger.info("Dry-run: would remove empty nested directory %s", directory)
        else:
            logger.info("Removing empty nested directory %s", directory)
        try:
            self._backend.remove_dir(directory)
        except OSError as e:
            raise UnnestError(f"Failed to remove {directory}: {e}", path=directory) from e
        return True

    def _staging_path(self, parent: Path, name: str, taken: set[str]) -> Path:
        """Find a free hidden name in parent to park the nested directory under."""
        n = 0
        while True:
            candidate = parent / f".{name}.{_STAGING_SUFFIX}-{n}"
            if candidate.name not in taken and not self._backend.exists(candidate):
                return candidate
            n += 1
