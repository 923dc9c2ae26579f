"""Filesystem domain models for nested directory repair.

This module defines the immutable records produced while planning and
executing merges: individual planned moves, the outcome of a single
unnest operation, and the report for a whole run.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MoveKind(str, Enum):
    """Kind of filesystem step in a merge plan.

    Attributes:
        MOVE: Lift an entry of the nested directory into the parent.
        STAGE: Rename the nested directory out of the way because one of
            its entries carries the nested directory's own name.
        REMOVE: Remove the emptied nested directory.
    """

    MOVE = "move"
    STAGE = "stage"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class PlannedMove:
    """A single step of a merge plan.

    For REMOVE steps the destination equals the source.

    Attributes:
        source: Path before the step.
        destination: Path after the step.
        kind: What the step does.
        conflict: True if the destination is already taken.
    """

    source: Path
    destination: Path
    kind: MoveKind = MoveKind.MOVE
    conflict: bool = False

    def __post_init__(self) -> None:
        """Validate the step after initialization."""
        if self.kind != MoveKind.REMOVE and self.source == self.destination:
            msg = f"Source and destination must differ: {self.source}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class UnnestResult:
    """Outcome of collapsing one nested directory into its parent.

    Attributes:
        parent: Directory that received the entries.
        nested: The redundant nested directory.
        moves: Every step that was performed (or planned, in dry-run).
        removed_nested: Whether the nested directory was (or would be) removed.
        dry_run: Whether the filesystem was left untouched.
    """

    parent: Path
    nested: Path
    moves: tuple[PlannedMove, ...]
    removed_nested: bool
    dry_run: bool = False

    @property
    def moved_count(self) -> int:
        """Number of entries lifted into the parent."""
        return sum(1 for m in self.moves if m.kind == MoveKind.MOVE)

    @property
    def conflicts(self) -> tuple[PlannedMove, ...]:
        """Steps whose destination was already taken."""
        return tuple(m for m in self.moves if m.conflict)


@dataclass(frozen=True, slots=True)
class FixReport:
    """Summary of a complete run over a directory tree.

    Attributes:
        root: Directory the traversal started from.
        dry_run: Whether the run was a preview.
        skip_name_match: Whether any single nested directory qualified.
        visited: Number of directories inspected.
        merges: One result per collapsed directory, in visit order.
    """

    root: Path
    dry_run: bool
    skip_name_match: bool
    visited: int
    merges: tuple[UnnestResult, ...] = ()

    @property
    def merge_count(self) -> int:
        """Number of merges performed or planned."""
        return len(self.merges)

    @property
    def mutated(self) -> bool:
        """True if the run changed anything on disk."""
        return not self.dry_run and any(m.moves for m in self.merges)
