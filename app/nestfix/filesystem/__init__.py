"""Filesystem traversal and nested directory repair.

This module provides the depth-first directory walker, the nesting
resolver that decides which directories to collapse, and the merge
operator that performs (or previews) the collapse.
"""

from nestfix.filesystem.backend import FilesystemBackend, LocalFilesystem, PreviewFilesystem
from nestfix.filesystem.models import FixReport, MoveKind, PlannedMove, UnnestResult
from nestfix.filesystem.operator import UnnestCollisionError, UnnestError, UnnestOperator
from nestfix.filesystem.resolver import (
    NestingResolver,
    count_nested_dirs,
    find_nested_dir,
    list_qualifying_dirs,
)
from nestfix.filesystem.walker import DirectoryWalker

__all__ = [
    "DirectoryWalker",
    "FilesystemBackend",
    "FixReport",
    "LocalFilesystem",
    "MoveKind",
    "NestingResolver",
    "PlannedMove",
    "PreviewFilesystem",
    "UnnestCollisionError",
    "UnnestError",
    "UnnestOperator",
    "UnnestResult",
    "count_nested_dirs",
    "find_nested_dir",
    "list_qualifying_dirs",
]
