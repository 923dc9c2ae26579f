"""Nested directory repair command.

Walks a directory tree and collapses every directory whose only
qualifying content is a single nested directory.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.table import Table

from nestfix.core.config import ConfigError, load_config
from nestfix.core.fixer import FixError, fix_nested_directories
from nestfix.filesystem.models import FixReport, MoveKind, UnnestResult
from nestfix.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from nestfix.utils.logging import configure_logging


class OutputFormat(str, Enum):
    """Output format options for the fix report."""

    TABLE = "table"
    JSON = "json"


def fix(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(
            help="Root directory to search for redundant nesting.",
            resolve_path=True,
        ),
    ],
    skip_name_match: Annotated[
        bool,
        typer.Option(
            "--skip-name-match",
            "-s",
            help="Merge a single nested directory even if its name differs from its parent.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be merged without changing anything.",
        ),
    ] = False,
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Make changes even if dry_run is enabled in the config."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Collapse directories that only contain a same-named directory.

    For example photos/photos/img.jpg becomes photos/img.jpg.
    """
    if dry_run and apply:
        print_error("--dry-run and --apply cannot be used together.")
        raise typer.Exit(code=1)

    try:
        config = load_config()
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    obj: dict[str, Any] = ctx.obj or {}
    configure_logging(
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
        default=config.log_level,
    )

    skip_name_match = skip_name_match or config.skip_name_match
    dry_run = (dry_run or config.dry_run) and not apply

    if not path.is_dir():
        print_warning(f"Not a directory, nothing to do: {escape(str(path))}")
        return

    try:
        report = fix_nested_directories(path, skip_name_match=skip_name_match, dry_run=dry_run)
    except FixError as e:
        print_error(escape(str(e)))
        _print_failure_context(e, dry_run)
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(_report_to_dict(report)))
        return

    if not report.merges:
        print_success(f"No redundant nesting found in {report.visited} directories.")
        return

    _print_merges_table(report)
    _print_summary(report)


# === Private helper functions ===


def _print_merges_table(report: FixReport) -> None:
    """Display every merge step as a Rich table."""
    title = "Planned Merges (dry-run)" if report.dry_run else "Merges"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Step", width=8, justify="center")
    table.add_column("Source", style="path")
    table.add_column("Destination")

    for merge in report.merges:
        for move in merge.moves:
            if move.kind == MoveKind.REMOVE:
                table.add_row("[removed]-remove[/]", escape(str(move.source)), "[muted]-[/]")
                continue
            step = "[staged]~stage[/]" if move.kind == MoveKind.STAGE else "[moved]+move[/]"
            destination = escape(str(move.destination))
            if move.conflict:
                destination = f"[error]{destination} (exists)[/]"
            table.add_row(step, escape(str(move.source)), destination)

    console.print(table)


def _print_summary(report: FixReport) -> None:
    """Print the outcome of a run."""
    moved = sum(m.moved_count for m in report.merges)
    conflicts = sum(len(m.conflicts) for m in report.merges)

    if report.dry_run:
        print_info(
            f"Dry-run: {report.merge_count} merge(s) planned, "
            f"{moved} entries would move. No changes were made."
        )
        if conflicts:
            print_warning(f"{conflicts} entries would collide with existing paths.")
        return

    print_success(f"Collapsed {report.merge_count} nested directories, {moved} entries moved.")


def _print_failure_context(error: FixError, dry_run: bool) -> None:
    """Tell the user what state the tree was left in after a failed run."""
    print_error(f"Failed at: {escape(str(error.path))}")
    if dry_run or not error.mutated:
        print_info("No changes were made.")
        return

    if error.completed:
        print_warning(f"{len(error.completed)} merge(s) were applied before the failure.")
        for merge in error.completed:
            print_info(f"  merged {escape(str(merge.nested))} into {escape(str(merge.parent))}")

    if error.applied:
        print_warning(
            f"The failing merge was left half done: {len(error.applied)} step(s) applied."
        )
        for move in error.applied:
            print_info(f"  moved {escape(str(move.source))} to {escape(str(move.destination))}")
        for move in error.applied:
            if move.kind == MoveKind.STAGE:
                print_warning(f"Staging directory left at {escape(str(move.destination))}")

    print_warning(f"Resolve {escape(str(error.path))} manually and run again.")


def _merge_to_dict(merge: UnnestResult) -> dict[str, Any]:
    return {
        "parent": str(merge.parent),
        "nested": str(merge.nested),
        "removed_nested": merge.removed_nested,
        "moves": [
            {
                "kind": move.kind.value,
                "source": str(move.source),
                "destination": str(move.destination),
                "conflict": move.conflict,
            }
            for move in merge.moves
        ],
    }


def _report_to_dict(report: FixReport) -> dict[str, Any]:
    return {
        "root": str(report.root),
        "dry_run": report.dry_run,
        "skip_name_match": report.skip_name_match,
        "visited": report.visited,
        "mutated": report.mutated,
        "merges": [_merge_to_dict(m) for m in report.merges],
    }
