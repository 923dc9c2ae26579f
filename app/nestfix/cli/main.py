"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from nestfix import __version__
from nestfix.cli.commands import config, fix

# Create main Typer app
app = typer.Typer(
    name="nestfix",
    help="Collapse redundantly nested directories.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"nestfix version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output, including every directory inspected.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only show warnings and errors.",
        ),
    ] = False,
) -> None:
    """nestfix - collapse redundantly nested directories.

    Finds directories like photos/photos/ and moves the inner
    directory's contents up one level.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="fix")(fix.fix)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
