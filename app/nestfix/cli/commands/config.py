"""Configuration commands.

Provides commands to inspect and create the user configuration file
holding defaults for ``nestfix fix``.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from nestfix.core.config import ConfigError, NestfixConfig, load_config, save_config
from nestfix.core.paths import get_config_path
from nestfix.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the nestfix configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config_path = get_config_path()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    source = str(config_path) if config_path.exists() else "built-in defaults"
    table = Table(
        title="Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    for name, value in config.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)
    console.print(f"[dim]Source: {escape(source)}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(f"Config already exists: {escape(str(config_path))} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(NestfixConfig(), config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {escape(str(saved))}")


@app.command()
def path() -> None:
    """Print the location of the config file."""
    print_info(escape(str(get_config_path())))
