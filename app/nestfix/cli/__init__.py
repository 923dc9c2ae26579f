"""CLI package for nestfix.

This package contains the Typer application and all subcommands.
"""

from nestfix.cli.main import app

__all__ = ["app"]
