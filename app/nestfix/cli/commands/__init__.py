"""CLI commands for nestfix.

This package contains all subcommand implementations.
"""

from nestfix.cli.commands import config, fix

__all__ = ["config", "fix"]
