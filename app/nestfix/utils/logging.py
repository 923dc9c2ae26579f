"""Logging setup for the command-line interface.

Library modules only create module-level loggers. Handlers are attached
here, once, by the CLI entry point.
"""

import logging

from rich.logging import RichHandler

from nestfix.utils.formatting import err_console

_LOG_FORMAT = "%(message)s"


def resolve_level(verbose: bool, quiet: bool, default: str = "INFO") -> int:
    """Pick the effective log level from CLI flags and the configured default.

    --verbose wins over --quiet, and both win over the default.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.getLevelNamesMapping().get(default.upper(), logging.INFO)


def configure_logging(verbose: bool = False, quiet: bool = False, default: str = "INFO") -> int:
    """Route the nestfix loggers to stderr through Rich.

    Safe to call repeatedly; previously installed handlers are replaced.

    Args:
        verbose: Enable debug output.
        quiet: Only show warnings and errors.
        default: Level name used when neither flag is set.

    Returns:
        The level that was applied.
    """
    level = resolve_level(verbose, quiet, default)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger = logging.getLogger("nestfix")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    return level
