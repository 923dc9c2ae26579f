"""Utility modules for nestfix.

This module exports commonly used utility functions.
"""

from nestfix.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from nestfix.utils.logging import configure_logging

__all__ = [
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
