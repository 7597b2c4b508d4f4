"""Utility modules for rtwctl.

This module exports commonly used utility functions.
"""

from rtwctl.utils.formatting import (
    console,
    err_console,
    print_command,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from rtwctl.utils.shell import CommandResult, command_exists, run_command, run_interactive

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_interactive",
]
