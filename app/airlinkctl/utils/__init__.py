"""Utility modules for airlinkctl.

This module exports commonly used utility functions.
"""

from airlinkctl.utils.formatting import (
    console,
    countdown,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from airlinkctl.utils.shell import (
    CommandError,
    CommandResult,
    CommandTimeoutError,
    command_exists,
    run_command,
    run_step,
)

__all__ = [
    "CommandError",
    "CommandResult",
    "CommandTimeoutError",
    "command_exists",
    "console",
    "countdown",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_step",
]
