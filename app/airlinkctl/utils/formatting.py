"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich. Every message
printed through the ``print_*`` helpers is also forwarded to the installer
log so the log file mirrors what the operator saw on screen.
"""

from __future__ import annotations

import logging
import sys
import time

from rich.console import Console
from rich.table import Table

from airlinkctl.core.theme import get_theme

# Messages shown to the operator, mirrored into the log file
_log = logging.getLogger("airlinkctl.console")


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_status_table(title: str = "Airlink Status") -> Table:
    """Create a pre-configured two-column table for status reports.

    Args:
        title: Table title.

    Returns:
        Rich Table with Item and Value columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Item", style="text", no_wrap=True)
    table.add_column("Value")
    return table


def format_service_state(state: str) -> str:
    """Format a systemd ``is-active`` state with color markup.

    Args:
        state: State string as reported by systemctl (e.g. "active").

    Returns:
        Rich markup string for status display.
    """
    if state == "active":
        return f"[active]{state}[/]"
    return f"[inactive]{state}[/]"


def print_info(message: str) -> None:
    """Print an info message."""
    _log.info(message)
    console.print(f"[info][INFO][/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    _log.warning(message)
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    _log.error(message)
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    _log.info("OK: %s", message)
    console.print(f"[success][OK][/] {message}")


def countdown(seconds: int, message: str) -> None:
    """Show a one-line countdown, blocking for ``seconds`` seconds.

    KeyboardInterrupt is not caught here; callers decide what an abort means.

    Args:
        seconds: Number of seconds to count down from.
        message: Warning text shown next to the remaining seconds.
    """
    _log.warning("%s (countdown %ds)", message, seconds)
    with console.status("", spinner="dots") as status:
        for remaining in range(seconds, 0, -1):
            status.update(f"[countdown]{message} - continuing in {remaining}s (Ctrl+C to abort)[/]")
            time.sleep(1)
