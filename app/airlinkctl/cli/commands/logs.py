"""Logs command implementation.

Shows the installer log, or the journal of an installed service.
"""

from collections import deque
from enum import Enum
from typing import Annotated

import typer

from airlinkctl.cli.types import get_settings
from airlinkctl.core.settings import InstallerSettings
from airlinkctl.utils.formatting import console, print_error, print_info
from airlinkctl.utils.shell import run_interactive

app = typer.Typer(
    help="Show the installer log or a service journal.",
    invoke_without_command=True,
)


class LogSource(str, Enum):
    """Where to read log lines from."""

    INSTALLER = "installer"
    PANEL = "panel"
    DAEMON = "daemon"


def journal_command(unit: str, lines: int, follow: bool) -> list[str]:
    """Build the journalctl command for a service."""
    args = ["journalctl", "-u", unit, "-n", str(lines), "--no-pager"]
    if follow:
        args.append("-f")
    return args


def _service_for(source: LogSource, settings: InstallerSettings) -> str:
    if source == LogSource.PANEL:
        return settings.panel_service
    return settings.daemon_service


def show_installer_log(settings: InstallerSettings, lines: int = 50) -> None:
    """Print the last lines of the installer log."""
    path = settings.effective_log_path
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            tail = deque(f, maxlen=lines)
    except FileNotFoundError:
        print_info(f"No installer log yet at {path}")
        return
    except OSError as e:
        print_error(f"Cannot read {path}: {e}")
        raise typer.Exit(code=1) from e
    console.print("".join(tail), end="", markup=False, highlight=False)


@app.callback(invoke_without_command=True)
def logs(
    ctx: typer.Context,
    source: Annotated[
        LogSource,
        typer.Option(
            "--source",
            "-s",
            help="installer, panel or daemon.",
            case_sensitive=False,
        ),
    ] = LogSource.INSTALLER,
    lines: Annotated[
        int,
        typer.Option("--lines", "-n", min=1, help="Number of lines to show."),
    ] = 50,
    follow: Annotated[
        bool,
        typer.Option("--follow", "-f", help="Keep following a service journal."),
    ] = False,
) -> None:
    """Show recent log lines.

    Examples:
        airlinkctl logs                     # Last 50 lines of the installer log
        airlinkctl logs -s panel -f         # Follow the panel journal
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = get_settings()

    if source == LogSource.INSTALLER:
        if follow:
            print_info("--follow applies to service journals; showing the installer log")
        show_installer_log(settings, lines)
        return

    unit = _service_for(source, settings)
    try:
        code = run_interactive(journal_command(unit, lines, follow))
    except OSError as e:
        print_error(f"journalctl is not available: {e}")
        raise typer.Exit(code=1) from e
    if code not in (0, 130):
        raise typer.Exit(code=code)
