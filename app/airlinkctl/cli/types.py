"""Shared types and utilities for CLI commands.

This module provides the component choice enum and the session setup
used by every command that touches the system: root check, settings,
log file and host detection.
"""

import os
from enum import Enum
from typing import NoReturn

import typer

from airlinkctl.core.errors import InstallerError
from airlinkctl.core.host import detect_host
from airlinkctl.core.log import configure_logging
from airlinkctl.core.settings import InstallerSettings, load_settings
from airlinkctl.core.workflow import InstallWorkflow
from airlinkctl.utils.formatting import print_error


class ComponentChoice(str, Enum):
    """Components the install and remove commands act on."""

    ALL = "all"
    PANEL = "panel"
    DAEMON = "daemon"
    DEPENDENCIES = "dependencies"


def fail(error: Exception) -> NoReturn:
    """Report a fatal error and exit with status 1."""
    print_error(str(error))
    raise typer.Exit(code=1) from error


def require_root() -> None:
    """Exit unless running as root."""
    if os.geteuid() != 0:
        print_error("This command must be run as root (try sudo).")
        raise typer.Exit(code=1)


def get_settings() -> InstallerSettings:
    """Load installer settings, exiting on invalid configuration."""
    try:
        return load_settings()
    except InstallerError as e:
        fail(e)


def _is_verbose(ctx: typer.Context) -> bool:
    obj = ctx.find_root().obj
    return bool(obj.get("verbose")) if isinstance(obj, dict) else False


def open_workflow(ctx: typer.Context) -> InstallWorkflow:
    """Prepare a workflow for a system-changing command.

    Checks for root, loads settings, opens the installer log and detects
    the host.
    """
    require_root()
    settings = get_settings()
    configure_logging(settings.effective_log_path, verbose=_is_verbose(ctx))
    try:
        profile = detect_host()
    except InstallerError as e:
        fail(e)
    return InstallWorkflow(settings, profile)
