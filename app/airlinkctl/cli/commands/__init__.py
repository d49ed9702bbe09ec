"""CLI commands for airlinkctl.

This package contains all subcommand implementations.
"""

from airlinkctl.cli.commands import addons, config, install, logs, menu, remove, status

__all__ = ["addons", "config", "install", "logs", "menu", "remove", "status"]
