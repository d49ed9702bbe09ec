"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from airlinkctl import __version__
from airlinkctl.cli.commands import addons, config, install, logs, menu, remove, status
from airlinkctl.utils.formatting import console

# Create main Typer app
app = typer.Typer(
    name="airlinkctl",
    help="Installer for the Airlink panel and daemon.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"airlinkctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Write debug details to the installer log.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """airlinkctl - Install and manage the Airlink panel and daemon.

    Provisions Node.js and Docker, installs the panel and daemon as
    systemd services, creates the first admin account and manages addons.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    console.quiet = quiet


# Register commands
app.add_typer(menu.app, name="menu")
app.add_typer(install.app, name="install")
app.add_typer(remove.app, name="remove")
app.add_typer(addons.app, name="addons")
app.add_typer(status.app, name="status")
app.add_typer(logs.app, name="logs")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
