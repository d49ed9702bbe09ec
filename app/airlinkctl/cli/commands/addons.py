"""Addon commands.

Lists the addon catalog and installs or removes addons of the panel.
"""

from typing import Annotated

import typer
from rich.prompt import Confirm

from airlinkctl.cli.display import create_addons_table
from airlinkctl.cli.types import fail, get_settings, open_workflow
from airlinkctl.core.addons import load_addon_catalog
from airlinkctl.core.errors import InstallerError
from airlinkctl.models.config import InstallConfig
from airlinkctl.utils.formatting import console, print_info

app = typer.Typer(
    help="List, install and remove panel addons.",
    no_args_is_help=True,
)


@app.command("list")
def list_addons() -> None:
    """List the addons in the catalog."""
    settings = get_settings()
    try:
        catalog = load_addon_catalog()
    except InstallerError as e:
        fail(e)
    installed = tuple(
        entry.display_name
        for entry in catalog.values()
        if (settings.addons_dir / entry.directory).is_dir()
    )
    console.print(create_addons_table(catalog, installed))


@app.command("install")
def install_addons(
    ctx: typer.Context,
    keys: Annotated[list[str], typer.Argument(help="Catalog keys of the addons.")],
) -> None:
    """Install one or more addons into the panel."""
    workflow = open_workflow(ctx)
    try:
        workflow.install_addons(InstallConfig(addons=tuple(keys)))
    except InstallerError as e:
        fail(e)


@app.command("remove")
def remove_addon(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Catalog key of the addon.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt and proceed."),
    ] = False,
) -> None:
    """Remove an addon from the panel."""
    workflow = open_workflow(ctx)
    if not yes and not Confirm.ask(f"Remove addon '{key}'?", default=False, console=console):
        print_info("Aborted. Nothing was removed.")
        raise typer.Exit(code=0)
    try:
        workflow.remove_addon(key)
    except InstallerError as e:
        fail(e)
