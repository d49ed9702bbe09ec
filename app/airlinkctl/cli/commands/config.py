"""Settings commands.

Shows, creates and locates the installer settings file.
"""

from typing import Annotated

import tomli_w
import typer

from airlinkctl.cli.types import fail, get_settings
from airlinkctl.core.errors import InstallerError
from airlinkctl.core.paths import get_settings_path
from airlinkctl.core.settings import InstallerSettings, save_settings
from airlinkctl.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Manage installer settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective settings as TOML."""
    settings = get_settings()
    text = tomli_w.dumps(settings.model_dump(mode="json", exclude_none=True))
    console.print(text, markup=False, highlight=False)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_warning(f"Settings file already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)
    try:
        saved = save_settings(InstallerSettings(), path)
    except InstallerError as e:
        fail(e)
    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the settings file location."""
    console.print(str(get_settings_path()), markup=False, highlight=False)
