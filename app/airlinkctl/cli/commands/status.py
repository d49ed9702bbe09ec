"""Status command implementation."""

import typer

from airlinkctl.cli.display import create_status_report_table
from airlinkctl.cli.types import fail, get_settings
from airlinkctl.core.errors import InstallerError
from airlinkctl.core.host import detect_host
from airlinkctl.core.workflow import InstallWorkflow
from airlinkctl.utils.formatting import console

app = typer.Typer(
    help="Show service states and installed tool versions.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def status(ctx: typer.Context) -> None:
    """Show the state of the panel and daemon services.

    Does not require root.
    """
    if ctx.invoked_subcommand is not None:
        return

    settings = get_settings()
    try:
        profile = detect_host()
    except InstallerError as e:
        fail(e)
    report = InstallWorkflow(settings, profile).status()
    console.print(create_status_report_table(report))
