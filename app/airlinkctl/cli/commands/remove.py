"""Remove command implementation.

Stops, disables and deletes installed components. Removing a component
that is not installed is not an error.
"""

from typing import Annotated

import typer
from rich.prompt import Confirm

from airlinkctl.cli.types import ComponentChoice, fail, open_workflow
from airlinkctl.core.errors import InstallerError
from airlinkctl.core.workflow import InstallWorkflow
from airlinkctl.utils.formatting import console, print_info, print_warning

app = typer.Typer(
    help="Remove the panel, the daemon or dependencies.",
    invoke_without_command=True,
)

_WARNINGS = {
    ComponentChoice.ALL: "This removes the panel, the daemon, Node.js, npm and Docker.",
    ComponentChoice.PANEL: "This deletes the panel, its database and all addons.",
    ComponentChoice.DAEMON: "This deletes the daemon and its configuration.",
    ComponentChoice.DEPENDENCIES: "This removes Node.js, npm and Docker from the system.",
}


def run_removal(workflow: InstallWorkflow, component: ComponentChoice) -> None:
    """Remove the chosen component.

    Raises:
        InstallerError: If a directory cannot be deleted.
    """
    if component == ComponentChoice.ALL:
        workflow.remove_everything()
    elif component == ComponentChoice.PANEL:
        workflow.remove_panel()
    elif component == ComponentChoice.DAEMON:
        workflow.remove_daemon()
    else:
        workflow.remove_dependencies()


@app.callback(invoke_without_command=True)
def remove(
    ctx: typer.Context,
    component: Annotated[
        ComponentChoice,
        typer.Option(
            "--component",
            "-c",
            help="What to remove: all, panel, daemon or dependencies.",
            case_sensitive=False,
        ),
    ],
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
) -> None:
    """Remove Airlink components.

    Examples:
        airlinkctl remove -c daemon         # Remove the daemon
        airlinkctl remove -c all --yes      # Remove everything
    """
    if ctx.invoked_subcommand is not None:
        return

    workflow = open_workflow(ctx)
    print_warning(_WARNINGS[component])
    if not yes and not Confirm.ask("Continue?", default=False, console=console):
        print_info("Aborted. Nothing was removed.")
        raise typer.Exit(code=0)

    try:
        run_removal(workflow, component)
    except InstallerError as e:
        fail(e)
