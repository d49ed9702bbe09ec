"""Interactive menu.

A numbered menu that dispatches to the install, removal, status and log
actions. Destructive actions ask for confirmation first. A fatal error
ends the program with status 1, as with the plain commands.
"""

import typer
from rich.prompt import Confirm, IntPrompt
from rich.table import Table

from airlinkctl import __version__
from airlinkctl.cli.commands.install import run_install
from airlinkctl.cli.commands.logs import show_installer_log
from airlinkctl.cli.commands.remove import run_removal
from airlinkctl.cli.display import create_status_report_table
from airlinkctl.cli.prompts import ask_addons, collect_install_config
from airlinkctl.cli.types import ComponentChoice, fail, open_workflow
from airlinkctl.core.errors import InstallerError
from airlinkctl.core.workflow import InstallWorkflow
from airlinkctl.models.config import InstallConfig
from airlinkctl.utils.formatting import console, print_info

app = typer.Typer(
    help="Interactive menu.",
    invoke_without_command=True,
)

MENU_ITEMS: tuple[tuple[int, str], ...] = (
    (1, "Install Both"),
    (2, "Install Panel"),
    (3, "Install Daemon"),
    (4, "Setup Dependencies Only"),
    (5, "Install Addons"),
    (6, "Remove Panel"),
    (7, "Remove Daemon"),
    (8, "Remove Dependencies"),
    (9, "Remove Everything"),
    (10, "Show Status"),
    (11, "View Logs"),
    (0, "Exit"),
)

_INSTALL_CHOICES = {
    1: ComponentChoice.ALL,
    2: ComponentChoice.PANEL,
    3: ComponentChoice.DAEMON,
    4: ComponentChoice.DEPENDENCIES,
}

_REMOVE_CHOICES = {
    6: (ComponentChoice.PANEL, "Remove Panel?"),
    7: (ComponentChoice.DAEMON, "Remove Daemon?"),
    8: (ComponentChoice.DEPENDENCIES, "Remove Dependencies?"),
    9: (ComponentChoice.ALL, "Remove EVERYTHING?"),
}


def create_menu_table() -> Table:
    """Create the menu table."""
    table = Table(
        title=f"Airlink Installer v{__version__}",
        show_header=False,
        border_style="border",
    )
    table.add_column("Key", justify="right", style="info")
    table.add_column("Action", style="text")
    for key, label in MENU_ITEMS:
        table.add_row(str(key), label)
    return table


def _install(workflow: InstallWorkflow, component: ComponentChoice) -> None:
    if component == ComponentChoice.DEPENDENCIES:
        config = InstallConfig()
    else:
        catalog = workflow.catalog if component == ComponentChoice.ALL else None
        config = collect_install_config(
            InstallConfig(),
            panel=component in (ComponentChoice.ALL, ComponentChoice.PANEL),
            daemon=component in (ComponentChoice.ALL, ComponentChoice.DAEMON),
            catalog=catalog,
        )
    run_install(workflow, component, config)


def handle_choice(workflow: InstallWorkflow, choice: int) -> bool:
    """Run one menu action.

    Returns:
        False when the operator chose to exit.

    Raises:
        InstallerError: If the action fails.
    """
    if choice == 0:
        return False
    if choice in _INSTALL_CHOICES:
        _install(workflow, _INSTALL_CHOICES[choice])
    elif choice == 5:
        addons = ask_addons(workflow.catalog)
        if addons:
            workflow.install_addons(InstallConfig(addons=addons))
        else:
            print_info("No addons selected")
    elif choice in _REMOVE_CHOICES:
        component, question = _REMOVE_CHOICES[choice]
        if Confirm.ask(question, default=False, console=console):
            run_removal(workflow, component)
    elif choice == 10:
        console.print(create_status_report_table(workflow.status()))
    elif choice == 11:
        show_installer_log(workflow.settings)
    return True


@app.callback(invoke_without_command=True)
def menu(ctx: typer.Context) -> None:
    """Open the interactive installer menu."""
    if ctx.invoked_subcommand is not None:
        return

    workflow = open_workflow(ctx)
    choices = [str(key) for key, _ in MENU_ITEMS]
    while True:
        console.print(create_menu_table())
        choice = IntPrompt.ask("Choose action", choices=choices, console=console)
        try:
            if not handle_choice(workflow, choice):
                break
        except InstallerError as e:
            fail(e)
    print_info("Goodbye")
